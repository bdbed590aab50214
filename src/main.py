import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.database import init_local_store
from src.config.logging import setup_logging
from src.config.settings import settings
from src.reminders.router import router as reminders_router
from src.routers.healthz.router import router as healthz_router
from src.rsvps.routers import router as rsvps_router

logger = logging.getLogger(__name__)


def check_configuration() -> None:
    """Report missing credentials at startup instead of failing on first use."""
    if not settings.remote_store_configured:
        if settings.storage_fallback_enabled:
            logger.warning("Remote store credentials missing, RSVPs will be kept in the local store")
        else:
            logger.error(
                "Remote store credentials missing and fallback disabled, RSVP storage will fail"
            )
    if not settings.email_relay_configured:
        logger.warning("Email relay public key or service id missing, emails will not be sent")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()
    if settings.CREATE_LOCAL_STORE_ON_STARTUP:
        await init_local_store()
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Halloween Party RSVP API",
    description="API for party RSVPs, the bring-along summary and guest reminders",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(rsvps_router, tags=["RSVPs"])
app.include_router(reminders_router, tags=["Reminders"])


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Harry Potter Halloween Party RSVP API"}
