from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.config.settings import settings
from src.rsvps.dtos import StorageMode
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    storage: StorageMode
    fallback_enabled: bool
    email_relay_configured: bool


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
) -> HealthCheckResponse:
    """
    Health check endpoint, also reporting which RSVP store is in use.
    """
    return HealthCheckResponse(
        status="healthy",
        storage=gateway.storage_mode,
        fallback_enabled=settings.storage_fallback_enabled,
        email_relay_configured=settings.email_relay_configured,
    )
