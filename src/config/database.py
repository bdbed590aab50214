import contextlib
import sys
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.config.settings import settings
from src.models.base import BaseModel

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


def create_engine(url: str):
    use_echo = settings.LOG_DB
    connect_args = {}
    engine_kwargs = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
    if ":memory:" in url:
        # every connection must see the same in-memory database
        connect_args["check_same_thread"] = False
        engine_kwargs["poolclass"] = StaticPool
    return create_async_engine(
        url,
        echo=use_echo,
        connect_args=connect_args,
        **engine_kwargs,
    )


engine = create_engine(settings.local_store_url)
if "pytest" in sys.modules:
    # tests never touch the on-disk fallback store
    engine = create_engine(TEST_DB_URL)


async def init_local_store() -> None:
    """Create the local store tables if they do not exist yet."""
    # register the mapped tables on the metadata
    from src.email_service import orm_models as _email_models  # noqa: F401
    from src.rsvps.repository import orm_models as _rsvp_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def drop_local_store() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
