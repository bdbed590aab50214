"""Local key-value store backing the fallback mode of the RSVP gateway."""

from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.repository.orm_models import LocalStoreEntry


class LocalStore(ABC):
    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored string for ``key`` or None."""
        raise NotImplementedError

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError


class SqlLocalStore(LocalStore):
    """SQLite implementation of the local store."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_item(self, key: str) -> str | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(LocalStoreEntry.value).where(LocalStoreEntry.key == key)
            )
            return result.scalar_one_or_none()

    async def set_item(self, key: str, value: str) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(LocalStoreEntry).where(LocalStoreEntry.key == key))
            entry = result.scalar_one_or_none()
            if entry is None:
                session.add(LocalStoreEntry(key=key, value=value))
            else:
                entry.value = value
            await session.flush()


class InMemoryLocalStore(LocalStore):
    """Dictionary-backed implementation for testing."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
