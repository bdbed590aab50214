"""Persistence gateway for the RSVP collection.

The collection lives in the remote document store. With
``storage_fallback_enabled`` set (the default) any remote failure, including
missing credentials, sends the operation to the local store instead and the
result reports ``StorageMode.LOCAL`` so callers can show a degraded-storage
indicator. The two stores are never synchronized: a write that falls back only
reaches the local store.

With the flag unset the remote store is the only source of truth and failures
surface as ``StorageUnavailableError``.

A successful remote read is authoritative even when it returns no records; the
local store is only consulted when the remote call fails.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from src.config.settings import settings
from src.rsvps.aggregation import build_category_summary
from src.rsvps.dtos import (
    CategorySummary,
    DeleteOutcome,
    DeleteResult,
    ReadResult,
    RSVPRecord,
    RSVPSubmission,
    SaveResult,
    StorageMode,
    StorageNotConfiguredError,
    StorageUnavailableError,
    parse_records,
)
from src.rsvps.repository.local_store import LocalStore, SqlLocalStore
from src.rsvps.repository.remote_store import (
    JsonBinStore,
    RemoteStoreError,
    detect_envelope,
    unwrap_records,
    wrap_records,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RemoteStore(Protocol):
    @property
    def configured(self) -> bool: ...

    async def fetch_latest(self) -> Any: ...

    async def replace(self, document: Any) -> None: ...


class GatewayConfig(Protocol):
    storage_fallback_enabled: bool
    local_store_key: str


class RSVPGateway(ABC):
    @property
    @abstractmethod
    def storage_mode(self) -> StorageMode:
        """The store operations will try first."""
        raise NotImplementedError

    @abstractmethod
    async def save_record(self, submission: RSVPSubmission) -> SaveResult:
        """Assign id and timestamp, append the record and write the collection back."""
        raise NotImplementedError

    @abstractmethod
    async def read_records(self) -> ReadResult:
        raise NotImplementedError

    @abstractmethod
    async def delete_record(self, record_id: str) -> DeleteResult:
        raise NotImplementedError

    async def list_records(self) -> list[RSVPRecord]:
        result = await self.read_records()
        return result.records

    async def category_summary(self) -> CategorySummary:
        """Summary of what attending guests bring, from the latest stored state."""
        return build_category_summary(await self.list_records())


class DocumentStoreRSVPGateway(RSVPGateway):
    """Remote document store with an optional local fallback."""

    def __init__(
        self,
        remote: RemoteStore,
        local: LocalStore,
        config: GatewayConfig,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._remote = remote
        self._local = local
        self._config = config
        self._clock = clock
        self._id_factory = id_factory

    @property
    def fallback_enabled(self) -> bool:
        return self._config.storage_fallback_enabled

    @property
    def storage_mode(self) -> StorageMode:
        if self._remote.configured or not self.fallback_enabled:
            return StorageMode.REMOTE
        return StorageMode.LOCAL

    async def save_record(self, submission: RSVPSubmission) -> SaveResult:
        record = submission.to_record(
            record_id=self._id_factory(),
            timestamp=int(self._clock() * 1000),
        )
        document = record.to_document()
        _, storage = await self._run(
            "save",
            remote_call=lambda: self._append_remote(document),
            local_call=lambda: self._append_local(document),
        )
        logger.info("Saved RSVP %s for %s to %s store", record.id, record.name, storage.value)
        return SaveResult(record=record, storage=storage)

    async def read_records(self) -> ReadResult:
        raw_records, storage = await self._run(
            "read",
            remote_call=self._read_remote,
            local_call=self._read_local,
        )
        return ReadResult(records=parse_records(raw_records), storage=storage)

    async def delete_record(self, record_id: str) -> DeleteResult:
        deleted, storage = await self._run(
            "delete",
            remote_call=lambda: self._delete_remote(record_id),
            local_call=lambda: self._delete_local(record_id),
        )
        outcome = DeleteOutcome.DELETED if deleted else DeleteOutcome.NOT_FOUND
        logger.info("Delete of RSVP %s from %s store: %s", record_id, storage.value, outcome.value)
        return DeleteResult(record_id=record_id, outcome=outcome, storage=storage)

    async def _run(
        self,
        operation: str,
        remote_call: Callable[[], Awaitable[T]],
        local_call: Callable[[], Awaitable[T]],
    ) -> tuple[T, StorageMode]:
        if self._remote.configured:
            try:
                return await remote_call(), StorageMode.REMOTE
            except RemoteStoreError as e:
                if not self.fallback_enabled:
                    logger.error("RSVP %s failed against remote store: %s", operation, e)
                    raise StorageUnavailableError(str(e)) from e
                logger.warning("RSVP %s failed against remote store, using local store: %s", operation, e)
        elif not self.fallback_enabled:
            logger.error("RSVP %s refused: remote store credentials are not configured", operation)
            raise StorageNotConfiguredError()
        else:
            logger.warning("Remote store not configured, RSVP %s uses the local store", operation)

        try:
            return await local_call(), StorageMode.LOCAL
        except SQLAlchemyError as e:
            logger.error("RSVP %s failed against local store: %s", operation, e)
            raise StorageUnavailableError(f"Local store unavailable: {e}") from e

    # Remote store

    async def _read_remote(self) -> list[Any]:
        return unwrap_records(await self._remote.fetch_latest())

    async def _append_remote(self, document: dict) -> None:
        current = await self._remote.fetch_latest()
        envelope = detect_envelope(current)
        records = [*unwrap_records(current), document]
        await self._remote.replace(wrap_records(envelope, records))

    async def _delete_remote(self, record_id: str) -> bool:
        current = await self._remote.fetch_latest()
        records = unwrap_records(current)
        remaining = _without_record(records, record_id)
        if remaining is None:
            return False
        await self._remote.replace(wrap_records(detect_envelope(current), remaining))
        return True

    # Local store

    async def _read_local(self) -> list[Any]:
        stored = await self._local.get_item(self._config.local_store_key)
        if not stored:
            return []
        try:
            records = json.loads(stored)
        except ValueError as e:
            logger.error("Local RSVP store holds malformed JSON, treating as empty: %s", e)
            return []
        if not isinstance(records, list):
            logger.error("Local RSVP store does not hold a list, treating as empty")
            return []
        return records

    async def _write_local(self, records: list[Any]) -> None:
        await self._local.set_item(self._config.local_store_key, json.dumps(records))

    async def _append_local(self, document: dict) -> None:
        records = await self._read_local()
        records.append(document)
        await self._write_local(records)

    async def _delete_local(self, record_id: str) -> bool:
        remaining = _without_record(await self._read_local(), record_id)
        if remaining is None:
            return False
        await self._write_local(remaining)
        return True


def _without_record(records: list[Any], record_id: str) -> list[Any] | None:
    """Drop the first entry with ``record_id``; None when there is no such entry."""
    for index, raw in enumerate(records):
        if isinstance(raw, dict) and str(raw.get("id")) == record_id:
            return records[:index] + records[index + 1 :]
    return None


def get_rsvp_gateway() -> RSVPGateway:
    """Dependency to get the RSVP gateway. Override in tests."""
    return DocumentStoreRSVPGateway(
        remote=JsonBinStore(config=settings),
        local=SqlLocalStore(),
        config=settings,
    )
