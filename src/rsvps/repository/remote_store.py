"""Client for the hosted JSON document store (JSONBin).

The store keeps the whole RSVP collection as one JSON document. Reads fetch the
latest version, writes replace the document wholesale; there is no partial
update, so concurrent writers race with last-write-wins semantics.
"""

import logging
from enum import Enum
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """Raised when the remote store cannot be reached or rejects a request."""


class RemoteStoreNotConfiguredError(RemoteStoreError):
    def __init__(self) -> None:
        super().__init__("Remote store API key or bin id is not configured")


class Envelope(str, Enum):
    """Top-level shape wrapping the record list in the stored document."""

    LIST = "list"
    RSVPS = "rsvps"
    DATA = "data"


def detect_envelope(document: Any) -> Envelope:
    """Work out which envelope an existing document uses.

    Unknown or missing documents default to a bare list.
    """
    if isinstance(document, dict):
        if "rsvps" in document:
            return Envelope.RSVPS
        if "data" in document:
            return Envelope.DATA
    return Envelope.LIST


def unwrap_records(document: Any) -> list[Any]:
    """Return the raw record list held in a stored document.

    Unexpected shapes yield an empty list.
    """
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in (Envelope.RSVPS.value, Envelope.DATA.value):
            if isinstance(document.get(key), list):
                return document[key]
    if document not in (None, {}, ""):
        logger.warning("Unexpected remote document shape %s, treating as empty", type(document))
    return []


def wrap_records(envelope: Envelope, records: list[Any]) -> list[Any] | dict[str, list[Any]]:
    if envelope == Envelope.LIST:
        return records
    return {envelope.value: records}


class RemoteStoreConfig(Protocol):
    jsonbin_base_url: str
    jsonbin_api_key: str
    jsonbin_bin_id: str
    jsonbin_bin_name: str
    jsonbin_timeout_seconds: float


class JsonBinStore:
    """Reads and replaces one JSONBin document."""

    def __init__(
        self,
        config: RemoteStoreConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    @property
    def configured(self) -> bool:
        return bool(self._config.jsonbin_api_key and self._config.jsonbin_bin_id)

    @property
    def _bin_url(self) -> str:
        return f"{self._config.jsonbin_base_url.rstrip('/')}/{self._config.jsonbin_bin_id}"

    def _ensure_configured(self) -> None:
        if not self.configured:
            raise RemoteStoreNotConfiguredError()

    async def fetch_latest(self) -> Any:
        """Return the ``record`` payload of the latest document version."""
        self._ensure_configured()
        try:
            async with self._http_client_class(timeout=self._config.jsonbin_timeout_seconds) as client:
                response = await client.get(
                    f"{self._bin_url}/latest",
                    headers={"X-Master-Key": self._config.jsonbin_api_key},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteStoreError(f"Remote store read failed: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"Remote store unreachable: {e}") from e
        except ValueError as e:
            raise RemoteStoreError(f"Remote store returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            logger.warning("Remote store response has no record wrapper")
            return None
        return payload.get("record")

    async def replace(self, document: Any) -> None:
        """Overwrite the stored document with ``document``."""
        self._ensure_configured()
        try:
            async with self._http_client_class(timeout=self._config.jsonbin_timeout_seconds) as client:
                response = await client.put(
                    self._bin_url,
                    headers={
                        "Content-Type": "application/json",
                        "X-Master-Key": self._config.jsonbin_api_key,
                        "X-Bin-Name": self._config.jsonbin_bin_name,
                    },
                    json=document,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteStoreError(f"Remote store write failed: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"Remote store unreachable: {e}") from e
