"""
Account snapshot reader.

Turns a Horizon account document into an :class:`AccountSnapshot`: the
account's data entries with values decoded from base64 to bytes.

Account documents have carried data entries in three shapes over the
lifetime of the ledger client libraries:

- ``data``: ``{key: base64}``
- ``data_attr``: the same mapping under another name
- ``data_entries``: ``[{"name": key, "value": base64}, ...]``

Each shape has its own adapter; anything else is read as "no data".
"""

from __future__ import annotations

import asyncio
import base64
import binascii
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional

from adf.config.models import NetworkConfig
from adf.ledger.errors import LedgerError
from adf.ledger.horizon import HorizonClient
from adf.logging import get_logger

logger = get_logger(__name__)


class AccountSnapshot(Mapping):
    """
    Read-only mapping of data-entry key to raw value bytes.

    Compares equal to a plain dict with the same content.
    """

    def __init__(self, entries: Optional[Mapping[str, bytes]] = None):
        self._entries: Dict[str, bytes] = dict(entries or {})

    def __getitem__(self, key: str) -> bytes:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AccountSnapshot({self._entries!r})"

    def text(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Value of ``key`` decoded as UTF-8 (undecodable bytes are replaced)."""
        value = self._entries.get(key)
        if value is None:
            return default
        return value.decode("utf-8", errors="replace")

    @classmethod
    def from_text(cls, entries: Mapping[str, str]) -> "AccountSnapshot":
        """Build a snapshot from already-decoded text values."""
        return cls({key: value.encode("utf-8") for key, value in entries.items()})


class DataShape(str, Enum):
    MAPPING = "data"
    ALTERNATE = "data_attr"
    RECORDS = "data_entries"
    UNKNOWN = "unknown"


def detect_shape(payload: Any) -> DataShape:
    """Identify which data-entry layout an account document uses."""
    if not isinstance(payload, Mapping):
        return DataShape.UNKNOWN
    if isinstance(payload.get("data"), Mapping):
        return DataShape.MAPPING
    if isinstance(payload.get("data_attr"), Mapping):
        return DataShape.ALTERNATE
    if isinstance(payload.get("data_entries"), list):
        return DataShape.RECORDS
    return DataShape.UNKNOWN


def _adapt_mapping(payload: Mapping) -> Dict[str, Any]:
    return dict(payload["data"])


def _adapt_alternate(payload: Mapping) -> Dict[str, Any]:
    return dict(payload["data_attr"])


def _adapt_records(payload: Mapping) -> Dict[str, Any]:
    raw: Dict[str, Any] = {}
    for record in payload["data_entries"]:
        if not isinstance(record, Mapping):
            continue
        name = record.get("name")
        value = record.get("value")
        if name and value:
            raw[str(name)] = value
    return raw


def _adapt_unknown(payload: Any) -> Dict[str, Any]:
    return {}


_ADAPTERS: Dict[DataShape, Callable[[Any], Dict[str, Any]]] = {
    DataShape.MAPPING: _adapt_mapping,
    DataShape.ALTERNATE: _adapt_alternate,
    DataShape.RECORDS: _adapt_records,
    DataShape.UNKNOWN: _adapt_unknown,
}


def decode_value(value: Any) -> bytes:
    """
    Decode one stored value.

    Strings are base64 wire values; bytes are taken as already decoded.

    Raises:
        ValueError: If the value is neither valid base64 text nor bytes.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 value: {exc}") from exc
    raise ValueError(f"unsupported value type {type(value).__name__}")


def normalize_account_data(payload: Any) -> AccountSnapshot:
    """
    Normalize an account document's data entries into an AccountSnapshot.

    Entries that fail to decode are logged and dropped; the rest are kept.
    """
    shape = detect_shape(payload)
    if shape is DataShape.UNKNOWN:
        logger.debug("Account document has no recognizable data entries")
    raw = _ADAPTERS[shape](payload)

    entries: Dict[str, bytes] = {}
    for key, value in raw.items():
        try:
            entries[str(key)] = decode_value(value)
        except ValueError as exc:
            logger.warning(f"Dropping data entry '{key}': {exc}")
    return AccountSnapshot(entries)


class SnapshotReader:
    """
    Fetches account snapshots.

    A missing account or any ledger failure yields an empty snapshot, since
    new accounts legitimately have no data entries.
    """

    def __init__(self, config: NetworkConfig, client: Optional[HorizonClient] = None):
        self.config = config
        self.client = client or HorizonClient(config)

    def fetch_snapshot(self, account_id: str) -> AccountSnapshot:
        try:
            record = self.client.load_account(account_id)
        except LedgerError as exc:
            logger.info(f"No account data for {account_id} ({exc.category}): {exc}")
            return AccountSnapshot()

        snapshot = normalize_account_data(record.payload)
        logger.debug(f"Loaded {len(snapshot)} data entries for {account_id}")
        return snapshot

    async def fetch_snapshot_async(self, account_id: str) -> AccountSnapshot:
        """Async twin of :meth:`fetch_snapshot`; the HTTP call runs in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.fetch_snapshot, account_id)


def fetch_snapshot(account_id: str, config: NetworkConfig) -> AccountSnapshot:
    """Convenience wrapper around :class:`SnapshotReader`."""
    return SnapshotReader(config).fetch_snapshot(account_id)
