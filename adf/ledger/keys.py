"""
Data-entry key names and the numbered-collection key codec.

Collections store one account reference per numbered key, e.g.
``MyPart001``, ``MyPart002``. Numbers are zero-padded to three digits and
capped at 999.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional

MAX_DATA_BYTES = 64
COLLECTION_ID_WIDTH = 3
MAX_COLLECTION_ID = 999

TAG_PREFIX = "Tag"

MY_PART = "MyPart"
PART_OF = "PartOf"


class DataKeys:
    """Fixed keys for single-valued fields."""

    NAME = "Name"
    ABOUT = "About"
    WEBSITE = "Website"
    TELEGRAM_PART_CHAT_ID = "TelegramPartChatID"
    CONTRACT_IPFS = "ContractIPFS"
    TELEGRAM_USER_ID = "TelegramUserID"
    TIME_TOKEN_CODE = "TimeTokenCode"
    TIME_TOKEN_ISSUER = "TimeTokenIssuer"
    TIME_TOKEN_DESC = "TimeTokenDesc"
    TIME_TOKEN_OFFER_IPFS = "TimeTokenOfferIPFS"


class KeyFormatError(ValueError):
    """Raised when a collection key cannot be formatted."""


class CollectionOverflowError(KeyFormatError):
    """Raised when a collection has no free numbers left."""


def byte_length(value: str | bytes) -> int:
    """UTF-8 length of ``value`` in bytes."""
    if isinstance(value, bytes):
        return len(value)
    return len(value.encode("utf-8"))


def _collection_pattern(collection: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(collection)}(\d+)$")


def format_collection_key(collection: str, collection_id: str | int) -> str:
    """
    Build a numbered key, e.g. ``format_collection_key("MyPart", "7") == "MyPart007"``.

    Raises:
        KeyFormatError: If the id is not a non-negative integer or exceeds 999.
    """
    text = str(collection_id).strip()
    if not text.isdigit() or not text.isascii():
        raise KeyFormatError(f"Collection id must be a non-negative integer, got '{collection_id}'")
    number = int(text)
    if number > MAX_COLLECTION_ID:
        raise KeyFormatError(
            f"Collection id {number} exceeds the maximum of {MAX_COLLECTION_ID} for {collection}"
        )
    return f"{collection}{number:0{COLLECTION_ID_WIDTH}d}"


def extract_collection_id(key: str, collection: str) -> Optional[int]:
    """Return the number of a collection key, or None if ``key`` is not one."""
    match = _collection_pattern(collection).match(key)
    if not match:
        return None
    return int(match.group(1))


def is_collection_key(key: str, collection: str) -> bool:
    return extract_collection_id(key, collection) is not None


def find_collection_keys(keys: Iterable[str] | Mapping[str, object], collection: str) -> List[str]:
    """Collection keys present in ``keys``, ordered by number."""
    found = [key for key in keys if is_collection_key(key, collection)]
    return sorted(found, key=lambda key: extract_collection_id(key, collection))


def highest_collection_id(keys: Iterable[str] | Mapping[str, object], collection: str) -> int:
    """Highest number used by ``collection``, or 0 when it has no keys."""
    ids = [extract_collection_id(key, collection) for key in find_collection_keys(keys, collection)]
    return max(ids, default=0)


def next_collection_ids(
    keys: Iterable[str] | Mapping[str, object],
    collection: str,
    count: int,
) -> List[int]:
    """
    Allocate ``count`` fresh numbers after the highest one in use.

    Numbers are never reused, so gaps left by deleted keys stay empty.

    Raises:
        CollectionOverflowError: If the allocation would pass 999.
    """
    start = highest_collection_id(keys, collection) + 1
    ids = list(range(start, start + count))
    if ids and ids[-1] > MAX_COLLECTION_ID:
        raise CollectionOverflowError(
            f"{collection} has no room for {count} more entries "
            f"(highest id {start - 1}, maximum {MAX_COLLECTION_ID})"
        )
    return ids
