"""
Form schemas.

Describes which scalar fields, which numbered collection and whether tags
each form manages, along with per-field validation rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from adf.ledger.keys import MY_PART, PART_OF, DataKeys


class FieldKind(str, Enum):
    TEXT = "text"
    URL = "url"
    DIGITS = "digits"
    ACCOUNT = "account"
    IPFS = "ipfs"


@dataclass(frozen=True)
class FieldSpec:
    """One scalar form field mapped to a fixed data-entry key."""

    name: str
    """Form attribute name, e.g. ``telegram_user_id``."""

    key: str
    """Data-entry key, e.g. ``TelegramUserID``."""

    label: str

    kind: FieldKind = FieldKind.TEXT

    required: bool = False


@dataclass(frozen=True)
class FormSchema:
    name: str
    fields: Tuple[FieldSpec, ...]
    collection: Optional[str] = None
    collection_label: str = ""
    has_tags: bool = False


_NAME = FieldSpec("name", DataKeys.NAME, "Name", required=True)
_ABOUT = FieldSpec("about", DataKeys.ABOUT, "About", required=True)
_WEBSITE = FieldSpec("website", DataKeys.WEBSITE, "Website", kind=FieldKind.URL)

ORGANIZATION = FormSchema(
    name="organization",
    fields=(
        _NAME,
        _ABOUT,
        _WEBSITE,
        FieldSpec("telegram_part_chat_id", DataKeys.TELEGRAM_PART_CHAT_ID, "Telegram Part Chat ID",
                  kind=FieldKind.DIGITS),
        FieldSpec("contract_ipfs", DataKeys.CONTRACT_IPFS, "Contract IPFS hash", kind=FieldKind.IPFS),
    ),
    collection=MY_PART,
    collection_label="My Parts",
    has_tags=True,
)

PARTICIPANT = FormSchema(
    name="participant",
    fields=(
        _NAME,
        _ABOUT,
        _WEBSITE,
        FieldSpec("telegram_user_id", DataKeys.TELEGRAM_USER_ID, "Telegram User ID", kind=FieldKind.DIGITS),
        FieldSpec("time_token_code", DataKeys.TIME_TOKEN_CODE, "Time Token Code"),
        FieldSpec("time_token_issuer", DataKeys.TIME_TOKEN_ISSUER, "Time Token Issuer", kind=FieldKind.ACCOUNT),
        FieldSpec("time_token_desc", DataKeys.TIME_TOKEN_DESC, "Time Token Description"),
        FieldSpec("time_token_offer_ipfs", DataKeys.TIME_TOKEN_OFFER_IPFS, "Time Token Offer IPFS hash",
                  kind=FieldKind.IPFS),
    ),
    collection=PART_OF,
    collection_label="Part Of",
    has_tags=True,
)

PERSONAL = FormSchema(
    name="personal",
    fields=(_NAME, _ABOUT, _WEBSITE),
)

SCHEMAS: Dict[str, FormSchema] = {
    schema.name: schema for schema in (ORGANIZATION, PARTICIPANT, PERSONAL)
}


def get_schema(name: str) -> FormSchema:
    """
    Raises:
        ValueError: If ``name`` is not a known form.
    """
    schema = SCHEMAS.get(str(name or "").strip().lower())
    if schema is None:
        raise ValueError(f"Unknown form '{name}'. Choose one of: {', '.join(SCHEMAS)}")
    return schema
