"""
Form state loading and (de)serialization.

The state loaded from an account is kept as the "original" so a later
submission can be diffed against what the user actually saw.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Set

from adf.forms.schemas import FormSchema
from adf.ledger.keys import extract_collection_id, find_collection_keys
from adf.ledger.models import CollectionEntry, DesiredState, FormState
from adf.ledger.snapshot import AccountSnapshot
from adf.ledger.tags import TAGS, is_tag_key
from adf.logging import get_logger

logger = get_logger(__name__)


def load_form_state(snapshot: AccountSnapshot, schema: FormSchema) -> FormState:
    """
    Populate a form from an account snapshot.

    Scalar values are decoded as text. Collection rows are ordered by number
    and use the number as their form id. Only tags known to the registry are
    selected.
    """
    fields: Dict[str, str] = {}
    for spec in schema.fields:
        value = snapshot.text(spec.key)
        if value:
            fields[spec.key] = value

    entries: List[CollectionEntry] = []
    if schema.collection:
        for key in find_collection_keys(snapshot, schema.collection):
            number = extract_collection_id(key, schema.collection)
            entries.append(
                CollectionEntry(form_id=str(number), account_ref=snapshot.text(key), key=key)
            )

    tags: List[str] = []
    if schema.has_tags:
        for key in snapshot:
            if not is_tag_key(key):
                continue
            tag = TAGS.get_by_key(key)
            if tag is None:
                logger.debug(f"Skipping unregistered tag key '{key}'")
                continue
            tags.append(tag.id)
        tags.sort(key=lambda tag_id: TAGS.ids().index(tag_id))

    return FormState(fields=fields, entries=entries, tags=tags)


def _new_row_id(index: int, used_ids: Set[str]) -> str:
    row_id = f"new-{index}"
    while row_id in used_ids:
        row_id += "-"
    used_ids.add(row_id)
    return row_id


def form_state_from_dict(raw: Mapping[str, Any], schema: FormSchema) -> FormState:
    """
    Build a FormState from a JSON-style dict.

    Scalars may be given by data key (``"Name"``) or form name (``"name"``)
    at the top level or under ``"fields"``. Rows go under ``"entries"`` as
    ``{"id": ..., "account_id": ...}``. Rows without an id are new and get a
    ``new-<n>`` id that cannot collide with ids of loaded rows.
    """
    source: Dict[str, Any] = dict(raw.get("fields") or {})
    source.update({k: v for k, v in raw.items() if k not in {"fields", "entries", "tags", "account_id"}})

    fields: Dict[str, str] = {}
    for spec in schema.fields:
        for name in (spec.key, spec.name):
            if name in source:
                value = source[name]
                fields[spec.key] = "" if value is None else str(value)
                break

    rows = list(raw.get("entries") or [])
    used_ids = {
        str(row.get("id") or row.get("form_id"))
        for row in rows
        if isinstance(row, Mapping) and (row.get("id") or row.get("form_id"))
    }

    entries: List[CollectionEntry] = []
    for index, row in enumerate(rows, start=1):
        if isinstance(row, Mapping):
            entries.append(
                CollectionEntry(
                    form_id=str(row.get("id") or row.get("form_id") or _new_row_id(index, used_ids)),
                    account_ref=row.get("account_id") or row.get("account_ref") or "",
                    key=row.get("key"),
                )
            )
        else:
            entries.append(CollectionEntry(form_id=_new_row_id(index, used_ids), account_ref=str(row)))

    tags = [str(tag) for tag in (raw.get("tags") or [])]
    return FormState(fields=fields, entries=entries, tags=tags)


def form_state_to_dict(state: FormState, schema: FormSchema) -> Dict[str, Any]:
    """Inverse of :func:`form_state_from_dict`, keyed by form field name."""
    data: Dict[str, Any] = {}
    for spec in schema.fields:
        if spec.key in state.fields:
            data[spec.name] = state.fields[spec.key]
    if schema.collection:
        data["entries"] = [
            {"id": entry.form_id, "account_id": entry.account_ref, "key": entry.key}
            for entry in state.entries
        ]
    if schema.has_tags:
        data["tags"] = list(state.tags)
    return data


def build_desired_state(
    account_id: str,
    submission: FormState,
    schema: FormSchema,
    original: Optional[FormState] = None,
) -> DesiredState:
    """Pair a submission with the loaded state for reconciliation."""
    fields = {
        spec.key: submission.fields[spec.key]
        for spec in schema.fields
        if spec.key in submission.fields
    }
    return DesiredState(
        account_id=account_id,
        fields=fields,
        entries=list(submission.entries) if schema.collection else [],
        tags=list(submission.tags) if schema.has_tags else None,
        collection=schema.collection,
        original=original or FormState(),
    )
