"""
Submission validation.

Runs before reconciliation and reports every problem per field instead of
stopping at the first one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from stellar_sdk import StrKey

from adf.forms.schemas import FieldKind, FieldSpec, FormSchema
from adf.ledger.keys import MAX_DATA_BYTES, byte_length
from adf.ledger.models import FormState
from adf.ledger.tags import TAGS


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class ValidationError(ValueError):
    """Raised with every field error found in a submission."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        summary = "; ".join(f"{error.field}: {error.message}" for error in self.errors)
        super().__init__(summary or "Invalid submission")


def is_valid_account_id(value: str) -> bool:
    return bool(value) and StrKey.is_valid_ed25519_public_key(value)


def is_valid_ipfs_hash(value: str) -> bool:
    """CIDv0 (``Qm`` + 44 chars) or CIDv1 (``b`` prefix, at least 48 chars)."""
    if value.startswith("Qm") and len(value) == 46:
        return True
    return value.startswith("b") and len(value) >= 48


def _check_field(spec: FieldSpec, value: str) -> List[str]:
    if not value:
        return [f"{spec.label} is required"] if spec.required else []

    problems: List[str] = []
    if byte_length(value) > MAX_DATA_BYTES:
        problems.append(f"{spec.label} must not exceed {MAX_DATA_BYTES} bytes in UTF-8 encoding")
    if spec.kind is FieldKind.URL and not value.startswith("http"):
        problems.append("Must be a valid URL")
    elif spec.kind is FieldKind.DIGITS and not (value.isascii() and value.isdigit()):
        problems.append("Must contain only numbers")
    elif spec.kind is FieldKind.ACCOUNT and not is_valid_account_id(value):
        problems.append("Invalid Stellar account ID")
    elif spec.kind is FieldKind.IPFS and not is_valid_ipfs_hash(value):
        problems.append("Invalid IPFS hash format")
    return problems


def validate_submission(account_id: str, submission: FormState, schema: FormSchema) -> List[FieldError]:
    """
    Check a submission against its schema.

    Returns:
        Every error found; empty when the submission is valid
    """
    errors: List[FieldError] = []

    if not account_id:
        errors.append(FieldError("account_id", "Account ID is required"))
    elif not is_valid_account_id(account_id):
        errors.append(FieldError("account_id", "Invalid Stellar account ID"))

    for spec in schema.fields:
        value = submission.fields.get(spec.key) or ""
        for message in _check_field(spec, value):
            errors.append(FieldError(spec.name, message))

    if schema.collection:
        errors.extend(_check_entries(account_id, submission, schema))
    elif submission.entries:
        errors.append(FieldError("entries", f"The {schema.name} form has no collection"))

    if schema.has_tags:
        for tag_id in submission.tags:
            if TAGS.get_by_id(str(tag_id).strip().lower()) is None:
                errors.append(FieldError("tags", f"Unknown tag '{tag_id}'"))

    return errors


def _check_entries(account_id: str, submission: FormState, schema: FormSchema) -> List[FieldError]:
    errors: List[FieldError] = []
    label = schema.collection_label or schema.collection
    seen_refs = set()
    seen_ids = set()
    for index, entry in enumerate(submission.entries):
        field_name = f"entries[{index}]"
        if entry.form_id in seen_ids:
            errors.append(FieldError(field_name, f"Duplicate row id '{entry.form_id}'"))
        seen_ids.add(entry.form_id)

        ref = entry.account_ref
        if not ref:
            continue
        if not is_valid_account_id(ref):
            errors.append(FieldError(field_name, "Invalid Stellar account ID"))
            continue
        if ref == account_id:
            errors.append(FieldError(field_name, f"{label} account IDs must not match the main Account ID"))
        if ref in seen_refs:
            errors.append(FieldError(field_name, f"All {label} account IDs must be unique"))
        seen_refs.add(ref)
    return errors


def ensure_valid(account_id: str, submission: FormState, schema: FormSchema) -> None:
    """
    Raises:
        ValidationError: If the submission has any field errors.
    """
    errors = validate_submission(account_id, submission, schema)
    if errors:
        raise ValidationError(errors)
