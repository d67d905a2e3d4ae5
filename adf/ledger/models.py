"""
Data types shared by the reconciliation engine and the form layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Operation:
    """
    One manage-data instruction.

    A ``value`` of None deletes ``key``.
    """

    key: str
    value: Optional[bytes]

    @property
    def is_delete(self) -> bool:
        return self.value is None

    @classmethod
    def write(cls, key: str, value: str | bytes) -> "Operation":
        if isinstance(value, str):
            value = value.encode("utf-8")
        return cls(key=key, value=value)

    @classmethod
    def delete(cls, key: str) -> "Operation":
        return cls(key=key, value=None)

    def describe(self) -> str:
        if self.is_delete:
            return f"delete {self.key}"
        return f"set {self.key} = {self.value.decode('utf-8', errors='replace')}"


@dataclass
class CollectionEntry:
    """
    One row of a numbered collection (MyPart / PartOf).

    ``form_id`` only tracks the row across edits and is never stored.
    ``key`` is the numbered key the row was loaded from, when known.
    """

    form_id: str
    account_ref: str
    key: Optional[str] = None

    def __post_init__(self) -> None:
        self.form_id = str(self.form_id or "").strip()
        self.account_ref = str(self.account_ref or "").strip()


@dataclass
class FormState:
    """Field values, collection rows and tag ids of one form."""

    fields: Dict[str, str] = field(default_factory=dict)
    """Scalar values keyed by data-entry key."""

    entries: List[CollectionEntry] = field(default_factory=list)

    tags: List[str] = field(default_factory=list)


@dataclass
class DesiredState:
    """
    A form submission paired with the state captured when the form was loaded.

    Scalar keys absent from ``fields`` are left alone; keys present with an
    empty value are deleted if ``original`` had a value for them.
    """

    account_id: str

    fields: Dict[str, str] = field(default_factory=dict)

    entries: List[CollectionEntry] = field(default_factory=list)

    tags: Optional[List[str]] = None
    """Selected tag ids. None leaves the account's tags untouched."""

    collection: Optional[str] = None
    """Collection name the entries belong to (``MyPart`` or ``PartOf``)."""

    original: FormState = field(default_factory=FormState)
    """State captured at load time; empty for a brand-new account."""
