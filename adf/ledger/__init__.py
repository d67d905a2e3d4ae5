"""Ledger layer: key codec, tags, snapshots, reconciliation, assembly."""

from __future__ import annotations

from .assembler import assemble, build_envelope_xdr
from .errors import LedgerError, AccountNotFoundError, AssemblyError
from .horizon import AccountRecord, HorizonClient
from .models import CollectionEntry, DesiredState, FormState, Operation
from .reconcile import reconcile
from .snapshot import AccountSnapshot, SnapshotReader
from .tags import TAGS, TagDefinition
from .verifier import is_valid

__all__ = [
    "AccountNotFoundError",
    "AccountRecord",
    "AccountSnapshot",
    "AssemblyError",
    "CollectionEntry",
    "DesiredState",
    "FormState",
    "HorizonClient",
    "LedgerError",
    "Operation",
    "SnapshotReader",
    "TAGS",
    "TagDefinition",
    "assemble",
    "build_envelope_xdr",
    "is_valid",
    "reconcile",
]
