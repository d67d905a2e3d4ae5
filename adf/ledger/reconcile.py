"""
Account-data reconciliation.

Computes the manage-data operations that turn an account's current data
entries into the state a form asks for, without redundant writes.

Operations come out in a fixed order:

1. deletions of collection keys
2. replacement writes into the keys freed in step 1
3. new collection keys, numbered after the highest number in use
4. scalar field writes/deletions, in form order
5. tag writes, then tag deletions

Everything here is pure computation over an :class:`AccountSnapshot` and a
:class:`DesiredState`; no I/O happens in this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from adf.ledger.keys import (
    MAX_DATA_BYTES,
    byte_length,
    find_collection_keys,
    format_collection_key,
    next_collection_ids,
)
from adf.ledger.models import CollectionEntry, DesiredState, Operation
from adf.ledger.snapshot import AccountSnapshot
from adf.ledger.tags import TAGS, TagRegistry, is_tag_key, tag_id_from_key
from adf.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CollectionPlan:
    """Collection operations, grouped in emission order."""

    deletions: List[Operation] = field(default_factory=list)
    replacements: List[Operation] = field(default_factory=list)
    allocations: List[Operation] = field(default_factory=list)

    @property
    def operations(self) -> List[Operation]:
        return self.deletions + self.replacements + self.allocations


def stored_references(snapshot: AccountSnapshot, collection: str) -> Dict[str, str]:
    """
    Map each account reference stored in ``collection`` to its key.

    When the same reference sits under several keys, the lowest-numbered
    key wins.
    """
    refs: Dict[str, str] = {}
    for key in find_collection_keys(snapshot, collection):
        refs.setdefault(snapshot.text(key), key)
    return refs


def _resolve_loaded_key(
    snapshot: AccountSnapshot,
    entry: CollectionEntry,
    refs: Mapping[str, str],
) -> Optional[str]:
    """Key currently holding a previously loaded entry, or None if it is gone."""
    if entry.key and snapshot.text(entry.key) == entry.account_ref:
        return entry.key
    return refs.get(entry.account_ref)


def reconcile_collection(
    snapshot: AccountSnapshot,
    collection: str,
    entries: Iterable[CollectionEntry],
    original_entries: Iterable[CollectionEntry] = (),
) -> CollectionPlan:
    """
    Plan the operations for one numbered collection.

    Rows loaded earlier are matched to submitted rows by ``form_id``. A row
    that disappeared, or whose reference changed, frees its key unless the
    reference is still submitted in another row; a changed reference is
    written back into the freed key. Remaining submitted
    references are deduplicated, skipped when already stored, and given
    fresh numbers in submission order.

    Raises:
        CollectionOverflowError: If new numbers would pass 999.
    """
    entries = list(entries)
    plan = CollectionPlan()
    refs = stored_references(snapshot, collection)

    submitted: Dict[str, CollectionEntry] = {}
    for entry in entries:
        submitted.setdefault(entry.form_id, entry)
    submitted_refs = {entry.account_ref for entry in entries if entry.account_ref}

    # Pass 1: free the keys of removed or edited rows whose reference is no
    # longer submitted anywhere.
    freed: List[tuple[str, str]] = []
    deleted_keys: Set[str] = set()
    for loaded in original_entries:
        if not loaded.account_ref:
            continue
        current = submitted.get(loaded.form_id)
        if current is not None and current.account_ref == loaded.account_ref:
            continue
        if loaded.account_ref in submitted_refs:
            continue

        old_key = _resolve_loaded_key(snapshot, loaded, refs)
        if old_key is None:
            logger.debug(f"{collection} entry {loaded.account_ref} is no longer stored; nothing to delete")
            continue
        if old_key in deleted_keys:
            continue

        deleted_keys.add(old_key)
        plan.deletions.append(Operation.delete(old_key))
        if current is not None and current.account_ref:
            freed.append((old_key, current.account_ref))

    retained: Set[str] = {
        snapshot.text(key)
        for key in find_collection_keys(snapshot, collection)
        if key not in deleted_keys
    }

    # Pass 2: reuse freed keys for replacements.
    claimed: Set[str] = set()
    for old_key, new_ref in freed:
        if new_ref in retained or new_ref in claimed:
            continue
        claimed.add(new_ref)
        plan.replacements.append(Operation.write(old_key, new_ref))

    # Pass 3: brand-new references, first occurrence wins.
    novel: List[str] = []
    for entry in entries:
        ref = entry.account_ref
        if not ref or ref in retained or ref in claimed:
            continue
        claimed.add(ref)
        novel.append(ref)

    new_ids = next_collection_ids(snapshot, collection, len(novel))
    for number, ref in zip(new_ids, novel):
        plan.allocations.append(Operation.write(format_collection_key(collection, str(number)), ref))

    return plan


def reconcile_fields(
    snapshot: AccountSnapshot,
    fields: Mapping[str, Optional[str]],
    original_fields: Mapping[str, Optional[str]],
) -> List[Operation]:
    """
    Plan scalar field operations.

    A value is written when it is non-empty and differs from the value loaded
    into the form. An explicitly emptied field is deleted when it had a
    loaded value and the key is still stored.
    """
    operations: List[Operation] = []
    for key, value in fields.items():
        value = value or ""
        previous = original_fields.get(key) or ""
        if value:
            if value != previous:
                operations.append(Operation.write(key, value))
        elif previous and key in snapshot:
            operations.append(Operation.delete(key))
    return operations


def reconcile_tags(
    snapshot: AccountSnapshot,
    tag_ids: Iterable[str],
    account_id: str,
    registry: TagRegistry = TAGS,
) -> List[Operation]:
    """
    Plan tag operations so the stored ``Tag*`` keys end up matching ``tag_ids``.

    Selected tags that are not stored are written with the account's own
    address. Stored tag keys that are not selected are deleted, including
    keys the registry does not know.
    """
    selected: List[str] = []
    for tag_id in tag_ids:
        tag_id = str(tag_id).strip().lower()
        if tag_id in selected:
            continue
        if registry.get_by_id(tag_id) is None:
            logger.warning(f"Ignoring unknown tag id '{tag_id}'")
            continue
        selected.append(tag_id)

    stored = {key for key in snapshot if is_tag_key(key)}

    writes: List[Operation] = []
    for tag_id in selected:
        tag = registry.get_by_id(tag_id)
        if tag.key not in stored:
            writes.append(Operation.write(tag.key, account_id))

    deletions = [
        Operation.delete(key)
        for key in sorted(stored)
        if tag_id_from_key(key) not in selected
    ]
    return writes + deletions


def check_operation_sizes(operations: Iterable[Operation]) -> None:
    """
    Raises:
        ValueError: If any key or value exceeds the 64-byte ledger limit.
    """
    for operation in operations:
        if not operation.key or byte_length(operation.key) > MAX_DATA_BYTES:
            raise ValueError(f"Data key '{operation.key}' must be 1-{MAX_DATA_BYTES} bytes")
        if not operation.is_delete and len(operation.value) > MAX_DATA_BYTES:
            raise ValueError(
                f"Value for '{operation.key}' is {len(operation.value)} bytes; "
                f"the limit is {MAX_DATA_BYTES}"
            )


def reconcile(snapshot: AccountSnapshot, desired: DesiredState) -> List[Operation]:
    """
    Compute the ordered operations turning ``snapshot`` into ``desired``.

    Args:
        snapshot: Data entries currently stored for the account
        desired: Form submission plus the state loaded into the form

    Returns:
        Operations in emission order; empty when nothing changed

    Raises:
        ValueError: If an operation would exceed the ledger's size limits
    """
    plan = CollectionPlan()
    if desired.collection:
        plan = reconcile_collection(
            snapshot,
            desired.collection,
            desired.entries,
            desired.original.entries,
        )

    operations = plan.operations
    operations += reconcile_fields(snapshot, desired.fields, desired.original.fields)

    if desired.tags is not None:
        if not desired.account_id:
            raise ValueError("An account id is required to store tags")
        operations += reconcile_tags(snapshot, desired.tags, desired.account_id)

    check_operation_sizes(operations)
    logger.debug(
        f"Reconciled {desired.account_id}: {len(plan.deletions)} deletions, "
        f"{len(plan.replacements)} replacements, {len(plan.allocations)} new entries, "
        f"{len(operations)} operations total"
    )
    return operations
