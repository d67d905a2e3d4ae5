"""
Tag registry.

Each tag is stored as its own data entry (``TagProgrammer``) whose value is
the account's own address; the key's presence is what marks the tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from adf.ledger.keys import TAG_PREFIX

TAG_NAMES: Tuple[str, ...] = (
    "Belgrade",
    "Montenegro",
    "Programmer",
    "Blogger",
    "Blockchain",
)


@dataclass(frozen=True)
class TagDefinition:
    key: str
    """Data-entry key, e.g. ``TagProgrammer``."""

    id: str
    """Form identifier, e.g. ``programmer``."""

    label: str
    """Display label, e.g. ``Programmer``."""


def format_tag_key(name: str) -> str:
    return f"{TAG_PREFIX}{name}"


def format_tag_id(name: str) -> str:
    return name.lower()


def format_tag_label(name: str) -> str:
    return name[:1].upper() + name[1:].lower()


def get_tag_definition(name: str) -> TagDefinition:
    return TagDefinition(
        key=format_tag_key(name),
        id=format_tag_id(name),
        label=format_tag_label(name),
    )


def is_tag_key(key: str) -> bool:
    return key.startswith(TAG_PREFIX) and len(key) > len(TAG_PREFIX)


def tag_id_from_key(key: str) -> Optional[str]:
    """Derive the tag id for any ``Tag*`` key, registered or not."""
    if not is_tag_key(key):
        return None
    return format_tag_id(key[len(TAG_PREFIX):])


class TagRegistry:
    """
    Immutable lookup table over a fixed list of tag names.

    Raises:
        ValueError: If two names produce the same id or key.
    """

    def __init__(self, names: Sequence[str]):
        self._tags: Tuple[TagDefinition, ...] = tuple(get_tag_definition(name) for name in names)
        self._by_id: Dict[str, TagDefinition] = {}
        self._by_key: Dict[str, TagDefinition] = {}
        for tag in self._tags:
            if tag.id in self._by_id:
                raise ValueError(f"Duplicate tag id in registry: {tag.id}")
            if tag.key in self._by_key:
                raise ValueError(f"Duplicate tag key in registry: {tag.key}")
            self._by_id[tag.id] = tag
            self._by_key[tag.key] = tag

    def __iter__(self):
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def ids(self) -> List[str]:
        return [tag.id for tag in self._tags]

    def keys(self) -> List[str]:
        return [tag.key for tag in self._tags]

    def get_by_id(self, tag_id: str) -> Optional[TagDefinition]:
        return self._by_id.get(tag_id)

    def get_by_key(self, key: str) -> Optional[TagDefinition]:
        return self._by_key.get(key)


TAGS = TagRegistry(TAG_NAMES)
