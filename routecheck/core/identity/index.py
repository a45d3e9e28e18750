"""Canonical map index built once from the reference list."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from .normalize import (
    has_apostrophe,
    near_plural_key,
    normalize_key,
    strip_apostrophes,
    strip_possessive,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceEntry:
    """One raw row of the reference list, in file order."""

    name: str
    id: str | int | None


@dataclass(frozen=True)
class CanonicalEntry:
    """A canonical map name and every identifier it is known under."""

    name: str
    ids: frozenset[int]

    @property
    def is_ambiguous(self) -> bool:
        return len(self.ids) > 1


@dataclass(frozen=True)
class KeyCollision:
    """Two distinct canonical names that share one normalized key."""

    key: str
    kept: str
    dropped: str


def parse_map_id(value: object) -> int | None:
    """Return a map id as int, or None for blank and non-numeric values."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
    return None


class CanonicalIndex:
    """Exact, apostrophe-variant and near-plural lookups over canonical names.

    The index is immutable after construction and is passed explicitly to
    every resolver call.
    """

    def __init__(self, entries: Iterable[ReferenceEntry]) -> None:
        ids_by_name: dict[str, set[int]] = {}
        exact: dict[str, str] = {}
        collisions: list[KeyCollision] = []
        skipped = 0

        for entry in entries:
            name = (entry.name or "").strip()
            map_id = parse_map_id(entry.id)
            if not name or map_id is None:
                skipped += 1
                logger.debug("Skipping reference entry %r (id=%r)", entry.name, entry.id)
                continue

            ids_by_name.setdefault(name, set()).add(map_id)

            key = normalize_key(name)
            if not key:
                continue
            kept = exact.setdefault(key, name)
            if kept != name and not any(c.dropped == name for c in collisions):
                collisions.append(KeyCollision(key=key, kept=kept, dropped=name))
                logger.warning(
                    "Reference names %r and %r normalize to the same key %r; keeping %r",
                    kept,
                    name,
                    key,
                    kept,
                )

        variants: dict[str, set[str]] = {}
        plurals: dict[str, set[str]] = {}
        names_by_key: dict[str, set[str]] = {}
        for name in ids_by_name:
            key = normalize_key(name)
            if key:
                names_by_key.setdefault(key, set()).add(name)
            if has_apostrophe(name):
                for variant in (strip_apostrophes(name), strip_possessive(name)):
                    variant_key = normalize_key(variant)
                    if variant_key:
                        variants.setdefault(variant_key, set()).add(name)
            plural_key = near_plural_key(name)
            if plural_key:
                plurals.setdefault(plural_key, set()).add(name)

        self._entries: Mapping[str, CanonicalEntry] = MappingProxyType(
            {
                name: CanonicalEntry(name=name, ids=frozenset(ids))
                for name, ids in sorted(ids_by_name.items())
            }
        )
        self._exact: Mapping[str, str] = MappingProxyType(exact)
        self._names_by_key: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {key: tuple(sorted(names)) for key, names in names_by_key.items()}
        )
        self._variants: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {key: tuple(sorted(names)) for key, names in variants.items()}
        )
        self._plurals: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {key: tuple(sorted(names)) for key, names in plurals.items()}
        )
        self._all_ids = frozenset(map_id for ids in ids_by_name.values() for map_id in ids)
        self.collisions: tuple[KeyCollision, ...] = tuple(collisions)
        self.skipped = skipped

        logger.info(
            "Canonical index: %d names, %d skipped entries, %d key collisions",
            len(self._entries),
            skipped,
            len(collisions),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    @property
    def entries(self) -> Mapping[str, CanonicalEntry]:
        return self._entries

    def exact(self, key: str) -> str | None:
        """Canonical name for a normalized key, if any."""
        return self._exact.get(key)

    def names_for_key(self, key: str) -> tuple[str, ...]:
        """Every canonical name normalizing to key, including collided ones."""
        return self._names_by_key.get(key, ())

    def apostrophe_variants(self, key: str) -> tuple[str, ...]:
        """Canonical names whose apostrophe-free spelling normalizes to key."""
        return self._variants.get(key, ())

    def near_plural(self, key: str) -> tuple[str, ...]:
        """Canonical names sharing a near-plural key."""
        return self._plurals.get(key, ())

    def ids_for(self, name: str) -> frozenset[int]:
        entry = self._entries.get(name)
        return entry.ids if entry else frozenset()

    def all_ids(self) -> frozenset[int]:
        return self._all_ids

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str | int | None]]) -> "CanonicalIndex":
        """Build an index from plain ``(name, id)`` pairs."""
        return cls(ReferenceEntry(name=name, id=map_id) for name, map_id in pairs)
