"""Duplicate route detection by geometry signature."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from routecheck.core.identity.signature import DEFAULT_PRECISION, route_signature
from routecheck.core.models import RouteRecord


@dataclass(frozen=True)
class DuplicateGroup:
    """Records sharing one geometry signature, sorted by path."""

    signature_hash: str
    paths: tuple[str, ...]


class DuplicateDetector:
    """Groups route records whose rounded coordinate sets are identical.

    Records without coordinates never take part in grouping.
    """

    def __init__(self, precision: int = DEFAULT_PRECISION) -> None:
        self.precision = precision
        self._paths_by_signature: dict[str, list[str]] = {}

    def add(self, record: RouteRecord) -> str | None:
        """Fingerprint a record; returns its signature hash, or None if empty.

        Raises:
            CoordinateError: a point lacks three finite numeric axes
        """
        if record.is_empty:
            return None
        signature = route_signature(record.coordinates, self.precision)
        self._paths_by_signature.setdefault(signature.signature_hash, []).append(record.path)
        return signature.signature_hash

    def add_all(self, records: Iterable[RouteRecord]) -> None:
        for record in records:
            self.add(record)

    def groups(self) -> list[DuplicateGroup]:
        """Return every signature shared by more than one record."""
        groups = [
            DuplicateGroup(signature_hash=signature_hash, paths=tuple(sorted(paths)))
            for signature_hash, paths in self._paths_by_signature.items()
            if len(paths) > 1
        ]
        groups.sort(key=lambda group: (group.paths[0], group.signature_hash))
        return groups


def find_duplicates(
    records: Iterable[RouteRecord],
    precision: int = DEFAULT_PRECISION,
) -> list[DuplicateGroup]:
    """Group records with identical geometry in one call."""
    detector = DuplicateDetector(precision)
    detector.add_all(records)
    return detector.groups()
