"""Ambiguity resolution - pick one map id for a resolved canonical name."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
import fnmatch
import logging
from typing import Iterable, Optional

from routecheck.core.models import RouteRecord

logger = logging.getLogger(__name__)


class ResolutionMethod(str, Enum):
    """Which rule produced an identifier."""

    SINGLE = "single"
    SIBLING = "sibling"
    LOWEST = "lowest"
    MODE_DEFAULT = "mode-default"


@dataclass(frozen=True)
class ModeDefault:
    """Path pattern that pins records to a fixed map id.

    Patterns use fnmatch syntax against the record's POSIX path relative to
    the scan root and match case-insensitively.
    """

    pattern: str
    map_id: int
    label: str = ""

    def matches(self, relative_path: str) -> bool:
        return fnmatch.fnmatchcase(relative_path.lower(), self.pattern.lower())


@dataclass(frozen=True)
class IdResolution:
    """Concrete identifier chosen for a record."""

    map_id: int
    method: ResolutionMethod
    candidates: tuple[int, ...] = ()
    low_confidence: bool = False
    mode_default: Optional[ModeDefault] = None


@dataclass
class SiblingIndex:
    """Identifiers already present in records, grouped by folder."""

    _by_folder: dict[str, Counter] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[RouteRecord]) -> "SiblingIndex":
        index = cls()
        for record in records:
            index.add(record)
        return index

    def add(self, record: RouteRecord) -> None:
        if record.start_map_id is None:
            return
        self._by_folder.setdefault(record.folder, Counter())[record.start_map_id] += 1

    def siblings_for(self, record: RouteRecord) -> frozenset[int]:
        """Ids present in the record's folder, excluding the record's own."""
        counts = Counter(self._by_folder.get(record.folder, Counter()))
        if record.start_map_id is not None:
            counts[record.start_map_id] -= 1
        return frozenset(map_id for map_id, count in counts.items() if count > 0)


class AmbiguityResolver:
    """Resolve a set of candidate map ids to exactly one.

    Precedence:
    1. a matching mode default (when enabled) always wins
    2. a single candidate
    3. the single candidate confirmed by sibling records in the same folder
    4. the lowest candidate, flagged low-confidence
    """

    def __init__(
        self,
        mode_defaults: Iterable[ModeDefault] = (),
        mode_defaults_enabled: bool = True,
    ) -> None:
        self.mode_defaults = tuple(mode_defaults)
        self.mode_defaults_enabled = mode_defaults_enabled

    def mode_default_for(self, relative_path: str) -> Optional[ModeDefault]:
        """Return the first configured mode default matching a path."""
        if not self.mode_defaults_enabled:
            return None
        for mode_default in self.mode_defaults:
            if mode_default.matches(relative_path):
                return mode_default
        return None

    def resolve(
        self,
        candidates: Iterable[int],
        sibling_ids: Iterable[int] = (),
    ) -> IdResolution:
        """Resolve candidate ids using sibling evidence.

        Raises:
            ValueError: no candidates were given
        """
        ordered = tuple(sorted(set(candidates)))
        if not ordered:
            raise ValueError("at least one candidate id is required")

        if len(ordered) == 1:
            return IdResolution(map_id=ordered[0], method=ResolutionMethod.SINGLE, candidates=ordered)

        confirmed = sorted(set(ordered) & set(sibling_ids))
        if len(confirmed) == 1:
            return IdResolution(map_id=confirmed[0], method=ResolutionMethod.SIBLING, candidates=ordered)

        logger.debug("Ambiguous candidates %s (siblings confirm %s); using lowest", ordered, confirmed)
        return IdResolution(
            map_id=ordered[0],
            method=ResolutionMethod.LOWEST,
            candidates=ordered,
            low_confidence=True,
        )

    def resolve_record(
        self,
        relative_path: str,
        candidates: Iterable[int],
        sibling_ids: Iterable[int] = (),
    ) -> Optional[IdResolution]:
        """Resolve a record, letting a mode default short-circuit name rules.

        Returns None when no mode default applies and there are no candidates.
        """
        mode_default = self.mode_default_for(relative_path)
        if mode_default is not None:
            return IdResolution(
                map_id=mode_default.map_id,
                method=ResolutionMethod.MODE_DEFAULT,
                candidates=(mode_default.map_id,),
                mode_default=mode_default,
            )
        candidates = tuple(candidates)
        if not candidates:
            return None
        return self.resolve(candidates, sibling_ids)
