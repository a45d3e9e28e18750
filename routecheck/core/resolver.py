"""Path resolver - maps a record's folder path to a canonical map name.

Segments are scanned shallowest to deepest. Each segment is checked against
the canonical index in priority order (exact, apostrophe-near, plural-near)
and the best-scoring candidate wins; on equal score the deeper segment wins
because nested map folders are more specific than their parent scope folders.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable, Optional, Sequence

from routecheck.core.identity import (
    CanonicalIndex,
    apostrophe_form,
    near_plural_key,
    normalize_key,
    plural_drift,
    strip_apostrophes,
    strip_order_prefix,
    strip_possessive,
)
from routecheck.core.identity.normalize import has_apostrophe


class MatchKind(str, Enum):
    """How a path segment matched a canonical name."""

    EXACT = "exact"
    APOSTROPHE_NEAR = "apostrophe-near"
    PLURAL_NEAR = "plural-near"

    @property
    def score(self) -> int:
        return _SCORES[self]

    @property
    def is_near_typo(self) -> bool:
        return self is not MatchKind.EXACT


_SCORES = {
    MatchKind.EXACT: 100,
    MatchKind.APOSTROPHE_NEAR: 80,
    MatchKind.PLURAL_NEAR: 70,
}


@dataclass(frozen=True)
class MatchResult:
    """Resolved canonical entity for a record's location."""

    canonical_name: str
    match_kind: MatchKind
    segment_depth: int
    segment: str
    score: int

    @property
    def suggestion(self) -> Optional[str]:
        """Suggested rename for near-typo matches."""
        if not self.match_kind.is_near_typo:
            return None
        return f"{self.segment} -> {self.canonical_name}"


def path_segments(relative_path: str) -> list[str]:
    """Return the folder segments of a record path, order prefixes stripped.

    The record's own file name is not a segment.

    >>> path_segments("Maps/01 Core Tyria/Lions Arch/route.json")
    ['Maps', 'Core Tyria', 'Lions Arch']
    """
    parts = PurePosixPath(relative_path.replace("\\", "/")).parts[:-1]
    return [strip_order_prefix(part) for part in parts if part not in ("", ".", "/")]


def resolve_path(relative_path: str, index: CanonicalIndex) -> Optional[MatchResult]:
    """Resolve a record path (relative to the scan root) to a canonical name."""
    return resolve_segments(path_segments(relative_path), index)


def resolve_segments(
    segments: Sequence[str],
    index: CanonicalIndex,
) -> Optional[MatchResult]:
    """Find the single best-matching canonical entity for ordered segments.

    Returns:
        The best MatchResult, or None when no segment matches ("unknown area")
    """
    best: Optional[MatchResult] = None
    for depth, segment in enumerate(segments):
        candidate = match_segment(segment, depth, index)
        if candidate is None:
            continue
        if best is None or candidate.score >= best.score:
            best = candidate
    return best


def match_segment(segment: str, depth: int, index: CanonicalIndex) -> Optional[MatchResult]:
    """Match one segment against the index, highest priority kind first."""
    key = normalize_key(segment)
    if not key:
        return None

    form = apostrophe_form(segment)
    for name in index.names_for_key(key):
        if apostrophe_form(name) == form:
            return _result(name, MatchKind.EXACT, depth, segment)

    canonical = index.exact(key)
    if canonical is not None:
        if _is_apostrophe_drift(segment, canonical):
            return _result(canonical, MatchKind.APOSTROPHE_NEAR, depth, segment)
        return _result(canonical, MatchKind.EXACT, depth, segment)

    for canonical in index.apostrophe_variants(key):
        if _is_apostrophe_drift(segment, canonical):
            return _result(canonical, MatchKind.APOSTROPHE_NEAR, depth, segment)

    for canonical in index.near_plural(near_plural_key(segment)):
        if plural_drift(segment, canonical):
            return _result(canonical, MatchKind.PLURAL_NEAR, depth, segment)

    return None


def _is_apostrophe_drift(segment: str, canonical: str) -> bool:
    """True if segment spells canonical with its apostrophes or possessive dropped."""
    if not has_apostrophe(canonical):
        return False
    form = apostrophe_form(segment)
    if form == apostrophe_form(canonical):
        return False
    return form in _stripped_forms(canonical)


def _stripped_forms(canonical: str) -> Iterable[str]:
    return {apostrophe_form(strip_apostrophes(canonical)), apostrophe_form(strip_possessive(canonical))}


def _result(canonical: str, kind: MatchKind, depth: int, segment: str) -> MatchResult:
    return MatchResult(
        canonical_name=canonical,
        match_kind=kind,
        segment_depth=depth,
        segment=segment,
        score=kind.score,
    )
