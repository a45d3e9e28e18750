"""Findings and the aggregated scan report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from routecheck.core.ambiguity import IdResolution
from routecheck.core.duplicates import DuplicateGroup
from routecheck.core.resolver import MatchResult


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Category(str, Enum):
    """Finding categories, in report order."""

    REFERENCE = "reference"
    MALFORMED = "malformed"
    SCHEMA = "schema"
    EMPTY_ROUTE = "empty-route"
    UNKNOWN_AREA = "unknown-area"
    NEAR_TYPO = "near-typo"
    AMBIGUOUS = "ambiguous"
    MAP_ID_MISMATCH = "map-id-mismatch"
    MISSING_MAP_ID = "missing-map-id"
    DUPLICATE = "duplicate"


_CATEGORY_ORDER = {category: position for position, category in enumerate(Category)}


@dataclass(frozen=True)
class Finding:
    """One reported problem tied to a record (or the reference list)."""

    severity: Severity
    category: Category
    path: str
    message: str
    suggestion: Optional[str] = None

    def sort_key(self) -> tuple[Any, ...]:
        """Return a stable sort key for deterministic ordering."""
        return (_CATEGORY_ORDER[self.category], self.path, self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "category": self.category.value,
            "path": self.path,
            "message": self.message,
            "suggestion": self.suggestion,
        }

    def render(self) -> str:
        line = f"{self.severity.value.upper()} [{self.category.value}] {self.path}: {self.message}"
        if self.suggestion:
            line += f" ({self.suggestion})"
        return line


@dataclass(frozen=True)
class RecordResolution:
    """Where a parsed record landed after path and id resolution."""

    path: str
    match: Optional[MatchResult]
    resolution: Optional[IdResolution]
    existing_map_id: Optional[int] = None

    @property
    def needs_map_id(self) -> bool:
        return self.existing_map_id is None and self.resolution is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "canonical_name": self.match.canonical_name if self.match else None,
            "match_kind": self.match.match_kind.value if self.match else None,
            "segment_depth": self.match.segment_depth if self.match else None,
            "score": self.match.score if self.match else None,
            "map_id": self.resolution.map_id if self.resolution else None,
            "method": self.resolution.method.value if self.resolution else None,
            "low_confidence": self.resolution.low_confidence if self.resolution else False,
            "existing_map_id": self.existing_map_id,
        }


@dataclass
class Report:
    """Aggregated outcome of one scan."""

    findings: list[Finding] = field(default_factory=list)
    resolutions: list[RecordResolution] = field(default_factory=list)
    duplicates: list[DuplicateGroup] = field(default_factory=list)
    scanned: int = 0
    parsed: int = 0

    def add(
        self,
        severity: Severity,
        category: Category,
        path: str,
        message: str,
        suggestion: Optional[str] = None,
    ) -> Finding:
        finding = Finding(severity, category, path, message, suggestion)
        self.findings.append(finding)
        return finding

    def sorted_findings(self) -> list[Finding]:
        return sorted(self.findings, key=lambda finding: finding.sort_key())

    def counts(self) -> dict[str, int]:
        """Per-category finding counts, in category order, zero counts omitted."""
        counts = {category.value: 0 for category in Category}
        for finding in self.findings:
            counts[finding.category.value] += 1
        return {category: count for category, count in counts.items() if count}

    def severity_counts(self) -> dict[str, int]:
        counts = {severity.value: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts

    @property
    def has_errors(self) -> bool:
        return any(finding.severity is Severity.ERROR for finding in self.findings)

    @property
    def has_warnings(self) -> bool:
        return any(finding.severity is Severity.WARNING for finding in self.findings)

    def exit_code(self, strict: bool = False) -> int:
        """0 unless errors exist (or, in strict mode, warnings)."""
        if self.has_errors or (strict and self.has_warnings):
            return 1
        return 0

    def resolution_for(self, path: str) -> Optional[RecordResolution]:
        for item in self.resolutions:
            if item.path == path:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "scanned": self.scanned,
            "parsed": self.parsed,
            "counts": self.counts(),
            "severity_counts": self.severity_counts(),
            "findings": [finding.to_dict() for finding in self.sorted_findings()],
            "resolutions": [item.to_dict() for item in self.resolutions],
            "duplicates": [
                {"signature_hash": group.signature_hash, "paths": list(group.paths)}
                for group in self.duplicates
            ],
        }

    def summary_lines(self) -> list[str]:
        severities = self.severity_counts()
        lines = [
            f"summary: scanned={self.scanned} parsed={self.parsed} "
            f"errors={severities['error']} warnings={severities['warning']} "
            f"info={severities['info']}"
        ]
        for category, count in self.counts().items():
            lines.append(f"summary: {category}={count}")
        return lines
