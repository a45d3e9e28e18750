"""Reporter - drives one consistency scan over loaded route records.

Flow per scan:
1. reference collisions become warnings
2. unreadable or invalid records become errors and drop out
3. every parsed record's folder path is resolved to a canonical map
4. the canonical name's ids are narrowed to one id using sibling evidence
5. geometry signatures are grouped to find duplicate content

Per-record problems never abort the scan; they are recorded as findings.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from routecheck.core.ambiguity import AmbiguityResolver, IdResolution, ResolutionMethod, SiblingIndex
from routecheck.core.duplicates import DuplicateDetector
from routecheck.core.findings import Category, RecordResolution, Report, Severity
from routecheck.core.identity import CanonicalIndex
from routecheck.core.models import START_MAP_ID_FIELD, LoadError, RecordLoad, RouteRecord
from routecheck.core.resolver import MatchKind, MatchResult, resolve_path
from routecheck.errors import CoordinateError
from routecheck.settings import Settings

logger = logging.getLogger(__name__)


def scan_records(
    loads: Iterable[RecordLoad],
    index: CanonicalIndex,
    settings: Optional[Settings] = None,
    *,
    reference_path: str = "<reference>",
    ambiguity: Optional[AmbiguityResolver] = None,
) -> Report:
    """Run every consistency check and return the aggregated report."""
    settings = settings or Settings()
    ambiguity = ambiguity or AmbiguityResolver(
        settings.mode_defaults,
        mode_defaults_enabled=settings.mode_defaults_enabled,
    )
    report = Report()

    for collision in index.collisions:
        report.add(
            Severity.WARNING,
            Category.REFERENCE,
            reference_path,
            f"'{collision.kept}' and '{collision.dropped}' normalize to the same key "
            f"'{collision.key}'; only '{collision.kept}' is matched exactly",
        )

    records = _parsed_records(loads, report)
    siblings = SiblingIndex.from_records(records)
    detector = DuplicateDetector(settings.signature_precision)

    for record in records:
        if record.is_empty:
            report.add(Severity.WARNING, Category.EMPTY_ROUTE, record.path, "route has no coordinates")
        else:
            try:
                detector.add(record)
            except CoordinateError as exc:
                report.add(Severity.ERROR, Category.SCHEMA, record.path, str(exc))
                continue
        report.resolutions.append(_check_record(record, index, ambiguity, siblings, report))

    report.duplicates = detector.groups()
    for group in report.duplicates:
        members = ", ".join(group.paths)
        for path in group.paths:
            others = [other for other in group.paths if other != path]
            report.add(
                Severity.WARNING,
                Category.DUPLICATE,
                path,
                f"identical route geometry shared by {len(group.paths)} records: {members}",
                suggestion=f"duplicate of {', '.join(others)}",
            )

    logger.info(
        "Scanned %d records (%d parsed): %s",
        report.scanned,
        report.parsed,
        report.counts() or "no findings",
    )
    return report


def _parsed_records(loads: Iterable[RecordLoad], report: Report) -> list[RouteRecord]:
    records: list[RouteRecord] = []
    for load in sorted(loads, key=lambda item: item.path):
        report.scanned += 1
        if load.ok:
            records.append(load.record)
            continue
        category = Category.SCHEMA if load.error_kind is LoadError.SCHEMA else Category.MALFORMED
        report.add(Severity.ERROR, category, load.path, load.error or "unreadable record")
    report.parsed = len(records)
    return records


def _check_record(
    record: RouteRecord,
    index: CanonicalIndex,
    ambiguity: AmbiguityResolver,
    siblings: SiblingIndex,
    report: Report,
) -> RecordResolution:
    mode_default = ambiguity.mode_default_for(record.path)
    match: Optional[MatchResult] = None
    resolution: Optional[IdResolution]

    if mode_default is not None:
        resolution = ambiguity.resolve_record(record.path, ())
    else:
        match = resolve_path(record.path, index)
        if match is None:
            report.add(
                Severity.WARNING,
                Category.UNKNOWN_AREA,
                record.path,
                "no folder in the path matches a known map",
            )
            _check_unknown_id(record, index, report)
            return RecordResolution(record.path, None, None, record.start_map_id)

        if match.match_kind is not MatchKind.EXACT:
            report.add(
                Severity.WARNING,
                Category.NEAR_TYPO,
                record.path,
                f"folder '{match.segment}' is a {match.match_kind.value} spelling of "
                f"'{match.canonical_name}'",
                suggestion=match.suggestion,
            )

        resolution = ambiguity.resolve(index.ids_for(match.canonical_name), siblings.siblings_for(record))
        if resolution.low_confidence and record.start_map_id not in resolution.candidates:
            report.add(
                Severity.WARNING,
                Category.AMBIGUOUS,
                record.path,
                f"'{match.canonical_name}' maps to ids {list(resolution.candidates)}; "
                f"falling back to lowest id {resolution.map_id} (low confidence)",
            )

    _check_existing_id(record, resolution, report)
    return RecordResolution(record.path, match, resolution, record.start_map_id)


def _check_existing_id(
    record: RouteRecord,
    resolution: Optional[IdResolution],
    report: Report,
) -> None:
    if resolution is None:
        return
    existing = record.start_map_id
    if existing is None:
        report.add(
            Severity.INFO,
            Category.MISSING_MAP_ID,
            record.path,
            f"{START_MAP_ID_FIELD} missing; inferred {resolution.map_id} via {resolution.method.value}",
            suggestion=f"{START_MAP_ID_FIELD}={resolution.map_id}",
        )
        return

    if resolution.method is ResolutionMethod.MODE_DEFAULT:
        if existing != resolution.map_id:
            report.add(
                Severity.ERROR,
                Category.MAP_ID_MISMATCH,
                record.path,
                f"{START_MAP_ID_FIELD} {existing} differs from mode default "
                f"{resolution.map_id} for pattern '{resolution.mode_default.pattern}'",
                suggestion=f"{START_MAP_ID_FIELD}={resolution.map_id}",
            )
        return

    if existing not in resolution.candidates:
        report.add(
            Severity.ERROR,
            Category.MAP_ID_MISMATCH,
            record.path,
            f"{START_MAP_ID_FIELD} {existing} is not an id of the folder's map "
            f"(expected one of {list(resolution.candidates)})",
            suggestion=f"{START_MAP_ID_FIELD}={resolution.map_id}",
        )


def _check_unknown_id(record: RouteRecord, index: CanonicalIndex, report: Report) -> None:
    if record.start_map_id is not None and record.start_map_id not in index.all_ids():
        report.add(
            Severity.ERROR,
            Category.MAP_ID_MISMATCH,
            record.path,
            f"{START_MAP_ID_FIELD} {record.start_map_id} is not in the reference list",
        )
