"""Fix command - insert inferred StartGameMapId values into records."""

from __future__ import annotations

from argparse import Namespace
import logging
from pathlib import Path

from routecheck.commands.check import analyze, resolve_settings
from routecheck.commands.output import emit_output, error_payload
from routecheck.core.findings import RecordResolution
from routecheck.core.repair import repair_file
from routecheck.errors import RepairError, RoutecheckError, exit_code_for_exception

logger = logging.getLogger(__name__)


def run_fix(args: Namespace, *, output_sink=print) -> int:
    """Repair records missing StartGameMapId whose map could be inferred.

    Low-confidence resolutions are skipped unless --allow-low-confidence is
    given. Near-typo folders are reported by `check` and never renamed here.
    """
    root = Path(args.root).resolve()
    json_output = getattr(args, "json", False)
    dry_run = getattr(args, "dry_run", False)
    allow_low_confidence = getattr(args, "allow_low_confidence", False)
    try:
        report = analyze(root, Path(args.reference), resolve_settings(args))
    except RoutecheckError as exc:
        emit_output(
            command="fix",
            payload=error_payload(root, exc),
            json_output=json_output,
            output_sink=output_sink,
            human_lines=(f"fix: error={exc}",),
        )
        return exit_code_for_exception(exc)

    repaired: list[dict] = []
    skipped: list[dict] = []
    failed: list[dict] = []
    for item in report.resolutions:
        if not item.needs_map_id:
            continue
        if item.resolution.low_confidence and not allow_low_confidence:
            skipped.append(_entry(item, reason="low confidence"))
            continue
        try:
            repair_file(root / item.path, item.resolution.map_id, dry_run=dry_run)
        except (RepairError, OSError) as exc:
            logger.warning("Cannot repair %s: %s", item.path, exc)
            failed.append(_entry(item, reason=str(exc)))
            continue
        repaired.append(_entry(item))

    payload = {
        "root": str(root),
        "status": "OK",
        "dry_run": dry_run,
        "repaired": repaired,
        "skipped": skipped,
        "failed": failed,
        "counts": report.counts(),
    }
    verb = "would insert" if dry_run else "inserted"
    human_lines = [f"fix: root={root}"]
    human_lines.extend(f"fix: {verb} StartGameMapId={item['map_id']} {item['path']}" for item in repaired)
    human_lines.extend(f"fix: skipped {item['path']} ({item['reason']})" for item in skipped)
    human_lines.extend(f"fix: failed {item['path']} ({item['reason']})" for item in failed)
    human_lines.append(f"fix: repaired={len(repaired)} skipped={len(skipped)} failed={len(failed)}")
    emit_output(
        command="fix",
        payload=payload,
        json_output=json_output,
        output_sink=output_sink,
        human_lines=human_lines,
    )
    return 1 if failed or report.has_errors else 0


def _entry(item: RecordResolution, reason: str | None = None) -> dict:
    entry = {
        "path": item.path,
        "map_id": item.resolution.map_id,
        "method": item.resolution.method.value,
    }
    if reason is not None:
        entry["reason"] = reason
    return entry
