"""Check command - validate route records against the reference list."""

from __future__ import annotations

from argparse import Namespace
import logging
from pathlib import Path

from routecheck.commands.output import emit_output, error_payload, report_lines
from routecheck.core.findings import Report
from routecheck.core.reporter import scan_records
from routecheck.errors import IOFailure, RoutecheckError, exit_code_for_exception
from routecheck.infrastructure.reference import load_reference_index
from routecheck.infrastructure.scanner import RouteScanner
from routecheck.settings import Settings, load_settings

logger = logging.getLogger(__name__)


def resolve_settings(args: Namespace) -> Settings:
    """Config file and environment first, then command-line flags."""
    settings = load_settings(getattr(args, "config", None))
    no_mode_defaults = getattr(args, "no_mode_defaults", False)
    return settings.with_overrides(
        signature_precision=getattr(args, "precision", None),
        strict=True if getattr(args, "strict", False) else None,
        mode_defaults_enabled=False if no_mode_defaults else None,
    )


def analyze(root: Path, reference: Path, settings: Settings) -> Report:
    """Load the reference list, discover records under root and scan them.

    Raises:
        IOFailure: root does not exist
        ReferenceListError: the reference list cannot be loaded
    """
    if not root.is_dir():
        raise IOFailure(f"Record root does not exist: {root}")

    index = load_reference_index(reference)

    exclude = list(settings.exclude_patterns)
    try:
        exclude.append(reference.resolve().relative_to(root).as_posix())
    except ValueError:
        pass

    scanner = RouteScanner(root, settings.record_extensions, exclude)
    loads = scanner.load_records()
    logger.info("Discovered %d record files under %s", len(loads), root)
    return scan_records(loads, index, settings, reference_path=str(reference))


def run_check(args: Namespace, *, output_sink=print) -> int:
    """Scan a record root and report findings; exit 1 on error findings."""
    root = Path(args.root).resolve()
    json_output = getattr(args, "json", False)
    try:
        settings = resolve_settings(args)
        report = analyze(root, Path(args.reference), settings)
    except RoutecheckError as exc:
        emit_output(
            command="check",
            payload=error_payload(root, exc),
            json_output=json_output,
            output_sink=output_sink,
            human_lines=(f"check: error={exc}",),
        )
        return exit_code_for_exception(exc)

    payload = {"root": str(root), "status": "OK", "strict": settings.strict}
    payload.update(report.to_dict())
    emit_output(
        command="check",
        payload=payload,
        json_output=json_output,
        output_sink=output_sink,
        human_lines=report_lines("check", root, report),
    )
    return report.exit_code(settings.strict)
