"""Deterministic CLI output helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from routecheck.core.findings import Report

SCHEMA_VERSION = "v1"


def emit_output(
    *,
    command: str,
    payload: dict,
    json_output: bool,
    output_sink=print,
    human_lines: Iterable[str] = (),
) -> None:
    """Emit either a sorted-key JSON envelope or plain human lines."""
    if json_output:
        envelope = {
            "schema_version": SCHEMA_VERSION,
            "command": command,
            "data": payload,
        }
        output_sink(json.dumps(envelope, sort_keys=True, separators=(",", ":"), ensure_ascii=True))
        return
    for line in human_lines:
        output_sink(line)


def report_lines(command: str, root: Path, report: Report) -> list[str]:
    """Human-readable findings followed by the per-category summary."""
    lines = [f"{command}: root={root}"]
    lines.extend(finding.render() for finding in report.sorted_findings())
    lines.extend(f"{command}: {line}" for line in report.summary_lines())
    return lines


def error_payload(root: Path, exc: BaseException) -> dict:
    return {
        "root": str(root),
        "status": "ERROR",
        "error_type": exc.__class__.__name__,
        "error_message": str(exc),
    }
