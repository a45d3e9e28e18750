"""Integration tests for `routecheck check`."""

from __future__ import annotations

from argparse import Namespace
import json
from pathlib import Path

from routecheck import cli
from routecheck.commands.check import run_check
from routecheck.errors import ReferenceListError
from tests.helpers.fs import RouteSpec


def _args(root: Path, reference: Path, **overrides) -> Namespace:
    values = {
        "root": root,
        "reference": reference,
        "config": root.parent / "no-settings.json",
        "precision": None,
        "no_mode_defaults": False,
        "strict": False,
        "json": False,
    }
    values.update(overrides)
    return Namespace(**values)


def test_check_reports_apostrophe_near_typo(record_root, route_tree, reference_file) -> None:
    reference = reference_file([("Lion's Arch", "50")])
    route_tree([RouteSpec("Maps/01 Core Tyria/Lions Arch/route.json")])
    lines: list[str] = []

    exit_code = run_check(_args(record_root, reference), output_sink=lines.append)

    assert exit_code == 0
    assert (
        "WARNING [near-typo] Maps/01 Core Tyria/Lions Arch/route.json: folder 'Lions Arch' is a "
        "apostrophe-near spelling of 'Lion's Arch' (Lions Arch -> Lion's Arch)"
    ) in lines
    assert "check: summary: near-typo=1" in lines
    assert "check: summary: missing-map-id=1" in lines


def test_check_json_envelope(record_root, route_tree, reference_file) -> None:
    reference = reference_file([("Lion's Arch", "50")])
    route_tree([RouteSpec("Maps/01 Core Tyria/Lions Arch/route.json")])
    lines: list[str] = []

    run_check(_args(record_root, reference, json=True), output_sink=lines.append)

    envelope = json.loads(lines[0])
    assert envelope["schema_version"] == "v1"
    assert envelope["command"] == "check"
    data = envelope["data"]
    assert data["status"] == "OK"
    assert data["counts"] == {"near-typo": 1, "missing-map-id": 1}
    (resolution,) = data["resolutions"]
    assert resolution["map_id"] == 50
    assert resolution["match_kind"] == "apostrophe-near"
    assert resolution["canonical_name"] == "Lion's Arch"


def test_strict_mode_fails_on_warnings(record_root, route_tree, reference_file) -> None:
    reference = reference_file([("Lion's Arch", "50")])
    route_tree([RouteSpec("Maps/Unknown Place/route.json")])

    assert run_check(_args(record_root, reference), output_sink=lambda _: None) == 0
    assert run_check(_args(record_root, reference, strict=True), output_sink=lambda _: None) == 1


def test_error_findings_fail_the_run(record_root, route_tree, reference_file) -> None:
    reference = reference_file([("Queensdale", 15)])
    route_tree([RouteSpec("Queensdale/route.json", start_map_id=99)])
    (record_root / "Queensdale" / "broken.json").write_text("{")

    lines: list[str] = []
    assert run_check(_args(record_root, reference), output_sink=lines.append) == 1
    assert any(line.startswith("ERROR [malformed] Queensdale/broken.json") for line in lines)
    assert any(line.startswith("ERROR [map-id-mismatch] Queensdale/route.json") for line in lines)


def test_missing_reference_aborts(record_root, route_tree, tmp_path) -> None:
    route_tree([RouteSpec("Maps/a.json")])
    lines: list[str] = []

    exit_code = run_check(_args(record_root, tmp_path / "missing.json", json=True), output_sink=lines.append)

    assert exit_code == ReferenceListError.exit_code
    data = json.loads(lines[0])["data"]
    assert data["status"] == "ERROR"
    assert data["error_type"] == "ReferenceListError"


def test_missing_root_is_io_failure(tmp_path, reference_file) -> None:
    reference = reference_file([("Queensdale", 15)])
    lines: list[str] = []

    assert run_check(_args(tmp_path / "nope", reference), output_sink=lines.append) == 3
    assert lines[0].startswith("check: error=")


def test_reference_inside_root_is_not_scanned(record_root, route_tree) -> None:
    route_tree([RouteSpec("Queensdale/route.json", start_map_id=15)])
    reference = record_root / "maps.json"
    reference.write_text(json.dumps([{"name": "Queensdale", "id": 15}]))
    lines: list[str] = []

    assert run_check(_args(record_root, reference), output_sink=lines.append) == 0
    assert not any("maps.json" in line for line in lines[1:])


def test_precision_flag_changes_duplicate_detection(record_root, route_tree, reference_file) -> None:
    reference = reference_file([("Queensdale", 15)])
    route_tree(
        [
            RouteSpec("Queensdale/a.json", coordinates=((1.04, 0, 0),), start_map_id=15),
            RouteSpec("Queensdale/b.json", coordinates=((1.0, 0, 0),), start_map_id=15),
        ]
    )
    coarse: list[str] = []
    fine: list[str] = []

    run_check(_args(record_root, reference, precision=1), output_sink=coarse.append)
    run_check(_args(record_root, reference), output_sink=fine.append)

    assert "check: summary: duplicate=2" in coarse
    assert not any("duplicate" in line for line in fine)


def test_cli_main_runs_check(monkeypatch, record_root, route_tree, reference_file, capsys) -> None:
    reference = reference_file([("Queensdale", 15)])
    route_tree([RouteSpec("Queensdale/route.json", start_map_id=15)])

    exit_code = cli.main(["check", str(record_root), "--reference", str(reference)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "check: summary: scanned=1 parsed=1 errors=0 warnings=0 info=0" in out
