"""Unit tests for route record parsing."""

from __future__ import annotations

import json
from pathlib import Path

from routecheck.core.models import LoadError, RoutePoint, load_route_record, parse_route_record


def _text(**fields) -> str:
    data = {"Name": "Route", "Coordinates": [{"X": 1, "Y": 2.5, "Z": -3}]}
    data.update(fields)
    return json.dumps(data)


class TestParseRouteRecord:
    """Test schema validation into RecordLoad values."""

    def test_valid_record(self):
        load = parse_route_record("Maps/a.json", _text(StartGameMapId=50))

        assert load.ok
        assert load.error is None
        assert load.record.name == "Route"
        assert load.record.coordinates == (RoutePoint(1.0, 2.5, -3.0),)
        assert load.record.start_map_id == 50
        assert load.record.folder == "Maps"

    def test_missing_map_id_is_allowed(self):
        load = parse_route_record("a.json", _text())
        assert load.ok
        assert load.record.start_map_id is None

    def test_invalid_json_is_malformed(self):
        load = parse_route_record("a.json", '{"Name": "x",')

        assert not load.ok
        assert load.error_kind is LoadError.MALFORMED
        assert "invalid JSON" in load.error
        assert load.path == "a.json"

    def test_deeply_nested_json_is_malformed(self):
        load = parse_route_record("x/a.json", "[" * 100000 + "]" * 100000)

        assert load.error_kind is LoadError.MALFORMED
        assert "invalid JSON" in load.error

    def test_axis_too_large_for_float_is_schema_error(self):
        text = '{"Name": "n", "Coordinates": [{"X": 1' + "0" * 400 + ', "Y": 0, "Z": 0}]}'
        load = parse_route_record("a.json", text)

        assert load.error_kind is LoadError.SCHEMA
        assert "too large" in load.error

    def test_missing_name_is_schema_error(self):
        load = parse_route_record("a.json", json.dumps({"Coordinates": []}))

        assert load.error_kind is LoadError.SCHEMA
        assert "Name" in load.error

    def test_wrong_types_are_schema_errors(self):
        assert parse_route_record("a.json", _text(Name=5)).error_kind is LoadError.SCHEMA
        assert parse_route_record("a.json", _text(Coordinates={})).error_kind is LoadError.SCHEMA
        assert parse_route_record("a.json", _text(StartGameMapId="50")).error_kind is LoadError.SCHEMA
        assert parse_route_record("a.json", _text(StartGameMapId=True)).error_kind is LoadError.SCHEMA
        assert parse_route_record("a.json", "[1, 2]").error_kind is LoadError.SCHEMA

    def test_bad_coordinate_is_schema_error(self):
        load = parse_route_record("a.json", _text(Coordinates=[{"X": 1, "Y": 2}]))

        assert load.error_kind is LoadError.SCHEMA
        assert "point 0" in load.error

    def test_empty_coordinates_parse(self):
        load = parse_route_record("a.json", _text(Coordinates=[]))
        assert load.ok
        assert load.record.is_empty


class TestLoadRouteRecord:
    """Test reading record files from disk."""

    def test_reads_utf8_with_bom(self, tmp_path: Path):
        path = tmp_path / "a.json"
        path.write_bytes(b"\xef\xbb\xbf" + _text().encode("utf-8"))

        assert load_route_record(path, "a.json").ok

    def test_missing_file_is_malformed(self, tmp_path: Path):
        load = load_route_record(tmp_path / "missing.json", "missing.json")

        assert load.error_kind is LoadError.MALFORMED
        assert load.error.startswith("unreadable")

    def test_non_utf8_is_malformed(self, tmp_path: Path):
        path = tmp_path / "a.json"
        path.write_bytes(b'{"Name": "\xff"}')

        assert load_route_record(path, "a.json").error_kind is LoadError.MALFORMED
