"""Unit tests for map id ambiguity resolution."""

from __future__ import annotations

import pytest

from routecheck.core.ambiguity import AmbiguityResolver, ModeDefault, ResolutionMethod, SiblingIndex
from routecheck.core.models import RouteRecord


def _record(path: str, start_map_id: int | None = None) -> RouteRecord:
    return RouteRecord(path=path, name="r", coordinates=(), start_map_id=start_map_id)


class TestResolve:
    """Test the name-based precedence rules."""

    def test_single_candidate(self):
        resolution = AmbiguityResolver().resolve({50})

        assert resolution.map_id == 50
        assert resolution.method is ResolutionMethod.SINGLE
        assert not resolution.low_confidence

    def test_sibling_confirmation_picks_observed_id(self):
        resolution = AmbiguityResolver().resolve({10, 20}, {20})

        assert resolution.map_id == 20
        assert resolution.method is ResolutionMethod.SIBLING
        assert resolution.candidates == (10, 20)
        assert not resolution.low_confidence

    def test_no_sibling_overlap_falls_back_to_lowest(self):
        resolution = AmbiguityResolver().resolve({20, 10}, {99})

        assert resolution.map_id == 10
        assert resolution.method is ResolutionMethod.LOWEST
        assert resolution.low_confidence

    def test_siblings_confirming_two_candidates_is_still_ambiguous(self):
        resolution = AmbiguityResolver().resolve({10, 20, 30}, {20, 30})

        assert resolution.map_id == 10
        assert resolution.low_confidence

    def test_no_candidates_is_an_error(self):
        with pytest.raises(ValueError):
            AmbiguityResolver().resolve(set())


class TestModeDefaults:
    """Test path-pattern overrides."""

    def test_pattern_match_wins_over_candidates(self):
        resolver = AmbiguityResolver([ModeDefault("*/minigames/*", 1000, "Minigames")])
        resolution = resolver.resolve_record("Maps/Minigames/Ascent/route.json", {50}, {50})

        assert resolution.map_id == 1000
        assert resolution.method is ResolutionMethod.MODE_DEFAULT
        assert resolution.mode_default.label == "Minigames"

    def test_first_matching_pattern_wins(self):
        resolver = AmbiguityResolver(
            [ModeDefault("story/*", 1), ModeDefault("story/chapter 1/*", 2)]
        )
        assert resolver.mode_default_for("Story/Chapter 1/route.json").map_id == 1

    def test_disabled_mode_defaults_are_ignored(self):
        resolver = AmbiguityResolver([ModeDefault("*", 1000)], mode_defaults_enabled=False)

        assert resolver.mode_default_for("Maps/route.json") is None
        assert resolver.resolve_record("Maps/route.json", {50}).map_id == 50

    def test_no_pattern_and_no_candidates(self):
        assert AmbiguityResolver().resolve_record("Maps/route.json", ()) is None


class TestSiblingIndex:
    """Test per-folder identifier observations."""

    def test_siblings_exclude_own_id(self):
        records = [
            _record("Maps/Mistlock/a.json", 1206),
            _record("Maps/Mistlock/b.json"),
            _record("Maps/Other/c.json", 1207),
        ]
        index = SiblingIndex.from_records(records)

        assert index.siblings_for(records[1]) == frozenset({1206})
        assert index.siblings_for(records[0]) == frozenset()
        assert index.siblings_for(records[2]) == frozenset()

    def test_duplicate_ids_in_folder_still_count_for_record(self):
        records = [_record("M/a.json", 5), _record("M/b.json", 5)]
        index = SiblingIndex.from_records(records)

        assert index.siblings_for(records[0]) == frozenset({5})

    def test_root_folder(self):
        record = _record("a.json", 3)
        assert record.folder == ""
        assert SiblingIndex.from_records([record, _record("b.json")]).siblings_for(_record("b.json")) == frozenset({3})
