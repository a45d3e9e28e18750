"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from routecheck.core.identity import CanonicalIndex
from tests.helpers.fs import RouteSpec, build_route_tree, write_reference


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config and ROUTECHECK_* variables out of every test."""
    monkeypatch.delenv("ROUTECHECK_SIGNATURE_PRECISION", raising=False)
    monkeypatch.delenv("ROUTECHECK_STRICT", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def record_root(tmp_path: Path) -> Path:
    """Create an empty record root directory."""
    root = tmp_path / "routes"
    root.mkdir()
    return root


@pytest.fixture
def route_tree(record_root: Path) -> Callable[[Iterable[RouteSpec]], list[Path]]:
    """Factory writing record files under record_root."""
    def _build(specs: Iterable[RouteSpec]) -> list[Path]:
        return build_route_tree(record_root, specs)
    return _build


@pytest.fixture
def reference_file(tmp_path: Path) -> Callable[[Iterable[tuple[str, Any]]], Path]:
    """Factory writing a JSON reference list outside the record root."""
    def _write(pairs: Iterable[tuple[str, Any]]) -> Path:
        return write_reference(tmp_path / "reference" / "maps.json", pairs)
    return _write


@pytest.fixture
def tyria_index() -> CanonicalIndex:
    """A small reference index covering every match kind."""
    return CanonicalIndex.from_pairs(
        [
            ("Lion's Arch", "50"),
            ("Grotto", "101"),
            ("Core Tyria", ""),
            ("Queensdale", 15),
            ("Dragon's Stand", "1041"),
            ("Mistlock Sanctuary", "1206"),
            ("Mistlock Sanctuary", "1207"),
            ("Bitterfrost Frontier", "not-a-number"),
        ]
    )
