"""Core data models for route records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from routecheck.errors import CoordinateError
from routecheck.core.identity.signature import point_axes

logger = logging.getLogger(__name__)

START_MAP_ID_FIELD = "StartGameMapId"


class LoadError(str, Enum):
    """Why a record could not be turned into a RouteRecord."""
    MALFORMED = "malformed"
    SCHEMA = "schema"


@dataclass(frozen=True, slots=True)
class RoutePoint:
    """A single 3D waypoint."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class RouteRecord:
    """A named waypoint path stored as one JSON file.

    Identity is ``path``, the POSIX path relative to the scan root.
    """
    path: str
    name: str
    coordinates: tuple[RoutePoint, ...]
    start_map_id: Optional[int] = None

    @property
    def folder(self) -> str:
        """Relative folder holding the record ("" at the root)."""
        parent = PurePosixPath(self.path).parent.as_posix()
        return "" if parent == "." else parent

    @property
    def is_empty(self) -> bool:
        return not self.coordinates


@dataclass(frozen=True)
class RecordLoad:
    """Explicit result of reading one record file.

    Exactly one of ``record`` and ``error`` is set.
    """
    path: str
    record: Optional[RouteRecord] = None
    error: Optional[str] = None
    error_kind: Optional[LoadError] = None
    raw_text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def parse_route_record(path: str, text: str) -> RecordLoad:
    """Parse raw record text into a RecordLoad without raising."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return RecordLoad(
            path=path,
            error=f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            error_kind=LoadError.MALFORMED,
            raw_text=text,
        )
    except (RecursionError, ValueError) as exc:
        return RecordLoad(
            path=path,
            error=f"invalid JSON: {exc}",
            error_kind=LoadError.MALFORMED,
            raw_text=text,
        )

    try:
        record = route_record_from_dict(path, data)
    except (CoordinateError, TypeError, ValueError) as exc:
        return RecordLoad(path=path, error=str(exc), error_kind=LoadError.SCHEMA, raw_text=text)

    return RecordLoad(path=path, record=record, raw_text=text)


def load_route_record(file_path: Path, relative_path: str) -> RecordLoad:
    """Read and parse a record file; I/O and decoding failures become errors."""
    try:
        text = file_path.read_bytes().decode("utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read %s: %s", file_path, exc)
        return RecordLoad(
            path=relative_path,
            error=f"unreadable: {exc}",
            error_kind=LoadError.MALFORMED,
        )
    return parse_route_record(relative_path, text)


def route_record_from_dict(path: str, data: Any) -> RouteRecord:
    """Validate the record schema and build a RouteRecord.

    Raises:
        TypeError: the document or a field has the wrong type
        ValueError: a required field is missing
        CoordinateError: a coordinate lacks three numeric axes
    """
    if not isinstance(data, dict):
        raise TypeError(f"record must be a JSON object, got {type(data).__name__}")

    if "Name" not in data:
        raise ValueError("missing required field 'Name'")
    name = data["Name"]
    if not isinstance(name, str):
        raise TypeError(f"'Name' must be a string, got {type(name).__name__}")

    if "Coordinates" not in data:
        raise ValueError("missing required field 'Coordinates'")
    raw_points = data["Coordinates"]
    if not isinstance(raw_points, list):
        raise TypeError(f"'Coordinates' must be an array, got {type(raw_points).__name__}")

    points = []
    for index, raw in enumerate(raw_points):
        if not isinstance(raw, dict):
            raise CoordinateError(f"point {index} must be an object with X, Y, Z")
        x, y, z = point_axes(raw, index)
        points.append(RoutePoint(x, y, z))

    start_map_id = data.get(START_MAP_ID_FIELD)
    if start_map_id is not None and (
        isinstance(start_map_id, bool) or not isinstance(start_map_id, int)
    ):
        raise TypeError(
            f"'{START_MAP_ID_FIELD}' must be an integer, got {type(start_map_id).__name__}"
        )

    return RouteRecord(
        path=path,
        name=name,
        coordinates=tuple(points),
        start_map_id=start_map_id,
    )
