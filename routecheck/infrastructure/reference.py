"""Reference list loading (JSON or CSV)."""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any

from routecheck.core.identity import CanonicalIndex, ReferenceEntry
from routecheck.errors import ReferenceListError

logger = logging.getLogger(__name__)

_NAME_FIELDS = ("name", "Name", "MapName", "map_name")
_ID_FIELDS = ("id", "Id", "ID", "MapId", "map_id")


def load_reference_entries(path: Path) -> list[ReferenceEntry]:
    """Read the reference list in file order.

    JSON files hold an array of objects (or ``{"maps": [...]}``); any other
    extension is read as CSV with a header row.

    Raises:
        ReferenceListError: the file is missing, unreadable or malformed
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        raise ReferenceListError(f"Reference list does not exist: {path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise ReferenceListError(f"Cannot read reference list {path}: {exc}") from exc

    if path.suffix.lower() == ".json":
        entries = _entries_from_json(text, path)
    else:
        entries = _entries_from_csv(text, path)
    logger.debug("Loaded %d reference entries from %s", len(entries), path)
    return entries


def load_reference_index(path: Path) -> CanonicalIndex:
    """Load the reference list and build the canonical index from it."""
    return CanonicalIndex(load_reference_entries(path))


def _entries_from_json(text: str, path: Path) -> list[ReferenceEntry]:
    try:
        data = json.loads(text)
    except (RecursionError, ValueError) as exc:
        raise ReferenceListError(f"Reference list {path} is not valid JSON: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("maps"), list):
        data = data["maps"]
    if not isinstance(data, list):
        raise ReferenceListError(f"Reference list {path} must be a JSON array of objects")

    entries = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise ReferenceListError(f"Reference list {path}: entry {position} is not an object")
        entries.append(_entry(item))
    return entries


def _entries_from_csv(text: str, path: Path) -> list[ReferenceEntry]:
    reader = csv.DictReader(io.StringIO(text))
    header = reader.fieldnames or []
    if not any(field in header for field in _NAME_FIELDS) or not any(
        field in header for field in _ID_FIELDS
    ):
        raise ReferenceListError(
            f"Reference list {path} needs a header with a name column and an id column"
        )
    return [_entry(row) for row in reader]


def _entry(item: dict[str, Any]) -> ReferenceEntry:
    name = _first(item, _NAME_FIELDS)
    map_id = _first(item, _ID_FIELDS)
    return ReferenceEntry(name=name if isinstance(name, str) else "", id=map_id)


def _first(item: dict[str, Any], fields: tuple[str, ...]) -> Any:
    for field in fields:
        if field in item:
            return item[field]
    return None
