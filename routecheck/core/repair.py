"""Text-preserving repair of route record files.

Only the inserted field (and, when the anchor was the last member, one comma)
is added; every other byte of the record stays as it was, including
indentation, line endings and a UTF-8 byte order mark.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
import json
import logging
from pathlib import Path

from routecheck.core.models import START_MAP_ID_FIELD
from routecheck.errors import RepairError

logger = logging.getLogger(__name__)

# Insertion anchors, highest priority first.
ANCHOR_FIELDS = ("LastUpdated", "Author", "CreatedWithTool", "FormatVersion", "Name")


@dataclass(frozen=True)
class _Member:
    """Offsets of one top-level member in the raw text."""
    key_start: int
    value_end: int


def insert_start_map_id(text: str, map_id: int) -> str:
    """Insert ``StartGameMapId`` after the highest-priority anchor field.

    Raises:
        RepairError: the text is not a JSON object, already has the field,
            has no anchor field, or the result does not re-parse
    """
    try:
        original = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RepairError(f"record is not valid JSON: {exc.msg}") from exc
    except (RecursionError, ValueError) as exc:
        raise RepairError(f"record is not valid JSON: {exc}") from exc
    if not isinstance(original, dict):
        raise RepairError("record is not a JSON object")
    if START_MAP_ID_FIELD in original:
        raise RepairError(f"record already has {START_MAP_ID_FIELD}")

    members = top_level_members(text)
    anchor = next((name for name in ANCHOR_FIELDS if name in members), None)
    if anchor is None:
        raise RepairError(f"record has none of the anchor fields {', '.join(ANCHOR_FIELDS)}")

    updated = _insert_after(text, members[anchor], f'"{START_MAP_ID_FIELD}": {int(map_id)}')

    try:
        parsed = json.loads(updated)
    except json.JSONDecodeError as exc:
        raise RepairError(f"insertion produced invalid JSON: {exc.msg}") from exc
    except (RecursionError, ValueError) as exc:
        raise RepairError(f"insertion produced invalid JSON: {exc}") from exc
    inserted = parsed.pop(START_MAP_ID_FIELD, None)
    if inserted != map_id or parsed != original:
        raise RepairError("insertion changed record content unexpectedly")
    return updated


def repair_file(path: Path, map_id: int, *, dry_run: bool = False) -> str:
    """Insert ``StartGameMapId`` into a record file and return the new text."""
    data = path.read_bytes()
    bom = codecs.BOM_UTF8 if data.startswith(codecs.BOM_UTF8) else b""
    try:
        text = data[len(bom):].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RepairError(f"record is not UTF-8: {exc}") from exc

    updated = insert_start_map_id(text, map_id)
    if dry_run:
        logger.info("Would insert %s=%d into %s", START_MAP_ID_FIELD, map_id, path)
    else:
        path.write_bytes(bom + updated.encode("utf-8"))
        logger.info("Inserted %s=%d into %s", START_MAP_ID_FIELD, map_id, path)
    return updated


def top_level_members(text: str) -> dict[str, _Member]:
    """Locate the members of the root JSON object (first occurrence wins)."""
    members: dict[str, _Member] = {}
    depth = 0
    expect_key = False
    current: tuple[str, int] | None = None
    last_significant = 0
    i = 0
    length = len(text)

    def close_member() -> None:
        nonlocal current
        if current is not None:
            name, key_start = current
            members.setdefault(name, _Member(key_start=key_start, value_end=last_significant))
            current = None

    while i < length:
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            if depth == 1 and expect_key:
                current = (json.loads(text[i:end]), i)
                expect_key = False
            last_significant = end
            i = end
            continue
        if ch in "{[":
            depth += 1
            if depth == 1:
                if ch != "{":
                    raise RepairError("record is not a JSON object")
                expect_key = True
            last_significant = i + 1
        elif ch in "}]":
            if depth == 1:
                close_member()
            depth -= 1
            last_significant = i + 1
        elif ch == "," and depth == 1:
            close_member()
            expect_key = True
        elif not ch.isspace():
            last_significant = i + 1
        i += 1
    return members


def _string_end(text: str, start: int) -> int:
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    raise RepairError("unterminated string in record")


def _insert_after(text: str, anchor: _Member, field: str) -> str:
    line_start = text.rfind("\n", 0, anchor.key_start) + 1
    indent = text[line_start:anchor.key_start]
    line_end = text.find("\n", anchor.value_end)
    if line_end == -1:
        line_end = len(text)
    trailing = text[anchor.value_end:line_end]
    has_comma = trailing.lstrip().startswith(",")
    rest = trailing.lstrip()[1:] if has_comma else trailing

    own_line = indent.strip() == "" and rest.strip() == "" and line_end < len(text)
    if not own_line:
        if has_comma:
            comma = anchor.value_end + trailing.index(",") + 1
            return f"{text[:comma]} {field},{text[comma:]}"
        return f"{text[:anchor.value_end]}, {field}{text[anchor.value_end:]}"

    newline = "\r\n" if "\r\n" in text else "\n"
    next_line = line_end + 1
    if has_comma:
        return f"{text[:next_line]}{indent}{field},{newline}{text[next_line:]}"
    return (
        f"{text[:anchor.value_end]},{text[anchor.value_end:next_line]}"
        f"{indent}{field}{newline}{text[next_line:]}"
    )
