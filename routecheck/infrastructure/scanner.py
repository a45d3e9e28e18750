"""Route record discovery and loading."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterator
from pathlib import Path

from routecheck.core.models import RecordLoad, load_route_record


class RouteScanner:
    """Scans a root directory for route record files.

    Symlink policy: do not follow symlinked directories and skip symlinked files.
    Paths are reported relative to the root in POSIX form and in sorted order.
    """

    DEFAULT_EXTENSIONS = (".json",)

    def __init__(
        self,
        root: Path,
        extensions: tuple[str, ...] | None = None,
        exclude_patterns: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        """Initialize scanner.

        Args:
            root: Root directory holding route records
            extensions: File extensions to include (default: .json)
            exclude_patterns: fnmatch patterns (against the relative path) to exclude
        """
        self.root = root
        self.extensions = tuple(ext.lower() for ext in (extensions or self.DEFAULT_EXTENSIONS))
        self.exclude_patterns = list(exclude_patterns or [])

    def iter_record_paths(self) -> Iterator[tuple[Path, str]]:
        """Yield ``(absolute_path, relative_posix_path)`` for every record file."""
        if not self.root.exists():
            return

        found: list[tuple[Path, str]] = []
        for dirpath, dirnames, filenames in os.walk(self.root, followlinks=False):
            dirnames.sort()
            filenames.sort()
            directory = Path(dirpath)
            for name in filenames:
                file_path = directory / name
                if not file_path.is_file() or file_path.is_symlink():
                    continue
                relative = file_path.relative_to(self.root).as_posix()
                if self._should_include(relative):
                    found.append((file_path, relative))
        found.sort(key=lambda item: item[1])
        yield from found

    def load_records(self) -> list[RecordLoad]:
        """Load every discovered record; failures are returned, not raised."""
        return [load_route_record(path, relative) for path, relative in self.iter_record_paths()]

    def _should_include(self, relative: str) -> bool:
        """Check if file should be included based on extension and exclude patterns."""
        if not relative.lower().endswith(self.extensions):
            return False

        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(relative, pattern):
                return False

        return True
