"""Error taxonomy and exit code mapping for CLI."""

from __future__ import annotations


class RoutecheckError(Exception):
    """Base error for deterministic CLI exit codes."""

    exit_code: int = 1


class ValidationError(RoutecheckError):
    """Invalid user input, configuration or command usage."""

    exit_code = 2


class RuntimeFailure(RoutecheckError):
    """Unexpected runtime failure."""

    exit_code = 1


class IOFailure(RoutecheckError):
    """Filesystem or I/O failure."""

    exit_code = 3


class ReferenceListError(IOFailure):
    """The canonical reference list is missing or unreadable.

    This is the only condition that aborts a whole scan.
    """


class CoordinateError(ValueError):
    """A route point does not carry three finite numeric axes."""


class RepairError(ValueError):
    """A record's raw text cannot take an inserted field."""


def exit_code_for_exception(exc: BaseException) -> int:
    """Resolve a deterministic exit code for an exception."""
    if isinstance(exc, RoutecheckError):
        return exc.exit_code
    if isinstance(exc, OSError):
        return IOFailure.exit_code
    return RuntimeFailure.exit_code
