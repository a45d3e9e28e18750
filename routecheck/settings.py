"""Application settings."""

from __future__ import annotations

from dataclasses import dataclass, replace
import json
import os
from pathlib import Path
from typing import Any, Optional

from routecheck.core.ambiguity import ModeDefault
from routecheck.core.identity.signature import DEFAULT_PRECISION
from routecheck.errors import ValidationError


_DEFAULT_EXTENSIONS = (".json",)
_MAX_PRECISION = 12
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    signature_precision: int = DEFAULT_PRECISION
    strict: bool = False
    mode_defaults_enabled: bool = True
    mode_defaults: tuple[ModeDefault, ...] = ()
    record_extensions: tuple[str, ...] = _DEFAULT_EXTENSIONS
    exclude_patterns: tuple[str, ...] = ()

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "signature_precision" in changes:
            changes["signature_precision"] = _validate_precision(changes["signature_precision"])
        return replace(self, **changes)


def load_settings(path: Optional[Path]) -> Settings:
    """Load settings from JSON config file, with environment variable overrides.

    Priority order:
    1. Environment variables (for appropriate settings)
    2. JSON config file
    3. Defaults

    Args:
        path: Path to JSON config file, or None to use defaults only

    Returns:
        Settings object with resolved values

    Raises:
        ValidationError: the config file or an override holds an invalid value
    """
    json_settings: dict[str, Any] = {}
    if path and path.exists():
        try:
            json_settings = json.loads(path.read_text(encoding="utf-8"))
        except (RecursionError, ValueError) as exc:
            raise ValidationError(f"Invalid settings file {path}: {exc}") from exc
        if not isinstance(json_settings, dict):
            raise ValidationError(f"Settings file {path} must contain a JSON object")

    precision = os.getenv("ROUTECHECK_SIGNATURE_PRECISION") or json_settings.get(
        "signature_precision", DEFAULT_PRECISION
    )
    strict_env = os.getenv("ROUTECHECK_STRICT")
    strict = _parse_bool(strict_env) if strict_env is not None else json_settings.get("strict", False)
    if not isinstance(strict, bool):
        raise ValidationError(f"'strict' must be a boolean, got {strict!r}")

    mode_defaults_enabled = json_settings.get("mode_defaults_enabled", True)
    if not isinstance(mode_defaults_enabled, bool):
        raise ValidationError(
            f"'mode_defaults_enabled' must be a boolean, got {mode_defaults_enabled!r}"
        )

    return Settings(
        signature_precision=_validate_precision(precision),
        strict=strict,
        mode_defaults_enabled=mode_defaults_enabled,
        mode_defaults=_parse_mode_defaults(json_settings.get("mode_defaults", [])),
        record_extensions=_parse_extensions(
            json_settings.get("record_extensions", list(_DEFAULT_EXTENSIONS))
        ),
        exclude_patterns=_parse_strings(json_settings.get("exclude_patterns", []), "exclude_patterns"),
    )


def default_config_path() -> Path:
    return Path.home() / ".config" / "routecheck" / "settings.json"


def _validate_precision(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Unsupported signature precision: {value!r}")
    try:
        precision = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Unsupported signature precision: {value!r}") from None
    if not 0 <= precision <= _MAX_PRECISION:
        raise ValidationError(
            f"Signature precision must be between 0 and {_MAX_PRECISION}, got {precision}"
        )
    return precision


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValidationError(f"Cannot interpret {value!r} as a boolean")


def _parse_mode_defaults(raw: Any) -> tuple[ModeDefault, ...]:
    if not isinstance(raw, list):
        raise ValidationError("'mode_defaults' must be a list of objects")
    defaults = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValidationError(f"Invalid mode default: {item!r}")
        pattern = item.get("pattern")
        map_id = item.get("map_id")
        if not isinstance(pattern, str) or not pattern:
            raise ValidationError(f"Mode default needs a non-empty 'pattern': {item!r}")
        if isinstance(map_id, bool) or not isinstance(map_id, int):
            raise ValidationError(f"Mode default needs an integer 'map_id': {item!r}")
        defaults.append(ModeDefault(pattern=pattern, map_id=map_id, label=str(item.get("label", ""))))
    return tuple(defaults)


def _parse_extensions(raw: Any) -> tuple[str, ...]:
    extensions = _parse_strings(raw, "record_extensions")
    normalized = tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions)
    if not normalized:
        raise ValidationError("'record_extensions' must not be empty")
    return normalized


def _parse_strings(raw: Any, name: str) -> tuple[str, ...]:
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ValidationError(f"'{name}' must be a list of strings")
    return tuple(raw)
