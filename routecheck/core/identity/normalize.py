"""Pure normalization functions for map and folder names.

This module provides the comparison layer used by the canonical index and the
path resolver:

1. **Normalized keys** (`normalize_key`):
   - Lowercase, apostrophes removed, punctuation collapsed to spaces
   - Two names are equivalent iff their keys are equal
   - Example: "Lion's Arch" → "lions arch"

2. **Near-plural keys** (`near_plural_key`):
   - Normalized key with one trailing "s" dropped per token
   - Example: "Grottos" → "grotto"

3. **Apostrophe forms** (`apostrophe_form`):
   - Like a normalized key, but apostrophes are kept (unified to "'")
   - Used to tell "Lion's Arch" apart from its drifted spelling "Lions Arch"

All functions are pure and total: they never raise and never touch state.
"""

from __future__ import annotations

import re


APOSTROPHES = "'’‘`ʼ´"

_APOSTROPHE_TABLE = str.maketrans({ch: None for ch in APOSTROPHES})
_UNIFY_APOSTROPHE_TABLE = str.maketrans({ch: "'" for ch in APOSTROPHES})

_NON_KEY_CHARS = re.compile(r"[^a-z0-9 ]")
_NON_FORM_CHARS = re.compile(r"[^a-z0-9' ]")
_WHITESPACE = re.compile(r"\s+")
_ORDER_PREFIX = re.compile(r"^\d+[\s._-]+")


# ============================================================================
# Comparison Keys
# ============================================================================


def normalize_key(text: str | None) -> str:
    """Canonicalize free text into a comparable key.

    Args:
        text: Folder segment, file base name or canonical map name

    Returns:
        Lowercase key made of ``[a-z0-9]`` tokens separated by single spaces

    Examples:
        >>> normalize_key("Lion's Arch")
        'lions arch'
        >>> normalize_key("  LIONS   ARCH ")
        'lions arch'
        >>> normalize_key("Dragon's Stand (Meta)")
        'dragons stand meta'
    """
    if not text:
        return ""

    cleaned = text.lower().translate(_APOSTROPHE_TABLE)
    cleaned = _NON_KEY_CHARS.sub(" ", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def near_plural_key(text: str | None) -> str:
    """Create a key that folds singular/plural drift token by token.

    Examples:
        >>> near_plural_key("Grottos")
        'grotto'
        >>> near_plural_key("Sirens Landing")
        'siren landing'
    """
    return " ".join(_strip_plural(token) for token in normalize_key(text).split())


def apostrophe_form(text: str | None) -> str:
    """Lowercase comparison form that keeps apostrophes.

    Examples:
        >>> apostrophe_form("Lion’s  Arch")
        "lion's arch"
        >>> apostrophe_form("Lions-Arch")
        'lions arch'
    """
    if not text:
        return ""

    cleaned = text.lower().translate(_UNIFY_APOSTROPHE_TABLE)
    cleaned = _NON_FORM_CHARS.sub(" ", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


# ============================================================================
# Display Variants
# ============================================================================


def strip_apostrophes(text: str) -> str:
    """Remove apostrophe characters, keeping everything else.

    >>> strip_apostrophes("Lion's Arch")
    'Lions Arch'
    """
    return text.translate(_APOSTROPHE_TABLE)


def strip_possessive(text: str) -> str:
    """Remove possessive ``'s`` suffixes, then any remaining apostrophes.

    >>> strip_possessive("Lion's Arch")
    'Lion Arch'
    >>> strip_possessive("Bitterfrost Frontier")
    'Bitterfrost Frontier'
    """
    words = []
    for word in text.translate(_UNIFY_APOSTROPHE_TABLE).split(" "):
        if word.lower().endswith("'s"):
            word = word[:-2]
        words.append(word)
    return strip_apostrophes(" ".join(words))


def has_apostrophe(text: str) -> bool:
    return any(ch in text for ch in APOSTROPHES)


# ============================================================================
# Path Segments
# ============================================================================


def strip_order_prefix(segment: str) -> str:
    """Drop a leading numeric ordering prefix from a folder name.

    A segment made only of digits is returned unchanged.

    Examples:
        >>> strip_order_prefix("01 Core Tyria")
        'Core Tyria'
        >>> strip_order_prefix("3_Heart of Thorns")
        'Heart of Thorns'
        >>> strip_order_prefix("2024")
        '2024'
    """
    stripped = _ORDER_PREFIX.sub("", segment.strip(), count=1)
    return stripped if stripped else segment.strip()


# ============================================================================
# Token Comparison
# ============================================================================


def plural_drift(left: str, right: str) -> bool:
    """Return True if two names differ only by trailing "s" per token.

    Both arguments are normalized first. Identical names are never drift.

    Examples:
        >>> plural_drift("Grottos", "Grotto")
        True
        >>> plural_drift("Grotto", "Grotto")
        False
        >>> plural_drift("Grottos Deep", "Grotto")
        False
    """
    left_tokens = normalize_key(left).split()
    right_tokens = normalize_key(right).split()
    if not left_tokens or len(left_tokens) != len(right_tokens):
        return False

    differs = False
    for a, b in zip(left_tokens, right_tokens):
        if a == b:
            continue
        if a == b + "s" or b == a + "s":
            differs = True
            continue
        return False
    return differs


def _strip_plural(token: str) -> str:
    if len(token) > 1 and token.endswith("s"):
        return token[:-1]
    return token
