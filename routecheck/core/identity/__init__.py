"""Map identity layer for routecheck.

The identity system has three pieces:
- Normalization: pure functions turning free text into comparison keys
- Canonical index: immutable lookup tables built from the reference list
- Signatures: content fingerprints of route geometry

See: routecheck.core.identity.normalize for the pure function API
"""

from .index import CanonicalEntry, CanonicalIndex, KeyCollision, ReferenceEntry, parse_map_id
from .normalize import (
    # Comparison keys
    normalize_key,
    near_plural_key,
    apostrophe_form,
    # Display variants
    strip_apostrophes,
    strip_possessive,
    # Utilities
    strip_order_prefix,
    plural_drift,
)
from .signature import DEFAULT_PRECISION, RouteSignature, format_axis, route_signature

__all__ = [
    # Index API
    "CanonicalEntry",
    "CanonicalIndex",
    "KeyCollision",
    "ReferenceEntry",
    "parse_map_id",
    # Signature API
    "DEFAULT_PRECISION",
    "RouteSignature",
    "format_axis",
    "route_signature",
    # Pure normalization functions
    "normalize_key",
    "near_plural_key",
    "apostrophe_form",
    "strip_apostrophes",
    "strip_possessive",
    "strip_order_prefix",
    "plural_drift",
]
