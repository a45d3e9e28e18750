"""Route geometry signature helpers for duplicate detection."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP
import hashlib
import math
from typing import Any, Iterable

from routecheck.errors import CoordinateError

DEFAULT_PRECISION = 3
AXIS_SEPARATOR = ","
POINT_SEPARATOR = ";"


@dataclass(frozen=True)
class RouteSignature:
    """Stable content signature computed from a route's coordinates."""
    signature_hash: str
    point_count: int
    unique_points: int
    precision: int = DEFAULT_PRECISION


def route_signature(
    points: Iterable[Any],
    precision: int = DEFAULT_PRECISION,
) -> RouteSignature:
    """Compute an order-independent signature from route points.

    Each point may be a ``RoutePoint`` (``x``/``y``/``z`` attributes), a
    mapping with ``X``/``Y``/``Z`` keys, or a 3-sequence. The signature hash
    is derived ONLY from the set of rounded point tokens:

    - point order does not matter
    - repeated points collapse into one
    - values equal after rounding to ``precision`` decimals are equal

    Raises:
        CoordinateError: a point lacks three finite numeric axes
    """
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")

    tokens: set[str] = set()
    count = 0
    for index, point in enumerate(points):
        axes = point_axes(point, index)
        tokens.add(AXIS_SEPARATOR.join(format_axis(value, precision) for value in axes))
        count += 1

    serialized = POINT_SEPARATOR.join(sorted(tokens))
    signature_hash = hashlib.sha256(serialized.encode("utf-8")).hexdigest()

    return RouteSignature(
        signature_hash=signature_hash,
        point_count=count,
        unique_points=len(tokens),
        precision=precision,
    )


def format_axis(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Round half away from zero and format with exactly ``precision`` decimals.

    >>> format_axis(1.0005)
    '1.001'
    >>> format_axis(-0.0001)
    '0.000'
    """
    quantum = Decimal(1).scaleb(-precision)
    # floats reach 309 integer digits; the default 28-digit context cannot quantize them
    context = Context(prec=330 + precision)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:.{precision}f}"


def point_axes(point: Any, index: int) -> tuple[float, float, float]:
    if hasattr(point, "x") and hasattr(point, "y") and hasattr(point, "z"):
        raw = (point.x, point.y, point.z)
    elif isinstance(point, dict):
        try:
            raw = (point["X"], point["Y"], point["Z"])
        except KeyError as exc:
            raise CoordinateError(f"point {index} is missing axis {exc.args[0]}") from None
    elif isinstance(point, (list, tuple)) and len(point) == 3:
        raw = tuple(point)
    else:
        raise CoordinateError(f"point {index} is not a coordinate: {point!r}")

    axes = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CoordinateError(f"point {index} has a non-numeric axis: {value!r}")
        try:
            axis = float(value)
        except OverflowError:
            raise CoordinateError(f"point {index} has an axis too large for a float") from None
        if not math.isfinite(axis):
            raise CoordinateError(f"point {index} has a non-finite axis: {value!r}")
        axes.append(axis)
    return (axes[0], axes[1], axes[2])
