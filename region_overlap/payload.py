"""
Request payload parsing shared by both analysis entry points.

Validation happens here, before any geometry work, and raises
ValidationError (HTTP 400) with a descriptive detail.
"""

from typing import Any, List, Sequence, Tuple
import math

from region_overlap.data_models import AreaUnit, QueryPoint
from region_overlap.errors import ValidationError

MIN_POLYGON_POINTS = 3
INVALID_POINTS = "Invalid polygon points"


def _coordinate(point: Any, key: str, index: int) -> float:
    value = point.get(key) if isinstance(point, dict) else None
    # bool is an int subclass - reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(INVALID_POINTS, detail=f"points[{index}].{key} must be a number")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(INVALID_POINTS, detail=f"points[{index}].{key} must be finite")
    return value


def parse_points(raw: Any) -> List[QueryPoint]:
    """
    Parse `[{lat, lng}, ...]` into QueryPoints.

    Raises:
        ValidationError: not a list, fewer than 3 points, non-numeric
            coordinates, or fewer than 3 distinct points.
    """
    if not isinstance(raw, list) or len(raw) < MIN_POLYGON_POINTS:
        raise ValidationError(
            INVALID_POINTS, detail=f"points must be a list of at least {MIN_POLYGON_POINTS}"
        )
    points = [
        QueryPoint(lat=_coordinate(p, "lat", i), lng=_coordinate(p, "lng", i))
        for i, p in enumerate(raw)
    ]
    if len(set(points)) < MIN_POLYGON_POINTS:
        raise ValidationError(
            INVALID_POINTS, detail=f"need at least {MIN_POLYGON_POINTS} distinct points"
        )
    return points


def parse_unit(raw: Any) -> AreaUnit:
    """"km2" -> square kilometres, anything else -> square metres."""
    return AreaUnit.from_string(raw if isinstance(raw, str) else None)


def parse_levels(raw: Any, default_levels: Sequence[int]) -> Tuple[int, ...]:
    """
    Requested admin levels.

    Absent, non-list or empty -> default_levels. Non-integer entries are
    ignored (they can never match a configured level).
    """
    if not isinstance(raw, list) or not raw:
        return tuple(default_levels)
    return tuple(v for v in raw if isinstance(v, int) and not isinstance(v, bool))
