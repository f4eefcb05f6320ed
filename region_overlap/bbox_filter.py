"""
Bounding-box prefilter.

Cheap rejection of candidate features whose axis-aligned box cannot touch
the query polygon's box. No padding is applied - touching edges count as
intersecting. Purely an optimization: a feature rejected here would have
produced zero overlap anyway.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in (lon, lat) space."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_rings(
        cls, rings: Iterable[Sequence[Tuple[float, float]]]
    ) -> Optional["BoundingBox"]:
        """Box enclosing every coordinate of every ring, None if no coordinates."""
        arrays = [np.asarray(ring, dtype=float).reshape(-1, 2) for ring in rings if len(ring)]
        if not arrays:
            return None
        coords = np.concatenate(arrays)
        min_x, min_y = coords.min(axis=0)
        max_x, max_y = coords.max(axis=0)
        return cls(float(min_x), float(min_y), float(max_x), float(max_y))

    @classmethod
    def from_bounds(cls, bounds: Tuple[float, float, float, float]) -> "BoundingBox":
        """Create from a shapely-style (minx, miny, maxx, maxy) tuple."""
        return cls(*(float(b) for b in bounds))

    def intersects(self, other: "BoundingBox") -> bool:
        return bboxes_intersect(self, other)


def bboxes_intersect(a: BoundingBox, b: BoundingBox) -> bool:
    """True unless the boxes are disjoint on some axis (touching counts)."""
    return not (
        a.max_x < b.min_x
        or b.max_x < a.min_x
        or a.max_y < b.min_y
        or b.max_y < a.min_y
    )
