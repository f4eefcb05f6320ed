#!/usr/bin/env python3
"""
Region Overlap - Geometry Kernel

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Thin wrapper over Shapely and pyproj exposing the primitives
the overlap engines need: ring repair, geodesic area, intersection, centroid,
point-in-polygon, validity and convex hull.

Key Features:
1. Every fallible operation returns a GeometryResult instead of raising,
   so callers can record what was skipped and why
2. Coordinates stay in (lon, lat); clipping is planar in degrees
3. Areas are geodesic square metres on the configured ellipsoid

Navigation Guide:
- GeometryResult: success/failure wrapper
- repair_ring: construct + clean + zero-buffer a ring
- geodesic_area / intersect / centroid / contains_point / convex_hull

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple
import logging

import shapely
from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import MultiPoint, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient

from region_overlap.overlap_config_types import OVERLAP_CONFIG

# ═══════════════════════════════════════════════════════════════════════════
# 🔧 CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════

# A closed ring needs at least 3 distinct vertices + the closing point
MIN_RING_COORDS = 4

# Exceptions Shapely/GEOS raise on degenerate or malformed input
GEOMETRY_ERRORS = (GEOSException, ValueError, TypeError, IndexError)

_GEOD = Geod(ellps=OVERLAP_CONFIG.geometry.ellipsoid)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 📦 RESULT WRAPPER
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class GeometryResult:
    """Outcome of a geometry operation.

    Exactly one of geometry/error is set. A successful result may still hold
    an empty geometry (e.g. disjoint intersection).
    """

    geometry: Optional[BaseGeometry] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.geometry is None or self.geometry.is_empty

    @classmethod
    def success(cls, geometry: BaseGeometry) -> "GeometryResult":
        return cls(geometry=geometry)

    @classmethod
    def failure(cls, error: Any) -> "GeometryResult":
        return cls(error=str(error) or type(error).__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 🏗️ CONSTRUCTION & REPAIR
# ═══════════════════════════════════════════════════════════════════════════


def _polygonal(geom: BaseGeometry) -> BaseGeometry:
    """
    Keep only the areal parts of a geometry.

    Clipping and zero-buffering can emit GeometryCollections mixing
    polygons with slivers of lines or points; only polygons carry area.
    """
    if isinstance(geom, (Polygon, MultiPolygon)):
        return geom
    polygons = []
    for part in getattr(geom, "geoms", []):
        if isinstance(part, Polygon):
            polygons.append(part)
        elif isinstance(part, MultiPolygon):
            polygons.extend(part.geoms)
    if not polygons:
        return Polygon()
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)


def build_polygon(ring: Sequence[Tuple[float, float]]) -> GeometryResult:
    """
    Construct a polygon from a closed (lon, lat) ring without repairing it.

    Args:
        ring: Closed ring (first == last), at least 4 coordinates

    Returns:
        GeometryResult with the Polygon, or failure for short/malformed rings.
    """
    if len(ring) < MIN_RING_COORDS:
        return GeometryResult.failure(
            f"ring has {len(ring)} coordinates, need at least {MIN_RING_COORDS}"
        )
    try:
        return GeometryResult.success(Polygon(ring))
    except GEOMETRY_ERRORS as e:
        return GeometryResult.failure(e)


def repair_ring(ring: Sequence[Tuple[float, float]]) -> GeometryResult:
    """
    Build a polygon from a ring and make it usable for clipping.

    Steps:
    1. Drop repeated consecutive vertices
    2. Zero-distance buffer to dissolve self-intersections

    Args:
        ring: Closed (lon, lat) ring

    Returns:
        GeometryResult with a non-empty Polygon/MultiPolygon, or failure.
    """
    built = build_polygon(ring)
    if not built.ok:
        return built
    try:
        cleaned = shapely.remove_repeated_points(built.geometry)
        repaired = _polygonal(cleaned.buffer(0))
    except GEOMETRY_ERRORS as e:
        return GeometryResult.failure(e)
    if repaired.is_empty:
        return GeometryResult.failure("polygon collapsed to empty during repair")
    return GeometryResult.success(repaired)


# ═══════════════════════════════════════════════════════════════════════════
# 📐 MEASUREMENT & PREDICATES
# ═══════════════════════════════════════════════════════════════════════════


def geodesic_area(geom: BaseGeometry) -> float:
    """
    Geodesic area in square metres (always >= 0).

    Each polygon is oriented counter-clockwise first so that parts of a
    MultiPolygon with mixed winding do not cancel out.
    """
    geom = _polygonal(geom)
    if geom.is_empty:
        return 0.0
    polygons = geom.geoms if isinstance(geom, MultiPolygon) else [geom]
    total = 0.0
    for polygon in polygons:
        area, _ = _GEOD.geometry_area_perimeter(orient(polygon, sign=1.0))
        total += abs(area)
    return total


def intersect(a: BaseGeometry, b: BaseGeometry) -> GeometryResult:
    """
    Exact intersection of two polygonal geometries.

    Returns:
        Success with the polygonal intersection (possibly empty), or
        failure when GEOS cannot clip the inputs.
    """
    try:
        return GeometryResult.success(_polygonal(a.intersection(b)))
    except GEOMETRY_ERRORS as e:
        return GeometryResult.failure(e)


def centroid(geom: BaseGeometry) -> Point:
    return geom.centroid


def contains_point(geom: BaseGeometry, point: Point) -> bool:
    """Point-in-polygon test; points on the boundary count as inside."""
    return geom.covers(point)


def is_valid(geom: BaseGeometry) -> bool:
    return geom.is_valid


def convex_hull(coords: Sequence[Tuple[float, float]]) -> Optional[Polygon]:
    """Convex hull of a point set, or None when the points are collinear/degenerate."""
    if not coords:
        return None
    hull = MultiPoint(list(coords)).convex_hull
    if isinstance(hull, Polygon) and not hull.is_empty:
        return hull
    return None
