"""
Typed data models for region overlap ranking.

Architectural Overview:
=======================
Immutable dataclasses for everything that crosses a module boundary:
query points, administrative features, per-level datasets and ranked
overlap results. Raw GeoJSON dicts stop at the dataset provider and the
remote engine; everything downstream works on these types.

Key Interactions:
-----------------
- Input: dataset_provider builds AdminFeature/Dataset from GeoJSON files
- Output: OverlapResult.to_dict() provides the camelCase API item shape
- Navigation: Use VS Code outline (Ctrl+Shift+O) for quick navigation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from region_overlap.bbox_filter import BoundingBox

# Ring coordinate as (lon, lat)
Coordinate = Tuple[float, float]


# ═══════════════════════════════════════════════════════════════════════════
# 🏷️ ENUMS SECTION
# ═══════════════════════════════════════════════════════════════════════════


class AreaUnit(Enum):
    """Output unit for areas. Native computations are in square metres."""

    M2 = "m2"
    KM2 = "km2"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "AreaUnit":
        """Convert request string to AreaUnit, with fallback to M2.

        Args:
            s: "m2" or "km2" (anything else means square metres)

        Returns:
            Matching AreaUnit member, or M2 if not found
        """
        for member in cls:
            if member.value == s:
                return member
        return cls.M2

    @property
    def label(self) -> str:
        """Display label attached to every result item."""
        return "km²" if self is AreaUnit.KM2 else "m²"

    def convert(self, square_metres: float) -> float:
        """Convert a native m² value into this unit."""
        if self is AreaUnit.KM2:
            return square_metres / 1_000_000
        return square_metres


# ═══════════════════════════════════════════════════════════════════════════
# 📍 QUERY POLYGON SECTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class QueryPoint:
    """A user-drawn vertex (lat/lng order as sent by the map client)."""

    lat: float
    lng: float

    def as_lon_lat(self) -> Coordinate:
        return (self.lng, self.lat)


def close_ring(points: Sequence[QueryPoint]) -> List[Coordinate]:
    """Build a closed (lon, lat) ring by re-appending the first point."""
    ring = [p.as_lon_lat() for p in points]
    ring.append(ring[0])
    return ring


# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ ADMINISTRATIVE FEATURE SECTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AdminFeature:
    """One boundary feature from a dataset.

    Attributes:
        feature_id: Optional opaque identifier (GeoJSON top-level "id")
        properties: Property bag in original parse order
        geometry_type: "Polygon", "MultiPolygon" or anything else (ignored)
        parts: Outer ring of each part as (lon, lat) tuples; holes dropped
        bbox: Bounding box over all parts, None when there are no coordinates
        dropped_parts: Parts whose coordinates could not be read
    """

    feature_id: Any
    properties: Mapping[str, Any]
    geometry_type: Optional[str]
    parts: Tuple[Tuple[Coordinate, ...], ...]
    bbox: Optional[BoundingBox]
    dropped_parts: int = 0

    @classmethod
    def from_geojson(cls, feature: Dict[str, Any]) -> "AdminFeature":
        """Create from a GeoJSON Feature dict.

        Polygon -> one part (outer ring). MultiPolygon -> one part per
        polygon (outer ring each). Other geometry types get no parts.
        A part with malformed coordinates is dropped and counted in
        dropped_parts; the remaining parts are kept.
        """
        geometry = feature.get("geometry") or {}
        geometry_type = geometry.get("type")
        coordinates = geometry.get("coordinates") or []

        if geometry_type == "Polygon":
            polygons = [coordinates]
        elif geometry_type == "MultiPolygon":
            polygons = list(coordinates)
        else:
            polygons = []

        rings: List[Tuple[Coordinate, ...]] = []
        dropped = 0
        for polygon in polygons:
            try:
                if not polygon or not polygon[0]:
                    continue
                rings.append(tuple((float(c[0]), float(c[1])) for c in polygon[0]))
            except (IndexError, KeyError, TypeError, ValueError):
                dropped += 1
        parts = tuple(rings)

        return cls(
            feature_id=feature.get("id"),
            properties=dict(feature.get("properties") or {}),
            geometry_type=geometry_type,
            parts=parts,
            bbox=BoundingBox.from_rings(parts),
            dropped_parts=dropped,
        )


@dataclass(frozen=True)
class Dataset:
    """All features for one admin level. Never mutated after load."""

    level: int
    features: Tuple[AdminFeature, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.features)


# ═══════════════════════════════════════════════════════════════════════════
# 📊 RESULT SECTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class OverlapCandidate:
    """A region with positive overlap, before unit conversion and ranking.

    Areas are native square metres.
    """

    feature_id: Any
    name: str
    admin_level: str
    label: str
    admin_area_m2: float
    overlap_area_m2: float

    @property
    def percent(self) -> float:
        return self.overlap_area_m2 / self.admin_area_m2 * 100


@dataclass(frozen=True)
class OverlapResult:
    """Ranked result item returned to API callers."""

    id: Any
    name: str
    admin_level: str
    label: str
    area_of_admin: float
    overlap_area: float
    percent: float
    unit: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase JSON item shape."""
        return {
            "id": self.id,
            "name": self.name,
            "adminLevel": self.admin_level,
            "label": self.label,
            "areaOfAdmin": self.area_of_admin,
            "overlapArea": self.overlap_area,
            "percent": self.percent,
            "unit": self.unit,
        }
