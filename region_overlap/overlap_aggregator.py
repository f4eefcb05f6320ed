#!/usr/bin/env python3
"""
Region Overlap - Multi-Part Overlap Aggregator

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Compute (admin area, overlap area) for ONE administrative
feature against ONE query polygon. Polygon features have one part;
MultiPolygon features have one part per outer ring.

Per part:
1. Repair the ring (dedupe vertices, zero-buffer). Failure -> part skipped,
   contributes 0 to both totals.
2. Add the repaired part's area to admin_area.
3. Clip against the query polygon; add the clipped area to overlap_area.
4. If clipping FAILS (not merely empty), hand over to the FallbackPolicy.

Key Interactions:
- geometry_kernel: every geometry primitive (called via the module so tests
  can monkeypatch individual operations)
- local_engine: calls compute_feature_overlap() once per candidate feature

Design Constraints:
- compute_feature_overlap() is a pure function of its inputs - no shared
  state - so features can be spread across worker processes later without
  changing this contract.
- Every part outcome is recorded in a PartReport so skipped parts and
  fallback use are assertable.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from region_overlap import geometry_kernel as gk
from region_overlap.bbox_filter import BoundingBox
from region_overlap.data_models import AdminFeature
from region_overlap.errors import ValidationError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 📍 PREPARED QUERY POLYGON
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PreparedQuery:
    """Repaired query polygon plus the values every feature needs from it."""

    polygon: BaseGeometry
    area_m2: float
    bbox: BoundingBox
    centroid: Point

    @classmethod
    def from_ring(cls, ring: Sequence[Tuple[float, float]]) -> "PreparedQuery":
        """
        Repair a closed (lon, lat) ring into a query polygon.

        Raises:
            ValidationError: ring is too short or collapses during repair.
        """
        repaired = gk.repair_ring(ring)
        if not repaired.ok:
            raise ValidationError("Invalid polygon points", detail=repaired.error)
        polygon = repaired.geometry
        return cls(
            polygon=polygon,
            area_m2=gk.geodesic_area(polygon),
            bbox=BoundingBox.from_bounds(polygon.bounds),
            centroid=gk.centroid(polygon),
        )


# ═══════════════════════════════════════════════════════════════════════════
# 🛟 FALLBACK POLICIES
# ═══════════════════════════════════════════════════════════════════════════


class FallbackPolicy:
    """What to do when exact clipping of a part fails.

    apply() returns the new running overlap total, or None if the policy
    declines (the part then contributes no overlap).
    """

    name = "none"

    def apply(
        self, query: PreparedQuery, part: BaseGeometry, overlap_so_far_m2: float
    ) -> Optional[float]:
        return None


class NoFallbackPolicy(FallbackPolicy):
    """Failed clips contribute nothing."""

    name = "none"


class CentroidFallbackPolicy(FallbackPolicy):
    """
    Centroid-containment upper bound.

    If the query centroid lies in the part, treat the whole query polygon as
    overlapping: overlap = max(overlap_so_far, area(query)). Not additive, so
    several failing parts do not stack, but it can still overstate overlap
    relative to exact clipping.
    """

    name = "centroid"

    def apply(
        self, query: PreparedQuery, part: BaseGeometry, overlap_so_far_m2: float
    ) -> Optional[float]:
        if gk.contains_point(part, query.centroid):
            return max(overlap_so_far_m2, query.area_m2)
        return None


def fallback_policy_from_flag(enabled: bool) -> FallbackPolicy:
    """Map the config toggle to a policy instance."""
    return CentroidFallbackPolicy() if enabled else NoFallbackPolicy()


# ═══════════════════════════════════════════════════════════════════════════
# 📊 PART / FEATURE OUTCOMES
# ═══════════════════════════════════════════════════════════════════════════


class PartStatus(Enum):
    """What happened to one geometric part."""

    OK = "ok"
    REPAIR_FAILED = "repair_failed"  # Skipped, contributes nothing
    INTERSECTION_FAILED = "intersection_failed"  # Admin area kept, no overlap
    FALLBACK_APPLIED = "fallback_applied"  # Overlap from FallbackPolicy


@dataclass(frozen=True)
class PartReport:
    """Outcome for one part of a feature."""

    index: int
    status: PartStatus
    admin_area_m2: float = 0.0
    overlap_area_m2: float = 0.0
    error: Optional[str] = None


@dataclass(frozen=True)
class FeatureOverlap:
    """Aggregated areas for one feature, in square metres."""

    admin_area_m2: float
    overlap_area_m2: float
    parts: Tuple[PartReport, ...] = field(default_factory=tuple)

    @property
    def is_positive(self) -> bool:
        """Only features with both areas > 0 are ranked."""
        return self.admin_area_m2 > 0 and self.overlap_area_m2 > 0

    @property
    def skipped_parts(self) -> List[PartReport]:
        return [p for p in self.parts if p.status is PartStatus.REPAIR_FAILED]

    @property
    def used_fallback(self) -> bool:
        return any(p.status is PartStatus.FALLBACK_APPLIED for p in self.parts)


# ═══════════════════════════════════════════════════════════════════════════
# 🧮 AGGREGATION
# ═══════════════════════════════════════════════════════════════════════════


def compute_feature_overlap(
    query: PreparedQuery,
    feature: AdminFeature,
    fallback_policy: Optional[FallbackPolicy] = None,
) -> FeatureOverlap:
    """
    Sum admin and overlap areas over all parts of a feature.

    Args:
        query: Prepared query polygon
        feature: Administrative feature (Polygon or MultiPolygon parts)
        fallback_policy: Used when clipping a part fails (default: none)

    Returns:
        FeatureOverlap with per-part reports.
    """
    policy = fallback_policy or NoFallbackPolicy()
    admin_area = 0.0
    overlap_area = 0.0
    reports: List[PartReport] = []

    for index, ring in enumerate(feature.parts):
        repaired = gk.repair_ring(ring)
        if not repaired.ok:
            logger.debug(
                f"Skipping part {index} of feature {feature.feature_id}: {repaired.error}"
            )
            reports.append(
                PartReport(index, PartStatus.REPAIR_FAILED, error=repaired.error)
            )
            continue

        part = repaired.geometry
        part_area = gk.geodesic_area(part)
        admin_area += part_area

        clipped = gk.intersect(query.polygon, part)
        if clipped.ok:
            part_overlap = 0.0 if clipped.is_empty else gk.geodesic_area(clipped.geometry)
            overlap_area += part_overlap
            reports.append(PartReport(index, PartStatus.OK, part_area, part_overlap))
            continue

        fallback_total = policy.apply(query, part, overlap_area)
        if fallback_total is None:
            reports.append(
                PartReport(
                    index, PartStatus.INTERSECTION_FAILED, part_area, error=clipped.error
                )
            )
            continue

        logger.info(
            f"🛟 {policy.name} fallback for part {index} of feature "
            f"{feature.feature_id}: clip failed ({clipped.error})"
        )
        reports.append(
            PartReport(
                index,
                PartStatus.FALLBACK_APPLIED,
                part_area,
                fallback_total - overlap_area,
                error=clipped.error,
            )
        )
        overlap_area = fallback_total

    return FeatureOverlap(admin_area, overlap_area, tuple(reports))
