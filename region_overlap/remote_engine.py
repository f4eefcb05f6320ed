#!/usr/bin/env python3
"""
Region Overlap - Remote Fallback Engine

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Rank administrative regions using the Overpass API instead
of local datasets. Used when no local dataset covers the area, or as an
explicit secondary path.

Pipeline:
1. Repair the query polygon (single part)
2. Ask Overpass for every administrative relation containing its centroid,
   with tags and geometry inline
3. Build one polygon per relation (closing the ring; convex hull if the
   ring is invalid - accepted precision loss)
4. One exact intersection per relation; failed/empty -> discarded
5. Label from the admin_level tag, rank (cap: remote_max_results)

Key Interactions:
- OverpassClient: the only network call; non-2xx -> UpstreamFailureError
- ranker: same ordering/unit contract as the local engine

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

import requests
from shapely.geometry.base import BaseGeometry

from region_overlap import geometry_kernel as gk
from region_overlap.data_models import (
    AreaUnit,
    OverlapCandidate,
    OverlapResult,
    QueryPoint,
    close_ring,
)
from region_overlap.errors import UpstreamFailureError
from region_overlap.name_resolver import resolve_relation_name
from region_overlap.overlap_aggregator import PreparedQuery
from region_overlap.overlap_config_types import OVERLAP_CONFIG, RemoteIndexConfig
from region_overlap.ranker import rank_candidates

logger = logging.getLogger(__name__)

OVERPASS_QUERY_TEMPLATE = """
[out:json][timeout:{timeout}];
is_in({lat},{lon})->.a;
relation(area.a)["boundary"="administrative"];
out body tags center;
out geom;"""

MIN_RELATION_POINTS = 3


# ═══════════════════════════════════════════════════════════════════════════
# 🌐 OVERPASS CLIENT
# ═══════════════════════════════════════════════════════════════════════════


def build_overpass_query(lat: float, lon: float, timeout_s: int) -> str:
    """Overpass QL selecting administrative relations that contain (lat, lon)."""
    return OVERPASS_QUERY_TEMPLATE.format(timeout=timeout_s, lat=lat, lon=lon)


class OverpassClient:
    """Minimal Overpass interpreter client."""

    def __init__(
        self,
        config: RemoteIndexConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def fetch_admin_relations(self, lat: float, lon: float) -> List[Dict[str, Any]]:
        """
        Administrative relations containing a point.

        Returns:
            The response's "elements" list (may be empty).

        Raises:
            UpstreamFailureError: Overpass returned a non-success status.
        """
        query = build_overpass_query(lat, lon, self.config.server_timeout_s)
        logger.debug(f"Querying Overpass at ({lat:.6f}, {lon:.6f})")
        response = self.session.post(
            self.config.url,
            data={"data": query},
            headers={
                "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"
            },
            timeout=self.config.http_timeout_s,
        )
        if not response.ok:
            logger.error(f"❌ Overpass returned HTTP {response.status_code}")
            raise UpstreamFailureError(response.status_code, response.text)
        return response.json().get("elements") or []


# ═══════════════════════════════════════════════════════════════════════════
# 🏷️ RELATION HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def admin_level_label(level: Any) -> str:
    """
    Coarse category for an OSM admin_level tag.

    <=4 region/province, 5-6 district, 7-8 city/town, >=9 village/subdistrict,
    unparseable -> "Administrative".
    """
    try:
        value = int(str(level).strip())
    except (TypeError, ValueError):
        return "Administrative"
    if value <= 4:
        return "Region/Province"
    if value in (5, 6):
        return "District"
    if value in (7, 8):
        return "City/Town"
    return "Village/Subdistrict"


def _is_usable_relation(element: Dict[str, Any]) -> bool:
    geometry = element.get("geometry")
    return (
        element.get("type") == "relation"
        and isinstance(element.get("tags"), dict)
        and isinstance(geometry, list)
        and len(geometry) >= MIN_RELATION_POINTS
    )


def build_relation_polygon(element: Dict[str, Any]) -> Optional[BaseGeometry]:
    """
    Single polygon for a relation's inline geometry.

    The ring is closed if needed. An invalid ring is replaced by the convex
    hull of its points when one exists.

    Returns:
        Polygon, or None when no polygon can be built.
    """
    try:
        coords = [(float(g["lon"]), float(g["lat"])) for g in element["geometry"]]
    except (KeyError, TypeError, ValueError):
        return None
    if len(coords) < MIN_RELATION_POINTS:
        return None
    if coords[0] != coords[-1]:
        coords.append(coords[0])

    built = gk.build_polygon(coords)
    if not built.ok:
        return None
    polygon = built.geometry
    if not gk.is_valid(polygon):
        hull = gk.convex_hull(coords)
        if hull is not None:
            logger.info(
                f"Relation {element.get('id')}: invalid ring, using convex hull approximation"
            )
            polygon = hull
    return polygon


def relation_candidate(
    query: PreparedQuery, element: Dict[str, Any]
) -> Optional[OverlapCandidate]:
    """Overlap candidate for one relation, or None if it must be discarded."""
    admin_polygon = build_relation_polygon(element)
    if admin_polygon is None:
        return None

    clipped = gk.intersect(query.polygon, admin_polygon)
    if not clipped.ok or clipped.is_empty:
        return None

    admin_area = gk.geodesic_area(admin_polygon)
    overlap_area = gk.geodesic_area(clipped.geometry)
    if admin_area <= 0 or overlap_area <= 0:
        return None

    tags = element.get("tags") or {}
    admin_level = str(tags.get("admin_level", ""))
    return OverlapCandidate(
        feature_id=element.get("id"),
        name=resolve_relation_name(tags),
        admin_level=admin_level,
        label=admin_level_label(admin_level),
        admin_area_m2=admin_area,
        overlap_area_m2=overlap_area,
    )


# ═══════════════════════════════════════════════════════════════════════════
# 🚀 ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════


def analyze_remote_overlap(
    points: Sequence[QueryPoint],
    unit: AreaUnit = AreaUnit.M2,
    client: Optional[OverpassClient] = None,
    max_results: Optional[int] = None,
) -> List[OverlapResult]:
    """
    Rank the administrative relations around the query polygon's centroid.

    Args:
        points: Validated query vertices
        unit: Output area unit
        client: Overpass client (default: built from OVERLAP_CONFIG)
        max_results: Result cap (default: RankingConfig.remote_max_results)

    Raises:
        ValidationError: the query polygon cannot be repaired
        UpstreamFailureError: Overpass responded with a non-success status
    """
    client = client or OverpassClient(OVERLAP_CONFIG.remote_index)
    if max_results is None:
        max_results = OVERLAP_CONFIG.ranking.remote_max_results

    query = PreparedQuery.from_ring(close_ring(points))
    elements = client.fetch_admin_relations(query.centroid.y, query.centroid.x)

    candidates = []
    for element in elements:
        if not _is_usable_relation(element):
            continue
        candidate = relation_candidate(query, element)
        if candidate is not None:
            candidates.append(candidate)

    logger.info(
        f"📊 Remote overlap: {len(candidates)}/{len(elements)} relations overlap"
    )
    return rank_candidates(candidates, unit, max_results)
