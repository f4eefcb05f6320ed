"""
Region Overlap Ranking

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Rank administrative regions by how much of each one a
user-drawn polygon covers.

Key Features:
- Local path: per-level GeoJSON datasets, bounding-box prefilter,
  multi-part overlap aggregation with repair and a swappable fallback policy
- Remote path: Overpass API relations around the polygon's centroid
- Shared ranking contract: percent descending, m² or km², capped result list

Usage:
    from region_overlap import analyze_local_overlap, parse_points, AreaUnit

    points = parse_points([{"lat": 17.97, "lng": 102.6}, ...])
    items = analyze_local_overlap(points, AreaUnit.KM2, levels=[2])

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

from .data_models import AreaUnit, OverlapResult, QueryPoint
from .local_engine import analyze_local_overlap
from .payload import parse_points
from .remote_engine import analyze_remote_overlap

__all__ = [
    "AreaUnit",
    "OverlapResult",
    "QueryPoint",
    "analyze_local_overlap",
    "analyze_remote_overlap",
    "parse_points",
]
