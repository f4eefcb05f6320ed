"""
GeoJSON builders and fixture geometry for region overlap tests.

Geometry is laid out around Vientiane (lon ~102, lat ~18):

    Province "Vientiane" (ADM1)   lon 101.9 - 102.5, lat 17.9 - 18.5
    District "Alpha"    (ADM2)   lon 102.0 - 102.2, lat 18.0 - 18.2
    District "Bravo"    (ADM2)   lon 103.0 - 103.2, lat 18.0 - 18.2  (far east)
    Query polygon                lon 102.05 - 102.1, lat 18.05 - 18.1
"""

import json
from pathlib import Path
from typing import Any, Dict, List


def square(min_x: float, min_y: float, max_x: float, max_y: float) -> List[List[float]]:
    """Closed counter-clockwise (lon, lat) ring."""
    return [
        [min_x, min_y],
        [max_x, min_y],
        [max_x, max_y],
        [min_x, max_y],
        [min_x, min_y],
    ]


def polygon_feature(ring: List[List[float]], properties: Dict[str, Any], fid: Any = None) -> Dict[str, Any]:
    feature = {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }
    if fid is not None:
        feature["id"] = fid
    return feature


def multipolygon_feature(
    rings: List[List[List[float]]], properties: Dict[str, Any], fid: Any = None
) -> Dict[str, Any]:
    feature = {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "MultiPolygon", "coordinates": [[r] for r in rings]},
    }
    if fid is not None:
        feature["id"] = fid
    return feature


def write_feature_collection(path: Path, features: List[Dict[str, Any]]) -> Path:
    path.write_text(
        json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf-8"
    )
    return path


def query_points(min_x: float, min_y: float, max_x: float, max_y: float) -> List[Dict[str, float]]:
    """Request-shaped {lat, lng} points for a rectangle (not closed)."""
    return [
        {"lat": min_y, "lng": min_x},
        {"lat": min_y, "lng": max_x},
        {"lat": max_y, "lng": max_x},
        {"lat": max_y, "lng": min_x},
    ]


PROVINCE_RING = square(101.9, 17.9, 102.5, 18.5)
ALPHA_RING = square(102.0, 18.0, 102.2, 18.2)
BRAVO_RING = square(103.0, 18.0, 103.2, 18.2)
QUERY_BOUNDS = (102.05, 18.05, 102.1, 18.1)


