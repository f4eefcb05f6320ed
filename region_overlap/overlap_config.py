#!/usr/bin/env python3
"""
Region Overlap - Configuration

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Configuration dictionary for the region overlap service.
This is the user-facing configuration file - edit values here.

Pattern:
- overlap_config.py defines the OVERLAP_CONFIG_DATA dictionary (edit this)
- overlap_config_types.py defines typed dataclasses and loads from OVERLAP_CONFIG_DATA

Environment variables override the defaults below (see _env_or_default).

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")


def _env_or_default(
    key: str, default: T, type_fn: Optional[Callable[[str], T]] = None
) -> T:
    """
    Get value from environment variable or use default.

    Args:
        key: Environment variable name (e.g., "REGION_OVERLAP_DATA_DIR")
        default: Default value if env var not set
        type_fn: Optional type conversion function (e.g., float, int)

    Returns:
        Value from environment (converted) or default

    Example:
        >>> _env_or_default("REGION_OVERLAP_HTTP_TIMEOUT_S", 60.0, float)
        60.0  # If env var not set
    """
    val = os.getenv(key)
    if val is not None:
        if type_fn is not None:
            return type_fn(val)
        return val  # type: ignore
    return default


def _env_flag(val: str) -> bool:
    """Parse '1'/'true'/'yes'/'on' (any case) as True."""
    return val.strip().lower() in ("1", "true", "yes", "on")


# Repo root: region_overlap/ lives one level below
DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ REGION OVERLAP CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════

OVERLAP_CONFIG_DATA: Dict[str, Any] = {
    # ═══════════════════════════════════════════════════════════════════════
    # 📂 LOCAL BOUNDARY DATASETS
    # ═══════════════════════════════════════════════════════════════════════
    "datasets": {
        "data_dir": _env_or_default("REGION_OVERLAP_DATA_DIR", str(DEFAULT_DATA_DIR)),
        # Admin level -> GeoJSON FeatureCollection file inside data_dir
        "level_files": {
            1: "lao_adm1.geojson",  # Provinces
            2: "lao_adm2.geojson",  # Districts
        },
        "default_levels": [1, 2],
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📊 RANKING
    # ═══════════════════════════════════════════════════════════════════════
    "ranking": {
        "local_max_results": 50,
        "remote_max_results": 20,
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🌐 REMOTE BOUNDARY INDEX (Overpass)
    # ═══════════════════════════════════════════════════════════════════════
    "remote_index": {
        "url": _env_or_default(
            "REGION_OVERLAP_OVERPASS_URL", "https://overpass-api.de/api/interpreter"
        ),
        # Sent inside the query as [timeout:N] - enforced by the server, not us
        "server_timeout_s": _env_or_default(
            "REGION_OVERLAP_OVERPASS_TIMEOUT_S", 25, int
        ),
        "http_timeout_s": _env_or_default("REGION_OVERLAP_HTTP_TIMEOUT_S", 60.0, float),
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🔧 GEOMETRY SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "geometry": {
        # Centroid-containment substitute when exact clipping fails
        "centroid_fallback": _env_or_default(
            "REGION_OVERLAP_CENTROID_FALLBACK", True, _env_flag
        ),
        "ellipsoid": "WGS84",
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🖥️ SERVER
    # ═══════════════════════════════════════════════════════════════════════
    "server": {
        "host": _env_or_default("REGION_OVERLAP_HOST", "127.0.0.1"),
        "port": _env_or_default("PORT", 3000, int),
        "max_content_length": 5 * 1024 * 1024,  # 5 MB JSON bodies
        "log_level": _env_or_default("REGION_OVERLAP_LOG_LEVEL", "INFO"),
    },
}
