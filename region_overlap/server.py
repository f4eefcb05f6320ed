#!/usr/bin/env python3
"""
Region Overlap - Flask Server

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Lightweight Flask server exposing the overlap ranking
engines over HTTP.

Key Interactions:
- local_engine: ranks regions from locally held per-level datasets
- remote_engine: ranks regions from the Overpass API
- errors: domain errors carry their own HTTP status

Navigation Guide:
- ROUTES: /health, /analyze-overlap-local-lao, /analyze-overlap
- STARTUP: logging setup, service initialization

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import logging
import sys

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from region_overlap.dataset_provider import DatasetProvider, get_default_provider
from region_overlap.errors import OverlapAnalysisError
from region_overlap.local_engine import analyze_local_overlap
from region_overlap.overlap_config_types import OVERLAP_CONFIG, DatasetConfig
from region_overlap.payload import parse_levels, parse_points, parse_unit
from region_overlap.remote_engine import OverpassClient, analyze_remote_overlap

# ═══════════════════════════════════════════════════════════════════════════
# 🌐 FLASK APPLICATION
# ═══════════════════════════════════════════════════════════════════════════

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = OVERLAP_CONFIG.server.max_content_length
CORS(app)

# Services - replaced by initialize_services(), otherwise built on first use
dataset_provider: Optional[DatasetProvider] = None
overpass_client: Optional[OverpassClient] = None

logger = logging.getLogger(__name__)


def _get_provider() -> DatasetProvider:
    return dataset_provider or get_default_provider()


def _get_overpass_client() -> OverpassClient:
    global overpass_client
    if overpass_client is None:
        overpass_client = OverpassClient(OVERLAP_CONFIG.remote_index)
    return overpass_client


def _request_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _error_response(route: str, exc: Exception) -> Tuple[Response, int]:
    """Map an exception to the JSON error body + status for a route."""
    if isinstance(exc, HTTPException):
        # e.g. 413 for bodies above MAX_CONTENT_LENGTH
        return jsonify({"error": exc.name, "detail": exc.description}), exc.code

    if isinstance(exc, OverlapAnalysisError):
        if exc.http_status >= 500:
            logger.error(f"❌ {route}: {exc.message} {exc.detail or ''}".rstrip())
        else:
            logger.info(f"{route} rejected: {exc.message} ({exc.detail})")
        return jsonify(exc.to_dict()), exc.http_status

    logger.exception(f"❌ {route} ERROR")
    return jsonify({"error": "internal_error", "detail": str(exc)}), 500


# ═══════════════════════════════════════════════════════════════════════════
# 🛣️ API ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/health")
def health() -> Response:
    """Liveness probe."""
    return jsonify({"ok": True, "ts": datetime.now(timezone.utc).isoformat()})


@app.route("/analyze-overlap-local-lao", methods=["POST"])
def analyze_overlap_local() -> Any:
    """
    Rank local administrative regions by overlap with a drawn polygon.

    Request Body:
        {
            "points": [{"lat": float, "lng": float}, ...],  # >= 3
            "unit": "m2" | "km2",
            "levels": [1] | [2] | [1, 2]   # optional
        }

    Returns:
        {"items": [OverlapResult, ...]} - at most 50, highest percent first.
    """
    route = "POST /analyze-overlap-local-lao"
    try:
        body = _request_body()
        points = parse_points(body.get("points"))
        unit = parse_unit(body.get("unit"))
        levels = parse_levels(body.get("levels"), OVERLAP_CONFIG.datasets.default_levels)

        results = analyze_local_overlap(points, unit, levels, provider=_get_provider())
        return jsonify({"items": [r.to_dict() for r in results]})
    except Exception as e:
        return _error_response(route, e)


@app.route("/analyze-overlap", methods=["POST"])
def analyze_overlap_remote() -> Any:
    """
    Rank OSM administrative relations by overlap with a drawn polygon.

    Request Body:
        {
            "points": [{"lat": float, "lng": float}, ...],  # >= 3
            "unit": "m2" | "km2"
        }

    Returns:
        {"items": [OverlapResult, ...]} - at most 20, highest percent first.
        502 with the upstream body if Overpass fails.
    """
    route = "POST /analyze-overlap"
    try:
        body = _request_body()
        points = parse_points(body.get("points"))
        unit = parse_unit(body.get("unit"))

        results = analyze_remote_overlap(points, unit, client=_get_overpass_client())
        return jsonify({"items": [r.to_dict() for r in results]})
    except Exception as e:
        return _error_response(route, e)


# ═══════════════════════════════════════════════════════════════════════════
# 🚀 SERVER INITIALIZATION
# ═══════════════════════════════════════════════════════════════════════════


def setup_logging(level: str = "INFO") -> None:
    """Console logging for the server process."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(ch)


def initialize_services(
    data_dir: Optional[Path] = None,
    client: Optional[OverpassClient] = None,
) -> None:
    """
    Create the dataset provider and Overpass client.

    Args:
        data_dir: Override for the dataset directory (default from config)
        client: Override for the Overpass client (default from config)
    """
    global dataset_provider, overpass_client

    if data_dir is None:
        dataset_provider = get_default_provider()
    else:
        base = OVERLAP_CONFIG.datasets
        dataset_provider = DatasetProvider(
            DatasetConfig(
                data_dir=str(data_dir),
                level_files=base.level_files,
                default_levels=base.default_levels,
            )
        )
    overpass_client = client or OverpassClient(OVERLAP_CONFIG.remote_index)

    logger.info(f"🚀 Datasets from: {dataset_provider.config.data_dir}")
    for level in dataset_provider.levels:
        path = dataset_provider.config.path_for_level(level)
        if not path.exists():
            logger.warning(f"⚠️ [ADM{level}] {path.name} not found - level unavailable")


def main() -> None:
    """Main entry point - initialize and start server."""
    server_config = OVERLAP_CONFIG.server
    setup_logging(server_config.log_level)

    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    initialize_services(data_dir)

    logger.info(f"🌐 API running at http://{server_config.host}:{server_config.port}")
    app.run(host=server_config.host, port=server_config.port, threaded=True)


if __name__ == "__main__":
    main()
