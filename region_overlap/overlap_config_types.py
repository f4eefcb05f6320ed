#!/usr/bin/env python3
"""
Region Overlap - Configuration Types

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Centralized, typed configuration for the region overlap
service using frozen dataclasses for immutability and type safety.

This follows the Typed Configuration Architecture pattern:
- overlap_config.py defines OVERLAP_CONFIG_DATA dictionary (user edits this)
- overlap_config_types.py defines frozen dataclasses (this file)
- OVERLAP_CONFIG module-level instance for engine/server access
- Business logic receives primitives only

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

# ═══════════════════════════════════════════════════════════════════════════
# 📂 DATASET CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DatasetConfig:
    """Where the per-level boundary datasets live.

    Attributes:
        data_dir: Directory holding the GeoJSON files
        level_files: Tuple of (admin level, file name) pairs
        default_levels: Levels analysed when a request names none
    """

    data_dir: str = "data"
    level_files: Tuple[Tuple[int, str], ...] = (
        (1, "lao_adm1.geojson"),
        (2, "lao_adm2.geojson"),
    )
    default_levels: Tuple[int, ...] = (1, 2)

    @property
    def levels(self) -> Tuple[int, ...]:
        """All configured admin levels, in configuration order."""
        return tuple(level for level, _ in self.level_files)

    def path_for_level(self, level: int) -> Path:
        """Resolve the dataset file for an admin level (KeyError if unknown)."""
        return Path(self.data_dir) / dict(self.level_files)[level]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DatasetConfig":
        """Create from dictionary."""
        level_files = d.get("level_files", {1: "lao_adm1.geojson", 2: "lao_adm2.geojson"})
        return cls(
            data_dir=str(d.get("data_dir", "data")),
            level_files=tuple((int(k), str(v)) for k, v in level_files.items()),
            default_levels=tuple(int(v) for v in d.get("default_levels", [1, 2])),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "data_dir": self.data_dir,
            "level_files": dict(self.level_files),
            "default_levels": list(self.default_levels),
        }


# ═══════════════════════════════════════════════════════════════════════════
# 📊 RANKING CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RankingConfig:
    """Result caps for the two ranking paths."""

    local_max_results: int = 50
    remote_max_results: int = 20

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RankingConfig":
        """Create from dictionary."""
        return cls(
            local_max_results=d.get("local_max_results", 50),
            remote_max_results=d.get("remote_max_results", 20),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "local_max_results": self.local_max_results,
            "remote_max_results": self.remote_max_results,
        }


# ═══════════════════════════════════════════════════════════════════════════
# 🌐 REMOTE INDEX CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RemoteIndexConfig:
    """Overpass endpoint settings.

    Attributes:
        url: Interpreter endpoint accepting form-encoded `data=<query>`
        server_timeout_s: Timeout hint embedded in the query text
        http_timeout_s: Client-side socket timeout for the POST
    """

    url: str = "https://overpass-api.de/api/interpreter"
    server_timeout_s: int = 25
    http_timeout_s: float = 60.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RemoteIndexConfig":
        """Create from dictionary."""
        return cls(
            url=d.get("url", "https://overpass-api.de/api/interpreter"),
            server_timeout_s=int(d.get("server_timeout_s", 25)),
            http_timeout_s=float(d.get("http_timeout_s", 60.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "url": self.url,
            "server_timeout_s": self.server_timeout_s,
            "http_timeout_s": self.http_timeout_s,
        }


# ═══════════════════════════════════════════════════════════════════════════
# 🔧 GEOMETRY CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class GeometryConfig:
    """Geometry kernel settings."""

    centroid_fallback: bool = True
    ellipsoid: str = "WGS84"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GeometryConfig":
        """Create from dictionary."""
        return cls(
            centroid_fallback=bool(d.get("centroid_fallback", True)),
            ellipsoid=d.get("ellipsoid", "WGS84"),
        )


# ═══════════════════════════════════════════════════════════════════════════
# 🖥️ SERVER CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ServerConfig:
    """Flask server bind and request settings."""

    host: str = "127.0.0.1"
    port: int = 3000
    max_content_length: int = 5 * 1024 * 1024
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ServerConfig":
        """Create from dictionary."""
        return cls(
            host=d.get("host", "127.0.0.1"),
            port=int(d.get("port", 3000)),
            max_content_length=int(d.get("max_content_length", 5 * 1024 * 1024)),
            log_level=str(d.get("log_level", "INFO")).upper(),
        )


# ═══════════════════════════════════════════════════════════════════════════
# ⚙️ ROOT CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class OverlapConfig:
    """Root configuration for the region overlap service."""

    datasets: DatasetConfig = field(default_factory=DatasetConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    remote_index: RemoteIndexConfig = field(default_factory=RemoteIndexConfig)
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OverlapConfig":
        """Create from the nested OVERLAP_CONFIG_DATA dictionary."""
        return cls(
            datasets=DatasetConfig.from_dict(d.get("datasets", {})),
            ranking=RankingConfig.from_dict(d.get("ranking", {})),
            remote_index=RemoteIndexConfig.from_dict(d.get("remote_index", {})),
            geometry=GeometryConfig.from_dict(d.get("geometry", {})),
            server=ServerConfig.from_dict(d.get("server", {})),
        )


# ═══════════════════════════════════════════════════════════════════════════
# 📌 MODULE-LEVEL CONFIG INSTANCE
# ═══════════════════════════════════════════════════════════════════════════

# Import configuration data from separate file (user-editable)
from region_overlap.overlap_config import OVERLAP_CONFIG_DATA

# Create typed config from data dictionary
# Edit overlap_config.py (or set env vars) to change settings, then restart
OVERLAP_CONFIG: OverlapConfig = OverlapConfig.from_dict(OVERLAP_CONFIG_DATA)
