#!/usr/bin/env python3
"""
Region Overlap - Dataset Provider

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Load per-level administrative boundary datasets (GeoJSON
FeatureCollections) on first use and keep them for the process lifetime.

Key Features:
1. Lazy: nothing is read until a level is first requested
2. Init-once: a lock guards the first load of each level, so concurrent
   first requests read the file exactly once
3. Read-only after load: Dataset/AdminFeature are frozen dataclasses
4. Missing files are NOT cached - provisioning a file later is picked up
   by the next request without a restart

Navigation Guide:
- DatasetProvider: per-level cache
- get_default_provider: process-wide provider built from OVERLAP_CONFIG

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional
import json
import logging
import threading

from region_overlap.data_models import AdminFeature, Dataset
from region_overlap.overlap_config_types import OVERLAP_CONFIG, DatasetConfig

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 📂 GEOJSON LOADING
# ═══════════════════════════════════════════════════════════════════════════


def load_dataset_file(path: Path, level: int) -> Dataset:
    """
    Parse a GeoJSON FeatureCollection into a Dataset.

    Args:
        path: GeoJSON file path
        level: Admin level tag for the dataset

    Returns:
        Dataset with features in file order. Features that cannot be parsed
        at all are skipped with a warning; malformed parts of an otherwise
        readable feature are dropped by AdminFeature.from_geojson.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    features = []
    for index, raw in enumerate(data.get("features") or []):
        try:
            feature = AdminFeature.from_geojson(raw)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"⚠️ [ADM{level}] skipping unreadable feature #{index}: {e}")
            continue
        if feature.dropped_parts:
            logger.warning(
                f"⚠️ [ADM{level}] feature id={feature.feature_id}: "
                f"dropped {feature.dropped_parts} malformed part(s)"
            )
        features.append(feature)
    return Dataset(level=level, features=tuple(features))


# ═══════════════════════════════════════════════════════════════════════════
# 🗄️ PER-LEVEL CACHE
# ═══════════════════════════════════════════════════════════════════════════


class DatasetProvider:
    """
    Lazily loaded, process-lifetime cache of boundary datasets by level.
    """

    def __init__(self, config: DatasetConfig) -> None:
        """
        Args:
            config: Data directory and level -> file name mapping
        """
        self.config = config
        self._datasets: Dict[int, Dataset] = {}
        self._lock = threading.Lock()

    @property
    def levels(self) -> List[int]:
        return list(self.config.levels)

    def get(self, level: int) -> Optional[Dataset]:
        """
        Dataset for one level, loading it on first use.

        Returns:
            The cached Dataset, or None if the level is not configured or
            its file does not exist.
        """
        dataset = self._datasets.get(level)
        if dataset is not None:
            return dataset
        if level not in self.config.levels:
            return None

        with self._lock:
            # Another thread may have loaded it while we waited
            dataset = self._datasets.get(level)
            if dataset is not None:
                return dataset

            path = self.config.path_for_level(level)
            if not path.exists():
                logger.warning(f"⚠️ [ADM{level}] dataset not found: {path}")
                return None

            dataset = load_dataset_file(path, level)
            self._datasets[level] = dataset
            logger.info(f"✅ [ADM{level}] loaded {len(dataset)} features from {path.name}")
            return dataset

    def get_many(self, levels: Iterable[int]) -> List[Dataset]:
        """Available datasets for the given levels, in request order (duplicates dropped)."""
        datasets: List[Dataset] = []
        seen = set()
        for level in levels:
            if level in seen:
                continue
            seen.add(level)
            dataset = self.get(level)
            if dataset is not None:
                datasets.append(dataset)
        return datasets

    def is_loaded(self, level: int) -> bool:
        return level in self._datasets


# ═══════════════════════════════════════════════════════════════════════════
# 📌 PROCESS-WIDE PROVIDER
# ═══════════════════════════════════════════════════════════════════════════

_default_provider: Optional[DatasetProvider] = None
_default_provider_lock = threading.Lock()


def get_default_provider() -> DatasetProvider:
    """Provider built from OVERLAP_CONFIG, created once per process."""
    global _default_provider
    if _default_provider is None:
        with _default_provider_lock:
            if _default_provider is None:
                _default_provider = DatasetProvider(OVERLAP_CONFIG.datasets)
    return _default_provider
