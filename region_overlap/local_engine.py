#!/usr/bin/env python3
"""
Region Overlap - Local Dataset Engine

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Rank the administrative regions of locally held datasets by
how much of each region the query polygon covers.

Pipeline (per request, sequential, CPU-bound):
    query points -> PreparedQuery
    for each requested level / feature:
        bbox prefilter -> compute_feature_overlap -> resolve_name
    -> rank_candidates (cap: RankingConfig.local_max_results)

Key Interactions:
- dataset_provider: lazily loaded per-level datasets
- overlap_aggregator: per-feature area sums + fallback policy
- name_resolver / ranker: labelling and ordering

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Iterator, List, Optional, Sequence
import logging
import time

from region_overlap.data_models import (
    AreaUnit,
    Dataset,
    OverlapCandidate,
    OverlapResult,
    QueryPoint,
    close_ring,
)
from region_overlap.dataset_provider import DatasetProvider, get_default_provider
from region_overlap.errors import DependencyMissingError
from region_overlap.name_resolver import resolve_name
from region_overlap.overlap_aggregator import (
    FallbackPolicy,
    PreparedQuery,
    compute_feature_overlap,
    fallback_policy_from_flag,
)
from region_overlap.overlap_config_types import OVERLAP_CONFIG
from region_overlap.ranker import rank_candidates

logger = logging.getLogger(__name__)

LEVEL_LABELS = {1: "Province", 2: "District"}


def label_for_level(level: int) -> str:
    """Category label for a local dataset level."""
    return LEVEL_LABELS.get(level, "Administrative")


def _missing_datasets_message(provider: DatasetProvider, levels: Sequence[int]) -> str:
    """Guidance naming the requested levels and the files they need."""
    files = dict(provider.config.level_files)
    wanted = [files[level] for level in levels if level in files]
    requested = ", ".join(str(level) for level in levels) or "none"
    if not wanted:
        configured = ", ".join(str(level) for level in provider.config.levels)
        return (
            f"Boundary datasets not found for requested levels [{requested}]. "
            f"Configured levels: [{configured}]."
        )
    return (
        f"Boundary datasets not found for requested levels [{requested}]. "
        f"Put {' & '.join(wanted)} in {provider.config.data_dir}."
    )


def iter_candidates(
    query: PreparedQuery,
    datasets: Sequence[Dataset],
    fallback_policy: FallbackPolicy,
) -> Iterator[OverlapCandidate]:
    """
    Yield a candidate for every feature with positive admin and overlap area.

    Features whose bounding box misses the query's are skipped without any
    geometry work.
    """
    for dataset in datasets:
        for feature in dataset.features:
            if feature.bbox is None or not query.bbox.intersects(feature.bbox):
                continue

            overlap = compute_feature_overlap(query, feature, fallback_policy)
            if not overlap.is_positive:
                continue

            yield OverlapCandidate(
                feature_id=feature.feature_id,
                name=resolve_name(feature.properties, feature.feature_id, dataset.level),
                admin_level=f"ADM{dataset.level}",
                label=label_for_level(dataset.level),
                admin_area_m2=overlap.admin_area_m2,
                overlap_area_m2=overlap.overlap_area_m2,
            )


def analyze_local_overlap(
    points: Sequence[QueryPoint],
    unit: AreaUnit = AreaUnit.M2,
    levels: Optional[Sequence[int]] = None,
    provider: Optional[DatasetProvider] = None,
    fallback_policy: Optional[FallbackPolicy] = None,
    max_results: Optional[int] = None,
) -> List[OverlapResult]:
    """
    Rank local administrative regions by overlap with the query polygon.

    Args:
        points: Validated query vertices (at least 3 distinct)
        unit: Output area unit
        levels: Admin levels to analyse (default: configured default levels)
        provider: Dataset source (default: process-wide provider)
        fallback_policy: Clip-failure policy (default: from GeometryConfig)
        max_results: Result cap (default: RankingConfig.local_max_results)

    Returns:
        Results sorted by percent, highest first.

    Raises:
        ValidationError: the query polygon cannot be repaired
        DependencyMissingError: no dataset exists for any requested level
    """
    provider = provider or get_default_provider()
    if levels is None:
        levels = OVERLAP_CONFIG.datasets.default_levels
    if fallback_policy is None:
        fallback_policy = fallback_policy_from_flag(OVERLAP_CONFIG.geometry.centroid_fallback)
    if max_results is None:
        max_results = OVERLAP_CONFIG.ranking.local_max_results

    datasets = provider.get_many(levels)
    if not datasets:
        raise DependencyMissingError(_missing_datasets_message(provider, levels))

    query = PreparedQuery.from_ring(close_ring(points))

    t_start = time.perf_counter()
    candidates = list(iter_candidates(query, datasets, fallback_policy))
    results = rank_candidates(candidates, unit, max_results)
    logger.info(
        f"📊 Local overlap: {len(candidates)} regions overlap "
        f"(levels={[d.level for d in datasets]}) in "
        f"{(time.perf_counter() - t_start) * 1000:.1f}ms"
    )
    return results
