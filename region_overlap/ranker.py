"""
Ranking of overlap candidates.

Converts native square-metre areas to the requested unit, computes the
overlap percentage, orders by percentage (highest first) and truncates.
Percent is always computed from the native m² values, so the unit choice
never changes the ordering.
"""

from typing import Iterable, List

from region_overlap.data_models import AreaUnit, OverlapCandidate, OverlapResult


def to_unit(square_metres: float, unit: str) -> float:
    """Convert m² into "m2" (identity) or "km2"; unknown units mean m²."""
    return AreaUnit.from_string(unit).convert(square_metres)


def rank_candidates(
    candidates: Iterable[OverlapCandidate],
    unit: AreaUnit,
    max_results: int,
) -> List[OverlapResult]:
    """
    Build ranked result items.

    Args:
        candidates: Regions with admin and overlap areas both > 0
        unit: Output unit for the area fields
        max_results: Cap on the number of items returned

    Returns:
        At most max_results items, non-increasing in percent.
    """
    results = [
        OverlapResult(
            id=c.feature_id,
            name=c.name,
            admin_level=c.admin_level,
            label=c.label,
            area_of_admin=unit.convert(c.admin_area_m2),
            overlap_area=unit.convert(c.overlap_area_m2),
            percent=c.percent,
            unit=unit.label,
        )
        for c in candidates
    ]
    results.sort(key=lambda r: r.percent, reverse=True)
    return results[:max_results]
