"""
Unit tests for unit conversion and ranking.

Run with: python -m pytest _tests/test_ranker.py -v
"""

import pytest

from region_overlap.data_models import AreaUnit, OverlapCandidate
from region_overlap.ranker import rank_candidates, to_unit


def _candidate(name, admin, overlap, fid=None):
    return OverlapCandidate(
        feature_id=fid,
        name=name,
        admin_level="ADM2",
        label="District",
        admin_area_m2=admin,
        overlap_area_m2=overlap,
    )


class TestUnitConversion:
    """m2 identity / km2 division."""

    def test_km2(self):
        assert to_unit(1_000_000, "km2") == 1.0

    @pytest.mark.parametrize("value", [0.0, 1.5, 123456.789, 1e12])
    def test_m2_is_identity(self, value):
        assert to_unit(value, "m2") == value

    def test_unknown_unit_means_m2(self):
        assert to_unit(2_000_000, "acres") == 2_000_000
        assert AreaUnit.from_string(None) is AreaUnit.M2

    def test_labels(self):
        assert AreaUnit.M2.label == "m²"
        assert AreaUnit.KM2.label == "km²"


class TestRankCandidates:
    """Ordering, truncation and item shape."""

    def test_sorted_by_percent_descending(self):
        candidates = [
            _candidate("low", 1000.0, 10.0),
            _candidate("high", 1000.0, 900.0),
            _candidate("mid", 1000.0, 500.0),
        ]
        results = rank_candidates(candidates, AreaUnit.M2, 50)
        assert [r.name for r in results] == ["high", "mid", "low"]
        percents = [r.percent for r in results]
        assert percents == sorted(percents, reverse=True)

    def test_truncated_to_max_results(self):
        candidates = [_candidate(str(i), 100.0, float(i + 1)) for i in range(30)]
        results = rank_candidates(candidates, AreaUnit.M2, 20)
        assert len(results) == 20
        assert results[0].name == "29"

    def test_percent_independent_of_unit(self):
        candidates = [_candidate("a", 4_000_000.0, 1_000_000.0, fid=7)]
        m2 = rank_candidates(candidates, AreaUnit.M2, 50)[0]
        km2 = rank_candidates(candidates, AreaUnit.KM2, 50)[0]

        assert m2.percent == km2.percent == pytest.approx(25.0)
        assert km2.area_of_admin == pytest.approx(4.0)
        assert km2.overlap_area == pytest.approx(1.0)
        assert km2.unit == "km²"

    def test_item_dict_shape(self):
        item = rank_candidates([_candidate("Alpha", 200.0, 50.0, fid=101)], AreaUnit.M2, 50)[0]
        assert item.to_dict() == {
            "id": 101,
            "name": "Alpha",
            "adminLevel": "ADM2",
            "label": "District",
            "areaOfAdmin": 200.0,
            "overlapArea": 50.0,
            "percent": 25.0,
            "unit": "m²",
        }

    def test_empty_input(self):
        assert rank_candidates([], AreaUnit.KM2, 50) == []
