"""
Shared fixtures for region overlap tests (geometry in geo_helpers.py).
"""

from pathlib import Path
from typing import Dict, List

import pytest

from geo_helpers import (
    ALPHA_RING,
    BRAVO_RING,
    PROVINCE_RING,
    QUERY_BOUNDS,
    polygon_feature,
    query_points,
    write_feature_collection,
)
from region_overlap.dataset_provider import DatasetProvider
from region_overlap.overlap_config_types import DatasetConfig


@pytest.fixture
def lao_data_dir(tmp_path: Path) -> Path:
    """Directory holding a one-province ADM1 file and a two-district ADM2 file."""
    write_feature_collection(
        tmp_path / "lao_adm1.geojson",
        [polygon_feature(PROVINCE_RING, {"NAME_1": "Vientiane", "GID_1": "LAO.1_1"}, fid=1)],
    )
    write_feature_collection(
        tmp_path / "lao_adm2.geojson",
        [
            polygon_feature(ALPHA_RING, {"ADM2_EN": "Alpha", "ADM2_PCODE": "LA0101"}, fid=101),
            polygon_feature(BRAVO_RING, {"ADM2_EN": "Bravo", "ADM2_PCODE": "LA0102"}, fid=102),
        ],
    )
    return tmp_path


@pytest.fixture
def lao_provider(lao_data_dir: Path) -> DatasetProvider:
    return DatasetProvider(DatasetConfig(data_dir=str(lao_data_dir)))


@pytest.fixture
def query_request_points() -> List[Dict[str, float]]:
    return query_points(*QUERY_BOUNDS)
