"""
HTTP-level tests for the Flask server.

Uses Flask's test client; datasets come from a temp directory and the
Overpass client is faked, so nothing leaves the process.

Run with: python -m pytest _tests/test_server.py -v
"""

import pytest

from geo_helpers import ALPHA_RING, query_points, square
from region_overlap import server
from region_overlap.errors import UpstreamFailureError


class StubOverpassClient:
    """Returns canned elements, or raises the configured error."""

    def __init__(self, elements=None, error=None):
        self.elements = elements or []
        self.error = error
        self.calls = []

    def fetch_admin_relations(self, lat, lon):
        self.calls.append((lat, lon))
        if self.error is not None:
            raise self.error
        return self.elements


def _alpha_relation():
    geometry = [{"lat": lat, "lon": lon} for lon, lat in ALPHA_RING]
    return {
        "type": "relation",
        "id": 9001,
        "tags": {"name": "Alpha", "admin_level": "6"},
        "geometry": geometry,
    }


@pytest.fixture
def stub_client():
    return StubOverpassClient([_alpha_relation()])


@pytest.fixture
def client(lao_data_dir, stub_client):
    server.initialize_services(lao_data_dir, client=stub_client)
    yield server.app.test_client()
    server.dataset_provider = None
    server.overpass_client = None


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.get_json()
        assert body["ok"] is True
        assert "T" in body["ts"]


class TestLocalRoute:
    """POST /analyze-overlap-local-lao"""

    def test_ranked_items(self, client, query_request_points):
        response = client.post(
            "/analyze-overlap-local-lao",
            json={"points": query_request_points, "unit": "km2", "levels": [1, 2]},
        )
        assert response.status_code == 200
        items = response.get_json()["items"]

        assert [item["name"] for item in items] == ["Alpha", "Vientiane"]
        first = items[0]
        assert set(first) == {
            "id", "name", "adminLevel", "label", "areaOfAdmin", "overlapArea", "percent", "unit",
        }
        assert first["id"] == 101
        assert first["adminLevel"] == "ADM2"
        assert first["label"] == "District"
        assert first["unit"] == "km²"

    def test_levels_default_when_empty(self, client, query_request_points):
        response = client.post(
            "/analyze-overlap-local-lao", json={"points": query_request_points, "levels": []}
        )
        levels = {item["adminLevel"] for item in response.get_json()["items"]}
        assert levels == {"ADM1", "ADM2"}

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"points": "not a list"},
            {"points": [{"lat": 18.0, "lng": 102.0}, {"lat": 18.1, "lng": 102.1}]},
            {"points": [{"lat": 18.0, "lng": 102.0}] * 4},
            {"points": [{"lat": "x", "lng": 102.0}, {"lat": 18.1, "lng": 102.1}, {"lat": 18.2, "lng": 102.0}]},
        ],
    )
    def test_invalid_points_are_400(self, client, body):
        response = client.post("/analyze-overlap-local-lao", json=body)
        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid polygon points"

    def test_non_json_body_is_400(self, client):
        response = client.post("/analyze-overlap-local-lao", data="garbage", content_type="text/plain")
        assert response.status_code == 400

    def test_self_intersecting_query_is_repaired(self, client):
        bowtie = [
            {"lat": 18.05, "lng": 102.05},
            {"lat": 18.1, "lng": 102.1},
            {"lat": 18.05, "lng": 102.1},
            {"lat": 18.1, "lng": 102.05},
        ]
        response = client.post("/analyze-overlap-local-lao", json={"points": bowtie, "levels": [2]})
        assert response.status_code == 200
        assert [item["name"] for item in response.get_json()["items"]] == ["Alpha"]

    def test_missing_datasets_are_500(self, tmp_path, query_request_points):
        server.initialize_services(tmp_path, client=StubOverpassClient())
        try:
            response = server.app.test_client().post(
                "/analyze-overlap-local-lao", json={"points": query_request_points}
            )
        finally:
            server.dataset_provider = None
            server.overpass_client = None

        assert response.status_code == 500
        body = response.get_json()
        assert set(body) == {"error"}
        assert "Boundary datasets not found" in body["error"]

    def test_unexpected_error_is_internal_error(self, client, query_request_points, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(server, "analyze_local_overlap", explode)
        response = client.post("/analyze-overlap-local-lao", json={"points": query_request_points})

        assert response.status_code == 500
        assert response.get_json() == {"error": "internal_error", "detail": "boom"}


class TestRemoteRoute:
    """POST /analyze-overlap"""

    def test_ranked_items(self, client, stub_client, query_request_points):
        response = client.post("/analyze-overlap", json={"points": query_request_points})
        assert response.status_code == 200

        items = response.get_json()["items"]
        assert len(items) == 1
        assert items[0]["id"] == 9001
        assert items[0]["label"] == "District"
        assert items[0]["adminLevel"] == "6"
        assert items[0]["unit"] == "m²"
        assert len(stub_client.calls) == 1

    def test_upstream_failure_is_502(self, lao_data_dir, query_request_points):
        failing = StubOverpassClient(error=UpstreamFailureError(504, "Gateway Timeout"))
        server.initialize_services(lao_data_dir, client=failing)
        try:
            response = server.app.test_client().post(
                "/analyze-overlap", json={"points": query_request_points}
            )
        finally:
            server.dataset_provider = None
            server.overpass_client = None

        assert response.status_code == 502
        assert response.get_json() == {"error": "Overpass error", "detail": "Gateway Timeout"}

    def test_invalid_points_are_400(self, client, stub_client):
        response = client.post("/analyze-overlap", json={"points": query_points(1, 1, 1, 1)})
        assert response.status_code == 400
        assert stub_client.calls == []

    def test_no_overlap_is_empty_list(self, lao_data_dir):
        far = {
            "type": "relation",
            "id": 1,
            "tags": {"name": "Far"},
            "geometry": [{"lat": lat, "lon": lon} for lon, lat in square(110.0, 10.0, 110.1, 10.1)],
        }
        server.initialize_services(lao_data_dir, client=StubOverpassClient([far]))
        try:
            response = server.app.test_client().post(
                "/analyze-overlap", json={"points": query_points(102.05, 18.05, 102.1, 18.1)}
            )
        finally:
            server.dataset_provider = None
            server.overpass_client = None

        assert response.status_code == 200
        assert response.get_json() == {"items": []}
