"""
Integration Tests for the Exposure API

Tests for health, per-test, longitudinal and trend endpoints against
snapshot CSVs written to a temporary data directory.
Uses async httpx for ASGI app testing.
"""
import httpx
import pytest

from exposure_api.config import Settings
from exposure_api.core.ingestion import SnapshotLoader
from exposure_api.main import app, get_exposure_service
from exposure_api.services import ExposureService


def _override_service(data_dir):
    config = Settings(data_dir=data_dir, max_snapshot_id=4)
    service = ExposureService(loader=SnapshotLoader(data_dir), config=config)
    app.dependency_overrides[get_exposure_service] = lambda: service


@pytest.fixture
async def async_client(data_dir):
    """Create async test client over the sample snapshots."""
    _override_service(data_dir)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def empty_client(tmp_path):
    """Create async test client with no snapshots at all."""
    _override_service(tmp_path / "empty")
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        """Test root endpoint returns health info."""
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["snapshots_available"] == 3
        assert "version" in data

    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_list_tests(self, async_client):
        response = await async_client.get("/api/v1/tests")
        assert response.status_code == 200

        tests = response.json()
        assert [t["id"] for t in tests] == [1, 2, 3]
        assert tests[1]["date"] == "05/10/24"
        assert tests[0]["display_date"] == "January 10, 2024"


@pytest.mark.asyncio
class TestSnapshotEndpoints:
    """Tests for single-test endpoints."""

    async def test_chemicals_default_to_latest(self, async_client):
        response = await async_client.get("/api/v1/chemicals")
        assert response.status_code == 200

        data = response.json()
        assert data["testId"] == 3
        assert len(data["chemicals"]) == 3
        bpa = next(c for c in data["chemicals"] if c["compound"] == "Bisphenol A")
        assert bpa["classification"] == "not_detected"
        assert bpa["classification_label"] == "Not Detected"

    async def test_chemicals_exposure_filter(self, async_client):
        response = await async_client.get(
            "/api/v1/chemicals", params={"testId": 1, "exposure": "pay-attention"}
        )
        assert response.status_code == 200

        data = response.json()
        assert data["exposure"] == "pay_attention"
        assert [c["compound"] for c in data["chemicals"]] == ["Bisphenol A"]

    async def test_chemicals_exposure_all(self, async_client):
        response = await async_client.get(
            "/api/v1/chemicals", params={"testId": 1, "exposure": "all"}
        )
        assert response.status_code == 200
        assert response.json()["exposure"] is None
        assert len(response.json()["chemicals"]) == 3

    async def test_chemicals_unknown_exposure(self, async_client):
        response = await async_client.get("/api/v1/chemicals", params={"exposure": "bogus"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Unknown exposure filter: bogus"

    async def test_unknown_test_id(self, async_client):
        response = await async_client.get("/api/v1/chemicals", params={"testId": 9})
        assert response.status_code == 404
        assert response.json()["error"] == "SNAPSHOT_NOT_FOUND"

    async def test_categories(self, async_client):
        response = await async_client.get("/api/v1/categories", params={"testId": 1})
        assert response.status_code == 200

        categories = response.json()["categories"]
        assert len(categories) == 6
        containers = next(c for c in categories if c["category"] == "Containers & Coatings")
        assert containers["classification"] == "monitor_only"
        assert containers["detected_count"] == 1

    async def test_category_insights(self, async_client):
        response = await async_client.get(
            "/api/v1/categories/insights",
            params={"category": "household products", "testId": 3},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["category"] == "Household Products"
        types = [i["type"] for i in data["insights"]]
        assert types == [
            "averagePercentile",
            "highestPercentile",
            "detectionRate",
            "mostCommonSource",
            "categoryComparison",
        ]
        assert data["insights"][1]["value"] == "Triclosan"
        assert data["insights"][4]["value"].endswith("higher")

    async def test_insights_for_empty_category(self, async_client):
        response = await async_client.get(
            "/api/v1/categories/insights",
            params={"category": "Agricultural Chemicals"},
        )
        assert response.status_code == 200
        assert response.json()["insights"] == []

    async def test_summary(self, async_client):
        response = await async_client.get("/api/v1/summary", params={"testId": 1})
        assert response.status_code == 200

        data = response.json()
        assert data["detection"]["detected_count"] == 2
        assert data["detection"]["total_count"] == 3
        assert data["detection"]["detection_rate"] == 67
        assert data["detection"]["baseline_detection_rate"] == 35
        assert [c["compound"] for c in data["priorityChemicals"]] == ["Bisphenol A"]


@pytest.mark.asyncio
class TestLongitudinalEndpoints:
    """Tests for longitudinal endpoints."""

    async def test_chemical_required(self, async_client):
        response = await async_client.get("/api/v1/chemicals/longitudinal")
        assert response.status_code == 400
        assert response.json()["detail"] == "Chemical name is required"

    async def test_chemical_series(self, async_client):
        response = await async_client.get(
            "/api/v1/chemicals/longitudinal",
            params={"chemical": "bisphenol a"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["chemicalName"] == "Bisphenol A"
        assert data["hasData"] is True
        assert [p["detected"] for p in data["data"]] == [True, True, False]
        assert data["data"][0]["quartile25"] == 1.5
        assert data["interpretation"]["pattern"] == "intermittent_recent"

    async def test_unknown_chemical(self, async_client):
        response = await async_client.get(
            "/api/v1/chemicals/longitudinal",
            params={"chemical": "Unobtainium"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["hasData"] is False
        assert data["data"] == []

    async def test_category_required(self, async_client):
        response = await async_client.get("/api/v1/chemicals/longitudinal/category")
        assert response.status_code == 400
        assert response.json()["detail"] == "Category name is required"

    async def test_category_series(self, async_client):
        response = await async_client.get(
            "/api/v1/chemicals/longitudinal/category",
            params={"category": "Personal Care Products"},
        )
        assert response.status_code == 200

        data = response.json()
        assert [p["testId"] for p in data["data"]] == [1, 3]
        assert len(data["trends"]) == 1


@pytest.mark.asyncio
class TestTrendEndpoints:
    """Tests for trend endpoints."""

    async def test_trends_since_previous(self, async_client):
        response = await async_client.get("/api/v1/trends")
        assert response.status_code == 200

        data = response.json()
        assert data["testId"] == 3
        assert data["previousTestId"] == 2

    async def test_trend_bands(self, async_client):
        response = await async_client.get("/api/v1/trends/bands")
        assert response.status_code == 200

        data = response.json()
        assert data["mode"] == "overall"
        assert [b["month"] for b in data["data"]] == ["Jan 2024", "May 2024", "Sep 2024"]

    async def test_trend_bands_category_mode(self, async_client):
        response = await async_client.get(
            "/api/v1/trends/bands",
            params={"mode": "category", "periods": 2},
        )
        assert response.status_code == 200
        assert [b["testId"] for b in response.json()["data"]] == [2, 3]

    async def test_trend_bands_invalid_periods(self, async_client):
        response = await async_client.get("/api/v1/trends/bands", params={"periods": 0})
        assert response.status_code == 422


@pytest.mark.asyncio
class TestNoData:
    """Tests for an empty data directory."""

    async def test_no_snapshots(self, empty_client):
        response = await empty_client.get("/api/v1/chemicals")
        assert response.status_code == 503
        assert response.json()["error"] == "NO_SNAPSHOTS"

    async def test_health_still_answers(self, empty_client):
        response = await empty_client.get("/health")
        assert response.status_code == 200
        assert response.json()["snapshots_available"] == 0
