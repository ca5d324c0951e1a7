"""
Unit Tests for the Exposure Service

Tests for concurrent snapshot loading and the exposure filter.
"""
import pytest

from exposure_api.config import Settings
from exposure_api.core.classification import ExposureLevel
from exposure_api.core.ingestion import SnapshotLoader
from exposure_api.services import ExposureService
from exposure_api.utils import NoSnapshotsError


def _service(data_dir) -> ExposureService:
    return ExposureService(
        loader=SnapshotLoader(data_dir),
        config=Settings(data_dir=data_dir, max_snapshot_id=4),
    )


@pytest.mark.asyncio
class TestLoadTimeline:
    """Tests for ExposureService.load_timeline."""

    async def test_skips_missing_and_malformed(self, data_dir):
        """Missing test 4 and unreadable test 2 do not stop the others."""
        (data_dir / "all-chemicals_test2.csv").write_text("Name,Value\nLead,1\n")
        timeline = await _service(data_dir).load_timeline()
        assert timeline.test_ids == [1, 3]

    async def test_no_snapshots(self, tmp_path):
        with pytest.raises(NoSnapshotsError):
            await _service(tmp_path).load_timeline()


@pytest.mark.asyncio
class TestChemicals:
    """Tests for ExposureService.chemicals."""

    async def test_unfiltered(self, data_dir):
        result = await _service(data_dir).chemicals(1)
        assert result["exposure"] is None
        assert len(result["chemicals"]) == 3

    async def test_filtered(self, data_dir):
        result = await _service(data_dir).chemicals(1, ExposureLevel.NOT_DETECTED)
        assert result["exposure"] == "not_detected"
        assert [c["compound"] for c in result["chemicals"]] == ["Triclosan"]
