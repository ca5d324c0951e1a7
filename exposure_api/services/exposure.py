"""
Exposure Service

Glue between snapshot files and the pure exposure core. Snapshots are
reloaded on every call; nothing is cached between requests. Each test id
loads in its own worker thread and a failing id is simply left out.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from exposure_api.config import Settings, settings as default_settings
from exposure_api.core.classification import (
    ExposureLevel,
    aggregate,
    category_stats,
    classify_record,
    detection_summary,
    exposure_distribution,
    filter_by_exposure,
    source_distribution,
    top_priority_chemicals,
)
from exposure_api.core.ingestion import SnapshotLoader
from exposure_api.core.insights import compute_insights
from exposure_api.core.longitudinal import (
    BandMode,
    category_trends_since_previous,
    compute_trend_band,
    interpret_compound_series,
    join_category,
    join_compound,
    series_trend_points,
)
from exposure_api.core.records import Snapshot, SnapshotMetadata, SnapshotTimeline
from exposure_api.utils import (
    get_logger,
    NoSnapshotsError,
    SnapshotNotFoundError,
)

logger = get_logger(__name__)


class ExposureService:
    """Loads snapshots and answers exposure queries. Stateless between calls."""

    def __init__(
        self,
        loader: Optional[SnapshotLoader] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.loader = loader or SnapshotLoader(
            self.config.data_dir,
            pattern=self.config.snapshot_file_pattern,
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def list_tests(self) -> List[SnapshotMetadata]:
        return await run_in_threadpool(self.loader.list_snapshots)

    async def load_timeline(self) -> SnapshotTimeline:
        """
        Load every configured test id concurrently; failing ids are left out.

        Raises:
            NoSnapshotsError: if not a single snapshot could be loaded
        """
        metadata = {m.id: m for m in await self.list_tests()}
        test_ids = range(1, self.config.max_snapshot_id + 1)

        results = await asyncio.gather(
            *(
                run_in_threadpool(self.loader.load_or_skip, test_id, metadata.get(test_id))
                for test_id in test_ids
            ),
            return_exceptions=True,
        )

        snapshots: List[Snapshot] = []
        for test_id, result in zip(test_ids, results):
            if isinstance(result, BaseException):
                logger.error(f"Unexpected error loading snapshot: {result!r}", extra={"test_id": test_id})
                continue
            if result is not None:
                snapshots.append(result)

        if not snapshots:
            raise NoSnapshotsError(details={"data_dir": str(self.loader.data_dir)})
        return SnapshotTimeline(snapshots)

    @staticmethod
    def resolve_snapshot(timeline: SnapshotTimeline, test_id: Optional[int]) -> Snapshot:
        """The requested test, or the most recent one by date when no id is given."""
        if test_id is None:
            return timeline.latest()
        snapshot = timeline.get(test_id)
        if snapshot is None:
            raise SnapshotNotFoundError(test_id, details={"available": timeline.test_ids})
        return snapshot

    # ------------------------------------------------------------------
    # Single snapshot
    # ------------------------------------------------------------------

    async def chemicals(
        self,
        test_id: Optional[int] = None,
        exposure: Optional[ExposureLevel] = None,
    ) -> Dict[str, Any]:
        """Records of one test, optionally only those in one exposure band."""
        timeline = await self.load_timeline()
        snapshot = self.resolve_snapshot(timeline, test_id)
        records = list(snapshot.records)
        if exposure is not None:
            records = filter_by_exposure(records, exposure)

        chemicals = []
        for record in records:
            level = classify_record(record)
            chemicals.append({
                **record.to_dict(),
                "classification": level.value,
                "classification_label": level.label,
            })
        return {
            "testId": snapshot.test_id,
            "exposure": exposure.value if exposure is not None else None,
            "chemicals": chemicals,
        }

    async def categories(self, test_id: Optional[int] = None) -> Dict[str, Any]:
        timeline = await self.load_timeline()
        snapshot = self.resolve_snapshot(timeline, test_id)
        return {
            "testId": snapshot.test_id,
            "categories": [s.to_dict() for s in category_stats(snapshot.records)],
        }

    async def insights(
        self,
        category: Optional[str] = None,
        test_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Category insights, or whole-snapshot insights when ``category`` is None."""
        timeline = await self.load_timeline()
        snapshot = self.resolve_snapshot(timeline, test_id)
        records = list(snapshot.records)

        if category is None:
            insights = compute_insights(records)
            label = None
        else:
            stats = aggregate(records, category)
            insights = compute_insights(stats.records, records)
            label = stats.category

        return {
            "testId": snapshot.test_id,
            "category": label,
            "insights": [i.to_dict() for i in insights],
        }

    async def summary(self, test_id: Optional[int] = None) -> Dict[str, Any]:
        timeline = await self.load_timeline()
        snapshot = self.resolve_snapshot(timeline, test_id)
        records = list(snapshot.records)
        return {
            "testId": snapshot.test_id,
            "date": snapshot.date,
            "detection": detection_summary(records, self.config.baseline_detection_rate).to_dict(),
            "distribution": exposure_distribution(records).to_dict(),
            "sources": [b.to_dict() for b in source_distribution(records)],
            "priorityChemicals": [
                r.to_dict() for r in top_priority_chemicals(records, self.config.top_priority_count)
            ],
        }

    # ------------------------------------------------------------------
    # Longitudinal
    # ------------------------------------------------------------------

    async def compound_longitudinal(self, compound: str) -> Dict[str, Any]:
        timeline = await self.load_timeline()
        series = join_compound(timeline, compound)
        if not any(p.tested for p in series.points):
            return {"chemicalName": compound, "data": [], "hasData": False, "interpretation": None}
        return {
            **series.to_dict(),
            "interpretation": interpret_compound_series(series).to_dict(),
        }

    async def category_longitudinal(self, category: str) -> Dict[str, Any]:
        timeline = await self.load_timeline()
        series = join_category(timeline, category)
        return {
            **series.to_dict(),
            "trends": [t.to_dict() for t in series_trend_points(series)],
        }

    async def trends(self, test_id: Optional[int] = None) -> Dict[str, Any]:
        timeline = await self.load_timeline()
        snapshot = self.resolve_snapshot(timeline, test_id)
        previous = timeline.previous(snapshot.test_id)
        trends = category_trends_since_previous(
            timeline,
            snapshot.test_id,
            limit=self.config.category_trend_limit,
        )
        return {
            "testId": snapshot.test_id,
            "previousTestId": previous.test_id if previous else None,
            "trends": [t.to_dict() for t in trends],
        }

    async def trend_bands(
        self,
        mode: BandMode = BandMode.OVERALL,
        periods: Optional[int] = None,
    ) -> Dict[str, Any]:
        timeline = await self.load_timeline()
        bands = compute_trend_band(timeline, mode=mode, periods=periods)
        return {"mode": BandMode(mode).value, "data": [b.to_dict() for b in bands]}
