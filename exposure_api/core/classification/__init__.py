"""
Exposure Classification Layer

Turns raw measurements into classification bands, per compound and per
category, and summarizes a snapshot for display.

Usage:
    from exposure_api.core.classification import classify_exposure, category_stats

    level = classify_exposure(record.value, record.percentile)
    stats = category_stats(snapshot.records)   # one CategoryStats per category
"""
from .base import ExposureDistribution, ExposureLevel, to_percent
from .individual import classify_exposure, classify_record, percentile_band
from .category import (
    CategoryStats,
    aggregate,
    average_detected_percentile,
    category_stats,
    classify_category,
    classify_category_counts,
    detected_records,
    exposure_distribution,
    group_by_category,
    sort_by_percentile,
)
from .summary import (
    DetectionSummary,
    SourceBreakdown,
    detection_summary,
    exposure_sources,
    filter_by_exposure,
    source_distribution,
    top_priority_chemicals,
)

__all__ = [
    "ExposureDistribution",
    "ExposureLevel",
    "to_percent",
    "classify_exposure",
    "classify_record",
    "percentile_band",
    "CategoryStats",
    "aggregate",
    "average_detected_percentile",
    "category_stats",
    "classify_category",
    "classify_category_counts",
    "detected_records",
    "exposure_distribution",
    "group_by_category",
    "sort_by_percentile",
    "DetectionSummary",
    "SourceBreakdown",
    "detection_summary",
    "exposure_sources",
    "filter_by_exposure",
    "source_distribution",
    "top_priority_chemicals",
]
