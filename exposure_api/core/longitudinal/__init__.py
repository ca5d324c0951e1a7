"""
Longitudinal Layer

Joins compounds and categories across test snapshots and derives trends.

Usage:
    from exposure_api.core.longitudinal import join_compound, compute_trend

    series = join_compound(snapshots, "Bisphenol A")
    trend = compute_trend(previous_detected=2, current_detected=4)
"""
from .joiner import (
    CategoryPoint,
    CategorySeries,
    CompoundPoint,
    CompoundSeries,
    SeriesKind,
    interpolate_quartiles,
    join,
    join_category,
    join_compound,
)
from .trends import (
    BandLevel,
    BandMode,
    CategoryTrend,
    Trend,
    TrendBand,
    TrendDirection,
    TrendPoint,
    category_trends_since_previous,
    classify_linear_trend,
    compute_trend,
    compute_trend_band,
    linear_trend,
    series_trend_points,
)
from .interpretation import (
    CompoundInterpretation,
    ExposurePattern,
    interpret_compound_series,
)

__all__ = [
    "CategoryPoint",
    "CategorySeries",
    "CompoundPoint",
    "CompoundSeries",
    "SeriesKind",
    "interpolate_quartiles",
    "join",
    "join_category",
    "join_compound",
    "BandLevel",
    "BandMode",
    "CategoryTrend",
    "Trend",
    "TrendBand",
    "TrendDirection",
    "TrendPoint",
    "category_trends_since_previous",
    "classify_linear_trend",
    "compute_trend",
    "compute_trend_band",
    "linear_trend",
    "series_trend_points",
    "CompoundInterpretation",
    "ExposurePattern",
    "interpret_compound_series",
]
