"""
Insight Layer

Summary facts for a category or a whole snapshot.
"""
from .calculator import (
    COMPARISON_MIN_DIFF,
    Insight,
    InsightType,
    average_percentile_insight,
    category_comparison_insight,
    compute_insights,
    detection_rate_insight,
    highest_percentile_insight,
    most_common_source_insight,
)

__all__ = [
    "COMPARISON_MIN_DIFF",
    "Insight",
    "InsightType",
    "average_percentile_insight",
    "category_comparison_insight",
    "compute_insights",
    "detection_rate_insight",
    "highest_percentile_insight",
    "most_common_source_insight",
]
