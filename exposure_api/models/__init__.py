"""
API Models

Pydantic response schemas for the exposure API.
"""
from .responses import (
    CategoryLongitudinalResponse,
    CategoryPointModel,
    CompoundLongitudinalResponse,
    CompoundPointModel,
    HealthResponse,
    InsightModel,
    InsightsResponse,
    SnapshotInfo,
    TrendPointModel,
)

__all__ = [
    "CategoryLongitudinalResponse",
    "CategoryPointModel",
    "CompoundLongitudinalResponse",
    "CompoundPointModel",
    "HealthResponse",
    "InsightModel",
    "InsightsResponse",
    "SnapshotInfo",
    "TrendPointModel",
]
