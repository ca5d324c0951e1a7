"""
Response Schemas

Wire shapes returned by the exposure API. Field aliases keep the camelCase
names the dashboard consumes.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Service health information."""
    status: str = "healthy"
    version: str
    timestamp: str
    uptime_seconds: float = 0.0
    snapshots_available: int = 0


class SnapshotInfo(BaseModel):
    id: int
    date: str = ""
    display_date: str = ""     # e.g. "January 5, 2025"
    filename: str = ""


class InsightModel(_CamelModel):
    type: str
    label: str
    value: Union[int, float, str]
    sub_value: Optional[str] = Field(default=None, alias="subValue")
    meaningful: bool = True


class InsightsResponse(_CamelModel):
    test_id: int = Field(alias="testId")
    category: Optional[str] = None
    insights: List[InsightModel] = Field(default_factory=list)


class CompoundPointModel(_CamelModel):
    date: str
    test_id: int = Field(alias="testId")
    value: float = 0.0
    percentile: Optional[float] = None
    detected: bool = False
    tested: bool = True
    range_low: Optional[float] = Field(default=None, alias="rangeLow")
    range_high: Optional[float] = Field(default=None, alias="rangeHigh")
    quartile25: Optional[float] = None
    quartile75: Optional[float] = None


class InterpretationModel(_CamelModel):
    pattern: str
    detected_points: int = Field(alias="detectedPoints")
    total_points: int = Field(alias="totalPoints")
    peak_value: Optional[float] = Field(default=None, alias="peakValue")
    average_value: Optional[float] = Field(default=None, alias="averageValue")
    slope: float = 0.0


class CompoundLongitudinalResponse(_CamelModel):
    chemical_name: str = Field(alias="chemicalName")
    data: List[CompoundPointModel] = Field(default_factory=list)
    has_data: bool = Field(alias="hasData")
    interpretation: Optional[InterpretationModel] = None


class CategoryPointModel(_CamelModel):
    date: str
    test_id: int = Field(alias="testId")
    average_percentile: Optional[float] = Field(default=None, alias="averagePercentile")
    detection_rate: float = Field(alias="detectionRate")
    detection_rate_percent: int = Field(alias="detectionRatePercent")
    total_detected: int = Field(alias="totalDetected")
    total_chemicals: int = Field(alias="totalChemicals")


class TrendPointModel(_CamelModel):
    period_label: str = Field(alias="periodLabel")
    direction: str
    change_percent: float = Field(alias="changePercent")


class CategoryLongitudinalResponse(_CamelModel):
    category: str
    data: List[CategoryPointModel] = Field(default_factory=list)
    has_data: bool = Field(alias="hasData")
    trends: List[TrendPointModel] = Field(default_factory=list)
