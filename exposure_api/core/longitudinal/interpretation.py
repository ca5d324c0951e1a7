"""
Compound Exposure Interpretation

Classifies the detection pattern of a compound series. The narrative text
shown to users is reference content owned by the presentation layer; this
module only decides which pattern applies.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .joiner import CompoundSeries
from .trends import TrendDirection, classify_linear_trend, linear_trend

# A detection within this many trailing points counts as recent
RECENT_WINDOW = 2


class ExposurePattern(str, Enum):
    NEVER_DETECTED        = "never_detected"
    CONSISTENT_INCREASING = "consistent_increasing"
    CONSISTENT_DECREASING = "consistent_decreasing"
    CONSISTENT_STABLE     = "consistent_stable"
    INTERMITTENT_RECENT   = "intermittent_recent"
    INTERMITTENT_PAST     = "intermittent_past"


_CONSISTENT = {
    TrendDirection.INCREASING: ExposurePattern.CONSISTENT_INCREASING,
    TrendDirection.DECREASING: ExposurePattern.CONSISTENT_DECREASING,
    TrendDirection.STABLE:     ExposurePattern.CONSISTENT_STABLE,
}


@dataclass(frozen=True)
class CompoundInterpretation:
    pattern: ExposurePattern
    detected_points: int
    total_points: int
    peak_value: Optional[float] = None
    average_value: Optional[float] = None
    slope: float = 0.0

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern.value,
            "detectedPoints": self.detected_points,
            "totalPoints": self.total_points,
            "peakValue": self.peak_value,
            "averageValue": self.average_value,
            "slope": self.slope,
        }


def interpret_compound_series(series: CompoundSeries) -> CompoundInterpretation:
    points = series.points
    detected = [p for p in points if p.detected]
    total = len(points)

    if not detected:
        return CompoundInterpretation(ExposurePattern.NEVER_DETECTED, 0, total)

    values = [p.value for p in detected]
    peak = max(values)
    average = sum(values) / len(values)

    if len(detected) == total:
        return CompoundInterpretation(
            pattern=_CONSISTENT[classify_linear_trend(values)],
            detected_points=len(detected),
            total_points=total,
            peak_value=peak,
            average_value=average,
            slope=linear_trend(values),
        )

    last_index = max(i for i, p in enumerate(points) if p.detected)
    recent = last_index >= total - RECENT_WINDOW
    return CompoundInterpretation(
        pattern=ExposurePattern.INTERMITTENT_RECENT if recent else ExposurePattern.INTERMITTENT_PAST,
        detected_points=len(detected),
        total_points=total,
        peak_value=peak,
        average_value=average,
    )
