"""
Exposure Classification: Base Types

Classification bands shared by the individual classifier, the category
classifier and the banded trend calculator. The same percentile thresholds
are applied at every layer so the three views stay visually consistent.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# ── Percentile thresholds (fractions of the reference population) ────────────
LOW_EXPOSURE_MAX = 0.3    # <= 30th percentile
MONITOR_ONLY_MAX = 0.6    # <= 60th percentile, above is Pay Attention


class ExposureLevel(str, Enum):
    """
    Classification band.

    NOT_DETECTED  – value is zero (individual compounds only)
    LOW_EXPOSURE  – at or below the 30th percentile, or percentile unknown
    MONITOR_ONLY  – above the 30th and at or below the 60th percentile
    PAY_ATTENTION – above the 60th percentile

    Category classifications only ever use the last three.
    """
    NOT_DETECTED  = "not_detected"
    LOW_EXPOSURE  = "low_exposure"
    MONITOR_ONLY  = "monitor_only"
    PAY_ATTENTION = "pay_attention"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def severity(self) -> int:
        return _SEVERITY_ORDER[self]

    @classmethod
    def from_filter(cls, name: str) -> "ExposureLevel":
        """Accepts ``pay-attention``, ``pay_attention`` or ``Pay Attention``."""
        key = name.strip().lower().replace("-", "_").replace(" ", "_")
        return cls(key)


_LABELS = {
    ExposureLevel.NOT_DETECTED:  "Not Detected",
    ExposureLevel.LOW_EXPOSURE:  "Low Exposure",
    ExposureLevel.MONITOR_ONLY:  "Monitor Only",
    ExposureLevel.PAY_ATTENTION: "Pay Attention",
}

_SEVERITY_ORDER = {
    ExposureLevel.NOT_DETECTED:  0,
    ExposureLevel.LOW_EXPOSURE:  1,
    ExposureLevel.MONITOR_ONLY:  2,
    ExposureLevel.PAY_ATTENTION: 3,
}


def to_percent(fraction: Optional[float]) -> int:
    """Fraction in [0, 1] → whole percent, rounding halves up. None → 0."""
    if fraction is None:
        return 0
    return int(math.floor(fraction * 100 + 0.5))


@dataclass
class ExposureDistribution:
    """Count of records per individual classification band."""
    not_detected: int = 0
    low_exposure: int = 0
    monitor_only: int = 0
    pay_attention: int = 0

    @property
    def detected(self) -> int:
        return self.low_exposure + self.monitor_only + self.pay_attention

    @property
    def total(self) -> int:
        return self.detected + self.not_detected

    def add(self, level: ExposureLevel) -> None:
        attr = level.value
        setattr(self, attr, getattr(self, attr) + 1)

    def count(self, level: ExposureLevel) -> int:
        return getattr(self, level.value)

    def to_dict(self) -> dict:
        return {
            "not_detected": self.not_detected,
            "low_exposure": self.low_exposure,
            "monitor_only": self.monitor_only,
            "pay_attention": self.pay_attention,
            "detected": self.detected,
            "total": self.total,
        }
