"""
Individual Exposure Classifier

Maps one measurement to a classification band. Detection takes precedence
over percentile: a zero value is Not Detected whatever its percentile says.
A detected compound with no percentile (or a percentile of exactly zero)
is Low Exposure.
"""
from __future__ import annotations

from typing import Optional

from ..records import MeasurementRecord
from .base import ExposureLevel, LOW_EXPOSURE_MAX, MONITOR_ONLY_MAX


def percentile_band(percentile: Optional[float]) -> ExposureLevel:
    """Band for a detected percentile (single record or period aggregate)."""
    if percentile is None or percentile <= LOW_EXPOSURE_MAX:
        return ExposureLevel.LOW_EXPOSURE
    if percentile > MONITOR_ONLY_MAX:
        return ExposureLevel.PAY_ATTENTION
    return ExposureLevel.MONITOR_ONLY


def classify_exposure(value: float, percentile: Optional[float] = None) -> ExposureLevel:
    if not value or value <= 0:
        return ExposureLevel.NOT_DETECTED
    return percentile_band(percentile)


def classify_record(record: MeasurementRecord) -> ExposureLevel:
    return classify_exposure(record.value, record.percentile)
