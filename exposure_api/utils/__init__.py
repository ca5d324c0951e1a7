"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ExposureTrackerError,
    SnapshotLoadError,
    RecordValidationError,
    UnknownCategoryError,
    NoSnapshotsError,
    SnapshotNotFoundError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ExposureTrackerError",
    "SnapshotLoadError",
    "RecordValidationError",
    "UnknownCategoryError",
    "NoSnapshotsError",
    "SnapshotNotFoundError",
]
