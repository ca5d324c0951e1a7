"""
Custom Exception Hierarchy

Error types raised around the exposure core: snapshot loading, record
validation and category lookup. The classification and longitudinal
core itself never raises for validated input.
"""
from typing import Optional, Dict, Any


class ExposureTrackerError(Exception):
    """Base exception for all exposure tracker errors."""
    
    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class SnapshotLoadError(ExposureTrackerError):
    """A single test snapshot could not be read or parsed."""
    
    def __init__(
        self,
        message: str,
        test_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="SNAPSHOT_LOAD_ERROR",
            details={"test_id": test_id, **(details or {})}
        )
        self.test_id = test_id


class RecordValidationError(ExposureTrackerError):
    """A source row does not have the shape of a measurement record."""
    
    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="RECORD_VALIDATION_ERROR",
            details={"field": field, **(details or {})}
        )
        self.field = field


class UnknownCategoryError(ExposureTrackerError):
    """Category name is not part of the canonical category list."""
    
    def __init__(
        self,
        message: str,
        category: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="UNKNOWN_CATEGORY",
            details={"category": category, **(details or {})}
        )
        self.category = category


class NoSnapshotsError(ExposureTrackerError):
    """No snapshot at all could be loaded."""
    
    def __init__(
        self,
        message: str = "No test snapshots available",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="NO_SNAPSHOTS",
            details=details
        )


class SnapshotNotFoundError(ExposureTrackerError):
    """Requested test id is not among the loaded snapshots."""
    
    def __init__(
        self,
        test_id: int,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"Test {test_id} not found",
            code="SNAPSHOT_NOT_FOUND",
            details={"test_id": test_id, **(details or {})}
        )
        self.test_id = test_id
