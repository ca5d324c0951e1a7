"""
Service Layer

Orchestrates snapshot loading and the exposure core for the API.
"""
from .exposure import ExposureService

__all__ = ["ExposureService"]
