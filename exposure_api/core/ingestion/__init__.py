"""
Snapshot Ingestion Module

Loads test snapshot files into measurement records for the service layer.
"""
from .snapshots import SnapshotLoader, parse_row

__all__ = [
    "SnapshotLoader",
    "parse_row",
]
