"""
Exposure Records: Base Types

Normalized shape of one compound's result within one test snapshot, plus
snapshot metadata and the canonical category identity. Everything in the
classification and longitudinal layers is derived from these types.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from exposure_api.utils import UnknownCategoryError

_WHITESPACE = re.compile(r"\s+")


def normalize_key(name: Optional[str]) -> str:
    """
    Normalize a compound or category name for identity comparison.

    Strips surrounding whitespace (including stray carriage returns),
    collapses internal runs of whitespace and lowercases.
    """
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name.strip()).lower()


class CategoryId(str, Enum):
    """Canonical exposure categories, valued by their display label."""
    AGRICULTURAL_CHEMICALS = "Agricultural Chemicals"
    CONTAINERS_AND_COATINGS = "Containers & Coatings"
    HOUSEHOLD_PRODUCTS = "Household Products"
    INDUSTRIAL_CHEMICALS = "Industrial Chemicals"
    PERSISTENT_POLLUTANTS = "Persistent Pollutants"
    PERSONAL_CARE_PRODUCTS = "Personal Care Products"

    @property
    def label(self) -> str:
        return self.value

    @property
    def key(self) -> str:
        return normalize_key(self.value)

    @classmethod
    def lookup(cls, name: Optional[str]) -> Optional["CategoryId"]:
        """Return the category matching ``name`` after normalization, or None."""
        key = normalize_key(name)
        for category in cls:
            if category.key == key:
                return category
        return None

    @classmethod
    def from_label(cls, name: str) -> "CategoryId":
        """Like :meth:`lookup` but raises for names outside the canonical list."""
        category = cls.lookup(name)
        if category is None:
            raise UnknownCategoryError(f"Unknown exposure category: {name!r}", category=name)
        return category

    @classmethod
    def canonical_labels(cls) -> List[str]:
        return [c.value for c in cls]


@dataclass(frozen=True)
class MeasurementRecord:
    """
    One compound's result within one snapshot.

    ``value == 0`` means the compound was not detected. ``percentile`` is a
    population rank in [0, 1] and only meaningful for detected compounds.
    """
    compound: str
    category: str
    primary_source: str
    value: float = 0.0
    percentile: Optional[float] = None
    secondary_sources: Optional[str] = None
    range_low: Optional[float] = None
    range_high: Optional[float] = None
    date: str = ""                      # MM/DD/YY, empty → inherits snapshot date
    population: Optional[float] = None  # display-only

    @property
    def detected(self) -> bool:
        return self.value > 0

    @property
    def compound_key(self) -> str:
        return normalize_key(self.compound)

    @property
    def category_key(self) -> str:
        return normalize_key(self.category)

    def with_date(self, date: str) -> "MeasurementRecord":
        """Return a copy carrying ``date`` when this record has none of its own."""
        if self.date and self.date.strip():
            return self
        return replace(self, date=date)

    def to_dict(self) -> dict:
        return {
            "compound": self.compound,
            "category": self.category,
            "primary_source": self.primary_source,
            "secondary_sources": self.secondary_sources,
            "value": self.value,
            "percentile": self.percentile,
            "range_low": self.range_low,
            "range_high": self.range_high,
            "date": self.date,
            "population": self.population,
        }


@dataclass(frozen=True)
class SnapshotMetadata:
    """Identity of one dated test round. Ids are 1-based and chronological by convention only."""
    id: int
    date: str = ""
    filename: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "date": self.date, "filename": self.filename}


@dataclass(frozen=True)
class Snapshot:
    """A loaded test round: metadata plus its measurement records."""
    metadata: SnapshotMetadata
    records: Tuple[MeasurementRecord, ...] = field(default_factory=tuple)

    @property
    def test_id(self) -> int:
        return self.metadata.id

    @property
    def date(self) -> str:
        return self.metadata.date

    def find_compound(self, compound: str) -> Optional[MeasurementRecord]:
        """First record whose normalized compound name matches, or None."""
        key = normalize_key(compound)
        for record in self.records:
            if record.compound_key == key:
                return record
        return None

    def category_records(self, category: str) -> List[MeasurementRecord]:
        key = normalize_key(category)
        return [r for r in self.records if r.category_key == key]
