"""
Core data models for street/address resolution.

These immutable, frozen dataclasses are the contract between the index
builders, the resolvers and the geocoding pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional, TYPE_CHECKING

from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

if TYPE_CHECKING:
    from .utils.errors import QueryError


class GeocodeStatus(StrEnum):
    """Status of a geocode request."""
    OK = "ok"
    BOROUGH_NOT_CONFIGURED = "borough_not_configured"
    INVALID_ADDRESS_FORMAT = "invalid_address_format"
    MISSING_STREET_NAME = "missing_street_name"
    SEARCH_ENGINE_FAILURE = "search_engine_failure"
    STREET_NOT_FOUND = "street_not_found"
    ADDRESS_NOT_FOUND = "address_not_found"


@dataclass(frozen=True)
class Street:
    """A canonical street as returned by the street resolver."""
    id: Any
    name: str
    valid_since: Optional[str | int] = None
    valid_until: Optional[str | int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "validSince": self.valid_since,
            "validUntil": self.valid_until,
        }


@dataclass(frozen=True)
class IndexedStreet:
    """
    A street record as stored in a borough's street index.

    `ref` is the positional reference assigned at build time; `name` is
    already normalized.
    """
    ref: int
    id: Any
    name: str
    borough: str
    valid_since: Optional[str | int] = None
    valid_until: Optional[str | int] = None

    def to_street(self) -> Street:
        """Strip the index bookkeeping (ref, borough)."""
        return Street(
            id=self.id,
            name=self.name,
            valid_since=self.valid_since,
            valid_until=self.valid_until,
        )


@dataclass(frozen=True)
class Address:
    """Address detail stored in a borough's address table."""
    id: Any
    name: str
    valid_since: Optional[str | int] = None
    valid_until: Optional[str | int] = None
    geometry: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        """Properties view of the address (geometry is carried by the feature)."""
        return {
            "id": self.id,
            "name": self.name,
            "validSince": self.valid_since,
            "validUntil": self.valid_until,
        }


@dataclass(frozen=True)
class ParsedAddress:
    """House number and street portion split out of cleaned address text."""
    number: str
    street: str


@dataclass(frozen=True)
class GeocodeResult:
    """
    The result of a geocoding operation.

    Successful results carry a GeoJSON Feature; failures carry the query
    error that stopped the pipeline. Either way the result is returned,
    never raised, so one failing address never aborts a batch.
    """
    input: str
    borough: Optional[str] = None
    status: GeocodeStatus = GeocodeStatus.OK
    feature: Optional[dict[str, Any]] = None
    error: Optional["QueryError"] = field(default=None, compare=False)

    def is_success(self) -> bool:
        return self.status is GeocodeStatus.OK and self.feature is not None

    def raise_for_status(self) -> None:
        """Re-raise the captured query error, if any."""
        if self.error is not None:
            raise self.error

    def shape(self) -> Optional[BaseGeometry]:
        """Feature geometry as a shapely geometry (None if unavailable)."""
        if not self.feature or not self.feature.get("geometry"):
            return None
        return shape(self.feature["geometry"])

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "input": self.input,
            "borough": self.borough,
            "status": self.status.value,
            "feature": self.feature,
            "error": str(self.error) if self.error is not None else None,
        }
