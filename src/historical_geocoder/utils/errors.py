from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from pydantic import ValidationError

from ..models import GeocodeStatus


class GeocoderError(Exception):
    """Base class for every error raised by the geocoder."""


# --- Build-time errors (fatal to initialization) -----------------------------

class BuildError(GeocoderError):
    """Raised while building indices; aborts initialization as a whole."""


class MissingBoroughField(BuildError):
    def __init__(self, record_id: Any, kind: str = "record"):
        self.record_id = record_id
        self.kind = kind
        super().__init__(f"{kind.capitalize()} found without borough: {record_id}")


class DatasetSourceMissing(BuildError):
    def __init__(self, path: Path | str | None, reason: str | None = None):
        self.path = path
        msg = reason or f"File does not exist: {path}"
        super().__init__(msg)


class DataValidationError(BuildError):
    def __init__(self, source: str, errors: list[dict[str, Any]], original: ValidationError | UnicodeDecodeError | None = None):
        self.source = source
        self.errors = errors
        self.original = original
        msg = f"Validation failed for {len(errors)} records from source '{source}'"

        super().__init__(msg)

    def summary(self, limit: int = 5) -> str:
        """Human-readable summary of the first few validation issues."""
        lines = []
        for err in self.errors[:limit]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            lines.append(f"- {loc}: {err.get('msg')} ({err.get('type')})")
        if len(self.errors) > limit:
            lines.append(f"... ({len(self.errors) - limit} more)")
        return "\n".join(lines)


# --- Query-time errors (reported per address) --------------------------------

class QueryError(GeocoderError):
    """A failure confined to a single geocode query."""
    status: ClassVar[GeocodeStatus]


class BoroughNotConfigured(QueryError):
    status = GeocodeStatus.BOROUGH_NOT_CONFIGURED

    def __init__(self):
        super().__init__("Borough parameter not set")


class InvalidAddressFormat(QueryError):
    status = GeocodeStatus.INVALID_ADDRESS_FORMAT

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Address does not start with a number: {address}")


class MissingStreetName(QueryError):
    status = GeocodeStatus.MISSING_STREET_NAME

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Address does not contain street name: {address}")


class SearchEngineFailure(QueryError):
    status = GeocodeStatus.SEARCH_ENGINE_FAILURE

    def __init__(self, message: str):
        self.message = message
        super().__init__(f'Error searching street index: "{message}"')


class StreetNotFound(QueryError):
    status = GeocodeStatus.STREET_NOT_FOUND

    def __init__(self, street: str):
        self.street = street
        super().__init__(f"Street not found: {street}")


class AddressNotFound(QueryError):
    status = GeocodeStatus.ADDRESS_NOT_FOUND

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Address not found: {address}")
