"""Record models and the newline-delimited JSON record source.

Datasets are stored as `<dataset_dir>/<dataset_id>/<dataset_id>.objects.ndjson`,
one JSON object per line. Each line is validated against a pydantic model
while streaming, so builders consume records in file order.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Generic, Iterator, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from shapely.errors import ShapelyError
from shapely.geometry import shape
from tqdm import tqdm

from .utils.errors import DataValidationError

logger = logging.getLogger(__name__)


class RawRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id:             str | int
    name:           str
    valid_since:    str | int | None = Field(default=None, alias="validSince")
    valid_until:    str | int | None = Field(default=None, alias="validUntil")
    borough:        Optional[str] = None
    data:           Optional[dict[str, Any]] = None

    @property
    def effective_borough(self) -> Optional[str]:
        """`data.borough`, falling back to a top-level `borough`."""
        if self.data and self.data.get("borough"):
            return str(self.data["borough"])
        return self.borough or None


class RawStreetRecord(RawRecord):
    pass


class RawAddressRecord(RawRecord):
    geometry: Optional[dict[str, Any]] = None

    @field_validator("geometry")
    @classmethod
    def _validate_geometry(cls, v):
        if v is None:
            return v
        try:
            shape(v)
        except (ShapelyError, AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise ValueError(f"invalid GeoJSON geometry: {e}") from e
        return v


M = TypeVar("M", bound=RawRecord)


class NDJSONRecordSource(Generic[M]):
    """Iterate validated records from a newline-delimited JSON file.

    Usage:
        for street in NDJSONRecordSource(path, RawStreetRecord):
            ...
    """

    def __init__(
        self,
        path: Path | str,
        model: Type[M],
        source: str | None = None,
        progress: bool = False,
    ):
        self.path = Path(path)
        self.model = model
        self.source = source or self.path.stem
        self.progress = progress

    def __iter__(self) -> Iterator[M]:
        with open(self.path, "rb") as fh:
            lines = tqdm(fh, desc=f"Reading {self.source}", unit="rec", disable=not self.progress)
            for lineno, raw in enumerate(lines, start=1):
                try:
                    line = raw.decode("utf8").strip()
                except UnicodeDecodeError as e:
                    logger.error(
                        f"Line {lineno} of {self.source} is not valid UTF-8",
                        extra={"source": self.source},
                    )
                    errors = [{"loc": (lineno,), "msg": str(e), "type": "unicode_decode"}]
                    raise DataValidationError(self.source, errors, original=e) from e
                if not line:
                    continue
                try:
                    yield self.model.model_validate_json(line)
                except ValidationError as e:
                    logger.error(
                        f"Validation of {self.model.__name__} failed at line {lineno}",
                        extra={"source": self.source, "error_count": len(e.errors())},
                    )
                    errors = [{**err, "loc": (lineno, *err.get("loc", ()))} for err in e.errors()]
                    raise DataValidationError(self.source, errors, original=e) from e


def street_records(path: Path | str, progress: bool = False) -> NDJSONRecordSource[RawStreetRecord]:
    return NDJSONRecordSource(path, RawStreetRecord, progress=progress)


def address_records(path: Path | str, progress: bool = False) -> NDJSONRecordSource[RawAddressRecord]:
    return NDJSONRecordSource(path, RawAddressRecord, progress=progress)
