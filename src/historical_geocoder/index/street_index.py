from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, List, Mapping, Optional

from ..models import IndexedStreet
from ..normalizers import BoroughNormalizer, FunctionNormalizer, Normalizer, StreetNormalizer
from ..records import RawStreetRecord
from ..utils.errors import MissingBoroughField
from .search import TokenIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoroughStreetIndex:
    """Streets of one borough, searchable by normalized name."""
    borough: str
    streets: tuple[IndexedStreet, ...]
    index: TokenIndex

    def search(self, query: str) -> List[IndexedStreet]:
        """Streets matching `query`, in index relevance order."""
        return [self.streets[hit.ref] for hit in self.index.search(query)]


class StreetIndex:
    """Per-borough street indices, immutable once built."""

    def __init__(self, boroughs: Mapping[str, BoroughStreetIndex], count: int):
        self._boroughs = MappingProxyType(dict(boroughs))
        self.count = count

    @property
    def boroughs(self) -> Mapping[str, BoroughStreetIndex]:
        return self._boroughs

    def __contains__(self, borough: object) -> bool:
        return borough in self._boroughs

    def get(self, borough: str) -> Optional[BoroughStreetIndex]:
        return self._boroughs.get(borough)

    def search(self, query: str, borough: str) -> List[IndexedStreet]:
        """Search one borough; a borough without an index has no results."""
        borough_index = self._boroughs.get(borough)
        if borough_index is None:
            return []
        return borough_index.search(query)


def as_normalizer(normalizer: Normalizer | Callable[[str], str] | None) -> Normalizer:
    if normalizer is None:
        return StreetNormalizer()
    if isinstance(normalizer, Normalizer):
        return normalizer
    return FunctionNormalizer(normalizer)


def build_street_index(
    records: Iterable[RawStreetRecord | Mapping[str, Any]],
    normalizer: Normalizer | Callable[[str], str] | None = None,
) -> StreetIndex:
    """
    Build per-borough street indices.

    Records are consumed in order; each borough's streets get positional
    references 0, 1, 2, ... in first-seen order.

    Args:
        records: Raw street records (models or plain dicts)
        normalizer: Street name normalizer; must be the one used at query time

    Returns:
        StreetIndex

    Raises:
        MissingBoroughField: if any record has no borough (nothing is built)
    """
    normalizer = as_normalizer(normalizer)
    borough_normalizer = BoroughNormalizer()
    grouped: dict[str, list[IndexedStreet]] = {}
    count = 0

    for record in records:
        if not isinstance(record, RawStreetRecord):
            record = RawStreetRecord.model_validate(record)

        borough = borough_normalizer.normalize(record.effective_borough)
        if not borough:
            raise MissingBoroughField(record.id, kind="street")

        streets = grouped.setdefault(borough, [])
        streets.append(IndexedStreet(
            ref=len(streets),
            id=record.id,
            name=normalizer.normalize(record.name),
            borough=borough,
            valid_since=record.valid_since,
            valid_until=record.valid_until,
        ))
        count += 1

    boroughs = {}
    for borough, streets in grouped.items():
        boroughs[borough] = BoroughStreetIndex(
            borough=borough,
            streets=tuple(streets),
            index=TokenIndex.build((s.ref, s.name) for s in streets),
        )
        logger.debug(f"Indexed {len(streets)} streets in {borough}")

    logger.info(f"Indexed {count} streets")
    return StreetIndex(boroughs, count)
