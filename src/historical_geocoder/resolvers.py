"""
Street and address resolution against built indices.

Street names are matched in two stages: an approximate token query against
the borough's street index, then an exact Levenshtein re-rank of whatever
the index returned. Addresses are only ever matched exactly.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from rapidfuzz.distance import Levenshtein

from .index.address_table import AddressTable
from .index.search import QuerySyntaxError
from .index.street_index import StreetIndex, as_normalizer
from .models import Address, Street
from .normalizers import Normalizer
from .utils.errors import AddressNotFound, SearchEngineFailure, StreetNotFound

logger = logging.getLogger(__name__)

# Edit distance tolerated per fuzzy query term, and for the final re-rank
EDIT_DISTANCE_PER_WORD = 2
MAX_EDIT_DISTANCE = 2


def street_query_terms(normalized: str, edit_distance: int = EDIT_DISTANCE_PER_WORD) -> List[str]:
    """
    Turn a normalized street name into index query terms.

    Single characters are dropped. Short tokens (three characters or
    fewer) and tokens starting with a digit must match exactly; longer
    tokens get a `~N` fuzzy suffix.
    """
    terms = []
    for word in normalized.split():
        if len(word) < 2:
            continue
        if len(word) <= 3 or word[0].isdigit():
            terms.append(word)
        else:
            terms.append(f"{word}~{edit_distance}")
    return terms


class StreetResolver:
    """Resolve free-text street names to canonical streets of a borough."""

    def __init__(
        self,
        street_index: StreetIndex,
        normalizer: Normalizer | Callable[[str], str] | None = None,
        max_distance: int = MAX_EDIT_DISTANCE,
    ):
        self.street_index = street_index
        self.normalizer = as_normalizer(normalizer)
        self.max_distance = max_distance

    def resolve(self, street: str, borough: str) -> Street:
        """
        Find the street nearest by edit distance among index candidates.

        Raises:
            SearchEngineFailure: if the index query fails
            StreetNotFound: if no candidate is within `max_distance`
        """
        normalized = self.normalizer.normalize(street)
        query = " ".join(street_query_terms(normalized))

        try:
            candidates = self.street_index.search(query, borough)
        except QuerySyntaxError as e:
            raise SearchEngineFailure(str(e)) from e

        if not candidates:
            raise StreetNotFound(normalized)

        scored = [
            (Levenshtein.distance(normalized, candidate.name), candidate)
            for candidate in candidates
        ]
        # sorted() is stable, so equal distances keep index relevance order
        best = sorted(
            (item for item in scored if item[0] <= self.max_distance),
            key=lambda item: item[0],
        )
        if not best:
            raise StreetNotFound(normalized)

        distance, found = best[0]
        logger.debug(f"Resolved street '{street}' to '{found.name}' ({borough}, distance={distance})")
        return found.to_street()


class AddressResolver:
    """Exact lookup of composed addresses in a borough's address table."""

    def __init__(self, address_table: AddressTable):
        self.address_table = address_table

    def resolve(self, address: str, borough: str) -> Address:
        found: Optional[Address] = self.address_table.get(address, borough)
        if found is None:
            raise AddressNotFound(address)
        return found
