"""
In-memory inverted token index with edit-distance term expansion.

Documents are (ref, text) pairs. A query is a whitespace-separated list of
terms; a term may carry a `~N` suffix, in which case it also matches every
indexed token within Levenshtein distance N of it. Terms combine with OR
semantics and hits are ranked by summed term weight:

    weight(term, doc) = idf(token) / (1 + distance(term, token))

taking the best-matching token per term and document. Ties order by
ascending ref, so ranking is deterministic for a given build.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping

from rapidfuzz.distance import Levenshtein


class QuerySyntaxError(ValueError):
    """Raised for malformed query strings."""


@dataclass(frozen=True)
class QueryTerm:
    text: str
    edit_distance: int = 0


@dataclass(frozen=True)
class SearchHit:
    ref: int
    score: float


def tokenize(text: str) -> List[str]:
    return text.casefold().split()


def parse_query(query: str) -> List[QueryTerm]:
    """Parse `term` / `term~N` clauses."""
    terms = []
    for clause in query.split():
        text, sep, suffix = clause.partition("~")
        if not text:
            raise QuerySyntaxError(f"expecting term before '~', found '{clause}'")
        if sep and not suffix.isdigit():
            raise QuerySyntaxError(f"expecting integer edit distance after '~', found '{suffix}'")
        terms.append(QueryTerm(text.casefold(), int(suffix) if sep else 0))
    return terms


class TokenIndex:
    """Read-only inverted index; build with `TokenIndex.build()`."""

    def __init__(self, postings: Mapping[str, tuple[int, ...]], doc_count: int):
        self._postings = MappingProxyType(dict(postings))
        self.doc_count = doc_count

    @classmethod
    def build(cls, documents: Iterable[tuple[int, str]]) -> "TokenIndex":
        postings: dict[str, list[int]] = {}
        doc_count = 0
        for ref, text in documents:
            doc_count += 1
            for token in dict.fromkeys(tokenize(text)):
                postings.setdefault(token, []).append(ref)
        return cls({token: tuple(refs) for token, refs in postings.items()}, doc_count)

    @property
    def vocabulary(self) -> frozenset[str]:
        return frozenset(self._postings)

    def _idf(self, token: str) -> float:
        return math.log(1 + self.doc_count / len(self._postings[token]))

    def _expand(self, term: QueryTerm) -> Iterator[tuple[str, int]]:
        """Yield (indexed token, distance) pairs matching a query term."""
        if term.edit_distance == 0:
            if term.text in self._postings:
                yield term.text, 0
            return

        for token in self._postings:
            distance = Levenshtein.distance(term.text, token, score_cutoff=term.edit_distance)
            if distance <= term.edit_distance:
                yield token, distance

    def search(self, query: str) -> List[SearchHit]:
        scores: dict[int, float] = {}
        for term in parse_query(query):
            best: dict[int, float] = {}
            for token, distance in self._expand(term):
                weight = self._idf(token) / (1 + distance)
                for ref in self._postings[token]:
                    if weight > best.get(ref, 0.0):
                        best[ref] = weight
            for ref, weight in best.items():
                scores[ref] = scores.get(ref, 0.0) + weight

        hits = [SearchHit(ref, score) for ref, score in scores.items()]
        return sorted(hits, key=lambda h: (-h.score, h.ref))
