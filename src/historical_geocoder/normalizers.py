"""
Street and borough name normalizers.

The street normalizer is applied to street records at build time and to
the street portion of every query, so both sides of the fuzzy search
share one token form. Any deterministic `str -> str` transform can take
its place by subclassing `Normalizer`.
"""

import re
from abc import ABC, abstractmethod
from typing import Callable, Optional, List, Mapping


class Normalizer(ABC):
    """
    Abstract base for string normalizers.

    Normalizers transform input strings into a canonical form
    (e.g., "5th Avenue" -> "5 AVE").
    """

    @abstractmethod
    def normalize(self, value: str) -> str:
        """
        Normalize a string value.

        Args:
            value: String to normalize

        Returns:
            Normalized string
        """
        pass

    def normalize_batch(self, values: List[str]) -> List[str]:
        return [self.normalize(v) for v in values]

    def __call__(self, value: str) -> str:
        return self.normalize(value)


class FunctionNormalizer(Normalizer):
    """Wrap a plain `str -> str` callable as a Normalizer."""

    def __init__(self, func: Callable[[str], str]):
        self.func = func

    def normalize(self, value: str) -> str:
        return self.func(value)


# Ordinal word to number mapping
_ORDINAL_WORDS: Mapping[str, str] = {
    "FIRST": "1", "SECOND": "2", "THIRD": "3",
    "FOURTH": "4", "FIFTH": "5", "SIXTH": "6",
    "SEVENTH": "7", "EIGHTH": "8", "NINTH": "9",
    "TENTH": "10", "ELEVENTH": "11", "TWELFTH": "12",
    "THIRTEENTH": "13", "FOURTEENTH": "14",
    "FIFTEENTH": "15", "SIXTEENTH": "16",
    "SEVENTEENTH": "17", "EIGHTEENTH": "18",
    "NINETEENTH": "19", "TWENTIETH": "20",
}
_ORDINAL_TENS: Mapping[str, int] = {
    "TWENTY": 20, "THIRTY": 30, "FORTY": 40, "FIFTY": 50,
    "SIXTY": 60, "SEVENTY": 70, "EIGHTY": 80, "NINETY": 90,
}
_ORDINAL_ONES: Mapping[str, int] = {
    "FIRST": 1, "SECOND": 2, "THIRD": 3, "FOURTH": 4, "FIFTH": 5,
    "SIXTH": 6, "SEVENTH": 7, "EIGHTH": 8, "NINTH": 9,
}

_RE_COMPOUND_ORDINAL = re.compile(
    r"\b(?P<tens>twenty|thirty|forty|fifty|sixty|seventy|eighty|ninety)"
    r"(?:[\s-]+(?P<ones>first|second|third|fourth|fifth|sixth|seventh|eighth|ninth))?\b",
    re.I,
)
_RE_ORDINAL_WORD = re.compile(r"\b(" + "|".join(_ORDINAL_WORDS) + r")\b", re.I)
_RE_ORDINAL_SUFFIX = re.compile(r"\b(\d+)(?:st|nd|rd|th)\b", re.I)

# Street types, long form (or stray abbreviation) -> canonical short form
_STREET_TYPES: Mapping[str, str] = {
    "AVENUE": "AVE",
    "AV": "AVE",
    "STREET": "ST",
    "PLACE": "PL",
    "BOULEVARD": "BLVD",
    "ROAD": "RD",
    "COURT": "CT",
    "PARKWAY": "PKWY",
    "TERRACE": "TER",
    "LANE": "LN",
    "DRIVE": "DR",
}
_RE_STREET_TYPE = re.compile(r"\b(" + "|".join(_STREET_TYPES) + r")\b", re.I)

# Abbreviations that are part of the name rather than a type or direction
_NAME_ABBREVIATIONS: Mapping[str, str] = {
    "FT": "FORT",
    "MT": "MOUNT",
}
_RE_NAME_ABBREVIATION = re.compile(r"\b(" + "|".join(_NAME_ABBREVIATIONS) + r")\b", re.I)

# EAST/WEST/NORTH/SOUTH only shorten before a number ("EAST 90 ST" but "EAST BROADWAY")
_RE_NUMBERED_DIRECTION = re.compile(r"\b(EAST|WEST|NORTH|SOUTH)\s+(?=\d)", re.I)

# Known historical spelling variants (variant -> canonical)
_STREET_NAME_VARIANTS: Mapping[str, str] = {
    "PRESIDENT STS": "PRESIDENT ST",
    "HYLAND BLVD": "HYLAN BLVD",
    "ELLWOOD ST": "ELWOOD ST",
    "LAGUARDIA PL": "LA GUARDIA PL",
}

# Borough name aliases
BOROUGH_ALIASES: Mapping[str, str] = {
    "mn": "Manhattan",
    "bx": "Bronx",
    "bk": "Brooklyn",
    "qn": "Queens",
    "qns": "Queens",
    "si": "Staten Island",
    "manhattan": "Manhattan",
    "bronx": "Bronx",
    "the bronx": "Bronx",
    "brooklyn": "Brooklyn",
    "queens": "Queens",
    "staten island": "Staten Island",
    "new york": "Manhattan",
    "kings": "Brooklyn",
    "kings county": "Brooklyn",
    "richmond": "Staten Island",
    "richmond county": "Staten Island",
}

VALID_BOROUGHS = {"Manhattan", "Bronx", "Brooklyn", "Queens", "Staten Island"}


def convert_spelled_ordinals(text: str) -> str:
    """Convert spelled ordinals, including compounds like "Forty Second", to numbers."""
    def replace_compound(match: re.Match) -> str:
        tens_val = _ORDINAL_TENS.get(match.group("tens").upper(), 0)
        ones_word = match.group("ones")
        ones_val = _ORDINAL_ONES.get(ones_word.upper(), 0) if ones_word else 0
        total = tens_val + ones_val
        return str(total) if total > 0 else match.group(0)

    text = _RE_COMPOUND_ORDINAL.sub(replace_compound, text)
    return _RE_ORDINAL_WORD.sub(lambda m: _ORDINAL_WORDS[m.group(1).upper()], text)


class StreetNormalizer(Normalizer):
    """
    Normalizes street names to the NYC canonical token form.

    Handles:
    - Punctuation (periods and commas are dropped)
    - Spelled and suffixed ordinals (Fifth, 5th -> 5)
    - Street type abbreviations (Avenue -> AVE, Street -> ST, ...)
    - Numbered directions (West 72nd Street -> W 72 ST)
    - Known historical spelling variants
    - Whitespace and case
    """

    def normalize(self, value: str) -> str:
        if not value:
            return ""

        t = re.sub(r"[.,]+", "", str(value).strip())
        t = convert_spelled_ordinals(t)
        t = _RE_ORDINAL_SUFFIX.sub(r"\1", t)

        t = _RE_NAME_ABBREVIATION.sub(lambda m: _NAME_ABBREVIATIONS[m.group(1).upper()], t)
        t = _RE_NUMBERED_DIRECTION.sub(lambda m: m.group(1)[0].upper() + " ", t)
        t = _RE_STREET_TYPE.sub(lambda m: _STREET_TYPES[m.group(1).upper()], t)

        t = re.sub(r"\s*-\s*", "-", t)
        t = re.sub(r"\s+", " ", t).strip().upper()

        for variant, canonical in _STREET_NAME_VARIANTS.items():
            t = re.sub(rf"\b{re.escape(variant)}\b", canonical, t)

        return t


class BoroughNormalizer(Normalizer):
    """
    Maps borough aliases (mn, bk, kings county, ...) to canonical names.

    Unknown values are returned trimmed but otherwise unchanged, so datasets
    partitioned by something other than the five NYC boroughs still work.
    """

    def normalize(self, value: Optional[str]) -> str:
        if not value:
            return ""

        s = str(value).strip()
        key = re.sub(r"\s+", " ", s.lower())
        if key in BOROUGH_ALIASES:
            return BOROUGH_ALIASES[key]
        if s.title() in VALID_BOROUGHS:
            return s.title()
        return s
