"""Street indices and address tables, built once and read-only afterwards."""

from .address_table import AddressTable, build_address_table
from .search import QuerySyntaxError, SearchHit, TokenIndex
from .street_index import BoroughStreetIndex, StreetIndex, build_street_index

__all__ = [
    "AddressTable",
    "BoroughStreetIndex",
    "QuerySyntaxError",
    "SearchHit",
    "StreetIndex",
    "TokenIndex",
    "build_address_table",
    "build_street_index",
]
