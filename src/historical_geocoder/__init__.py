"""
Historical address geocoder.

- Records: NDJSON record source and pydantic record models
- Normalizers: Street and borough name normalization
- Index: Per-borough fuzzy street indices and exact address tables
- Resolvers: Street (fuzzy + edit distance) and address (exact) resolution
- Geocoder: The end-to-end pipeline and concurrent initialization
"""

from .models import (
    GeocodeStatus,
    GeocodeResult,
    Street,
    Address,
    ParsedAddress,
)

from .normalizers import (
    Normalizer,
    StreetNormalizer,
    BoroughNormalizer,
    FunctionNormalizer,
)

from .index import (
    StreetIndex,
    AddressTable,
    build_street_index,
    build_address_table,
)

from .resolvers import (
    StreetResolver,
    AddressResolver,
)

from .geocoder import (
    Geocoder,
    build_indices,
    clean_address,
    expand_id,
    initialize,
    parse_address,
)

from .settings import GeocoderSettings

from .utils.errors import (
    GeocoderError,
    BuildError,
    QueryError,
    MissingBoroughField,
    DatasetSourceMissing,
    DataValidationError,
    BoroughNotConfigured,
    InvalidAddressFormat,
    MissingStreetName,
    SearchEngineFailure,
    StreetNotFound,
    AddressNotFound,
)

__all__ = [
    # Models
    "GeocodeStatus",
    "GeocodeResult",
    "Street",
    "Address",
    "ParsedAddress",
    # Normalizers
    "Normalizer",
    "StreetNormalizer",
    "BoroughNormalizer",
    "FunctionNormalizer",
    # Index
    "StreetIndex",
    "AddressTable",
    "build_street_index",
    "build_address_table",
    # Resolvers
    "StreetResolver",
    "AddressResolver",
    # Geocoder
    "Geocoder",
    "build_indices",
    "clean_address",
    "expand_id",
    "initialize",
    "parse_address",
    "GeocoderSettings",
    # Errors
    "GeocoderError",
    "BuildError",
    "QueryError",
    "MissingBoroughField",
    "DatasetSourceMissing",
    "DataValidationError",
    "BoroughNotConfigured",
    "InvalidAddressFormat",
    "MissingStreetName",
    "SearchEngineFailure",
    "StreetNotFound",
    "AddressNotFound",
]
