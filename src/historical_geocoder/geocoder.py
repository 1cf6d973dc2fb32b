"""
Geocoding pipeline: free-text address -> GeoJSON Feature.

    clean -> parse -> resolve street -> compose -> resolve address -> assemble

Every stage is fail-fast. Query failures come back inside the
GeocodeResult; only initialization raises.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterable, List, Optional

from .index.address_table import AddressTable, build_address_table
from .index.street_index import StreetIndex, as_normalizer, build_street_index
from .models import Address, GeocodeResult, ParsedAddress, Street
from .normalizers import BoroughNormalizer, Normalizer
from .records import address_records, street_records
from .resolvers import AddressResolver, StreetResolver
from .settings import GeocoderSettings
from .utils.errors import (
    BoroughNotConfigured,
    DatasetSourceMissing,
    InvalidAddressFormat,
    MissingStreetName,
    QueryError,
)
from .utils.pipeline_mixin import PipelineMixin

logger = logging.getLogger(__name__)

_DISALLOWED_CHARACTERS = re.compile(r"[^0-9a-z., ½\-'&]", re.I | re.ASCII)
_ADDRESS_PATTERN = re.compile(r"^([0-9½]+) (.*)")

ID_SEPARATOR = "/"


def clean_address(address: str) -> str:
    """Drop everything but digits, letters, space, `.`, `,`, `½`, `-`, `'` and `&`."""
    return _DISALLOWED_CHARACTERS.sub("", address).strip()


def parse_address(address: str) -> ParsedAddress:
    """
    Split cleaned address text into house number and street.

    Raises:
        InvalidAddressFormat: if the text does not start with a number
        MissingStreetName: if nothing follows the number
    """
    match = _ADDRESS_PATTERN.match(address)
    if not match:
        raise InvalidAddressFormat(address)

    number, street = match.groups()
    if not street:
        raise MissingStreetName(address)

    return ParsedAddress(number=number, street=street)


def expand_id(dataset_id: str, id: Any) -> Any:
    """Qualify an id with its dataset, unless it is qualified already."""
    if ID_SEPARATOR in str(id):
        return id
    return f"{dataset_id}{ID_SEPARATOR}{id}"


class Geocoder(PipelineMixin):
    """
    Resolve addresses against built street indices and address tables.

    Usage:
        geocoder = initialize(GeocoderSettings(dataset_dir='data'))
        result = geocoder.geocode('350 5th Ave.', 'Manhattan')
        if result.is_success():
            print(result.feature)
    """

    MODALITY = "geocoder"

    def __init__(
        self,
        street_index: StreetIndex,
        address_table: AddressTable,
        normalizer: Normalizer | Callable[[str], str] | None = None,
        streets_dataset_id: str = "nyc-streets",
        addresses_dataset_id: str = "addresses",
        default_borough: Optional[str] = None,
        progress: bool = False,
    ):
        self.street_resolver = StreetResolver(street_index, normalizer)
        self.address_resolver = AddressResolver(address_table)
        self.borough_normalizer = BoroughNormalizer()
        self.streets_dataset_id = streets_dataset_id
        self.addresses_dataset_id = addresses_dataset_id
        self.default_borough = default_borough
        self.progress = progress

    @classmethod
    def from_settings(
        cls,
        street_index: StreetIndex,
        address_table: AddressTable,
        settings: GeocoderSettings,
        **kwargs: Any,
    ) -> "Geocoder":
        return cls(
            street_index,
            address_table,
            streets_dataset_id=settings.streets_dataset_id,
            addresses_dataset_id=settings.addresses_dataset_id,
            default_borough=settings.default_borough,
            **kwargs,
        )

    def resolve_borough(self, borough: Optional[str] = None) -> str:
        borough = (borough or "").strip() or self.default_borough
        if not borough:
            raise BoroughNotConfigured()
        return self.borough_normalizer.normalize(borough)

    def geocode(self, address: str, borough: Optional[str] = None) -> GeocodeResult:
        """
        Geocode a single address.

        Args:
            address: Free-text address, e.g. "350 5th Ave."
            borough: Borough to search (defaults to the configured borough)

        Returns:
            GeocodeResult with a GeoJSON Feature, or the error that stopped it
        """
        effective_borough = None
        try:
            effective_borough = self._run_step("Resolve Borough", self.resolve_borough, borough)
            cleaned = self._run_step("Clean Address", clean_address, address)
            parsed = self._run_step("Parse Address", parse_address, cleaned)
            street = self._run_step(
                "Resolve Street", self.street_resolver.resolve, parsed.street, effective_borough
            )
            found = self._run_step(
                "Resolve Address",
                self.address_resolver.resolve,
                f"{parsed.number} {street.name}",
                effective_borough,
            )
        except QueryError as e:
            return GeocodeResult(input=address, borough=effective_borough, status=e.status, error=e)

        return GeocodeResult(
            input=address,
            borough=effective_borough,
            feature=self._to_feature(address, effective_borough, street, found),
        )

    __call__ = geocode

    def geocode_batch(self, addresses: Iterable[str], borough: Optional[str] = None) -> List[GeocodeResult]:
        """Geocode each address independently; failures do not stop the batch."""
        results = []
        for address in addresses:
            result = self.geocode(address, borough)
            if not result.is_success():
                logger.info(f'Could not geocode "{address}": {result.error}')
            results.append(result)
        return results

    def _to_feature(self, address: str, borough: str, street: Street, found: Address) -> dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {
                "input": address,
                "borough": borough,
                "street": {
                    **street.to_dict(),
                    "id": expand_id(self.streets_dataset_id, street.id),
                },
                "address": {
                    **found.to_dict(),
                    "id": expand_id(self.addresses_dataset_id, found.id),
                },
            },
            "geometry": found.geometry,
        }


def build_indices(
    settings: GeocoderSettings,
    normalizer: Normalizer | Callable[[str], str] | None = None,
    progress: bool = False,
) -> tuple[StreetIndex, AddressTable]:
    """
    Build the street index and the address table concurrently.

    Both builds must succeed. The first failure is re-raised and the
    other build is cancelled if it has not started yet.

    Raises:
        DatasetSourceMissing: if the dataset directory or a source file is missing
        BuildError: if either build fails
    """
    if settings.dataset_dir is None:
        raise DatasetSourceMissing(None, "dataset_dir not set in configuration")

    for path in (settings.streets_path, settings.addresses_path):
        if not path.exists():
            raise DatasetSourceMissing(path)

    normalizer = as_normalizer(normalizer)
    built: dict[str, Any] = {}

    logger.info(
        f"Building indices from {settings.streets_path} and {settings.addresses_path}"
    )
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="index-build") as executor:
        futures = {
            executor.submit(
                build_street_index, street_records(settings.streets_path, progress=progress), normalizer
            ): "streets",
            executor.submit(
                build_address_table, address_records(settings.addresses_path, progress=progress)
            ): "addresses",
        }
        try:
            for future in as_completed(futures):
                built[futures[future]] = future.result()
        except Exception as e:
            logger.error(f"Index build failed: {e}")
            for future in futures:
                future.cancel()
            raise

    return built["streets"], built["addresses"]


def initialize(
    settings: GeocoderSettings | None = None,
    normalizer: Normalizer | Callable[[str], str] | None = None,
    progress: bool = False,
    **overrides: Any,
) -> Geocoder:
    """
    Load both datasets and return a ready Geocoder.

    Args:
        settings: Configuration; built from the environment plus `overrides` if omitted
        normalizer: Street name normalizer used at build and query time
        progress: Show record read progress and pipeline steps

    Example:
        geocoder = initialize(dataset_dir='data', default_borough='Brooklyn')
    """
    settings = settings or GeocoderSettings(**overrides)
    normalizer = as_normalizer(normalizer)

    street_index, address_table = build_indices(settings, normalizer, progress=progress)
    return Geocoder.from_settings(
        street_index,
        address_table,
        settings,
        normalizer=normalizer,
        progress=progress,
    )
