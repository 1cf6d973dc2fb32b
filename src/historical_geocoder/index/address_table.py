from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from ..models import Address
from ..normalizers import BoroughNormalizer
from ..records import RawAddressRecord
from ..utils.errors import MissingBoroughField

logger = logging.getLogger(__name__)


class AddressTable:
    """Per-borough exact-match tables keyed by composed address name."""

    def __init__(self, boroughs: Mapping[str, Mapping[str, Address]], count: int, overwritten: int = 0):
        self._boroughs = MappingProxyType({
            borough: MappingProxyType(dict(addresses)) for borough, addresses in boroughs.items()
        })
        self.count = count
        self.overwritten = overwritten

    @property
    def boroughs(self) -> Mapping[str, Mapping[str, Address]]:
        return self._boroughs

    def __contains__(self, borough: object) -> bool:
        return borough in self._boroughs

    def get(self, name: str, borough: str) -> Optional[Address]:
        addresses = self._boroughs.get(borough)
        if addresses is None:
            return None
        return addresses.get(name)


def build_address_table(records: Iterable[RawAddressRecord | Mapping[str, Any]]) -> AddressTable:
    """
    Build per-borough address tables.

    A later record with the same composed name in the same borough replaces
    the earlier one.

    Raises:
        MissingBoroughField: if any record has no borough (nothing is built)
    """
    borough_normalizer = BoroughNormalizer()
    boroughs: dict[str, dict[str, Address]] = {}
    count = 0
    overwritten = 0

    for record in records:
        if not isinstance(record, RawAddressRecord):
            record = RawAddressRecord.model_validate(record)
        count += 1

        borough = borough_normalizer.normalize(record.effective_borough)
        if not borough:
            raise MissingBoroughField(record.id, kind="address")

        addresses = boroughs.setdefault(borough, {})
        previous = addresses.get(record.name)
        if previous is not None:
            overwritten += 1
            logger.debug(f"Address '{record.name}' in {borough}: {record.id} replaces {previous.id}")

        addresses[record.name] = Address(
            id=record.id,
            name=record.name,
            valid_since=record.valid_since,
            valid_until=record.valid_until,
            geometry=record.geometry,
        )

    if overwritten:
        logger.warning(f"{overwritten} addresses replaced an earlier address with the same name")
    logger.info(f"Indexed {count} addresses")
    return AddressTable(boroughs, count, overwritten)
