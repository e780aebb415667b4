"""
normalize.py
Turn raw backend records into Markers.

A record is kept only when every required field of its category (latitude,
longitude and, where the category has one, contact) is present and truthy.
A coordinate of exactly 0 is therefore rejected as well.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from .categories import CategoryConfig
from .store import Marker

logger = logging.getLogger(__name__)


def is_valid(record: Any, category: CategoryConfig) -> bool:
    if not isinstance(record, Mapping):
        return False
    return all(record.get(field) for field in category.required_fields)


def normalize_record(record: Any, category: CategoryConfig) -> Optional[Marker]:
    """Return the Marker for ``record``, or None when it fails the validity check."""
    if not is_valid(record, category):
        return None
    return Marker(
        geocode=(record[category.lat_field], record[category.lon_field]),
        popup=record.get(category.label_field),
        category=category.key,
        contact=record.get(category.contact_field) if category.contact_field else None,
        address=record.get(category.address_field) if category.address_field else None,
        has_contact=category.contact_field is not None,
        has_address=category.address_field is not None,
    )


def normalize_records(records: Iterable[Any], category: CategoryConfig) -> List[Marker]:
    markers: List[Marker] = []
    total = 0
    for record in records or []:
        total += 1
        marker = normalize_record(record, category)
        if marker is not None:
            markers.append(marker)
    dropped = total - len(markers)
    if dropped:
        logger.debug("Dropped %d of %d %s records missing %s", dropped, total,
                     category.key, "/".join(category.required_fields))
    return markers
