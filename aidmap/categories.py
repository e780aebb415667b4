"""
categories.py
Declarative table of the four marker categories.

Each CategoryConfig names the backend collection, the source field for every
uniform Marker field, and the popup layout. The fetch/normalize pipeline is
generic and driven entirely by this table.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from . import config


@dataclass(frozen=True)
class CategoryConfig:
    key: str
    collection: str
    lat_field: str
    lon_field: str
    label_field: str
    icon_url: str
    contact_field: Optional[str] = None
    address_field: Optional[str] = None
    # (marker attribute, prefix) pairs, one popup paragraph each
    popup_lines: Tuple[Tuple[str, str], ...] = (("popup", ""),)
    title: str = ""

    @property
    def required_fields(self) -> Tuple[str, ...]:
        """Fields that must be present and truthy for a record to become a Marker."""
        fields = (self.lat_field, self.lon_field)
        if self.contact_field:
            fields += (self.contact_field,)
        return fields

    @property
    def field_map(self) -> Dict[str, str]:
        """Source field name for each uniform Marker field this category carries."""
        mapping = {"popup": self.label_field}
        if self.contact_field:
            mapping["contact"] = self.contact_field
        if self.address_field:
            mapping["address"] = self.address_field
        return mapping


FOOD_SITES = CategoryConfig(
    key="food",
    collection=config.FOOD_COLLECTION,
    lat_field="LATITUDE",
    lon_field="LONGITUDE",
    label_field="PROGRAM",
    contact_field="PHONE",
    address_field="ADDRESS",
    icon_url=config.FOOD_ICON_URL,
    popup_lines=(("popup", ""), ("contact", "Contact: "), ("address", "Address: ")),
    title="food sites",
)

SHELTERS = CategoryConfig(
    key="shelters",
    collection=config.SHELTERS_COLLECTION,
    lat_field="Latitude",
    lon_field="Longitude",
    label_field="Center Name",
    icon_url=config.SHELTER_ICON_URL,
    title="shelters",
)

HEALTH_CLINICS = CategoryConfig(
    key="clinics",
    collection=config.CLINICS_COLLECTION,
    lat_field="LATITUDE",
    lon_field="LONGITUDE",
    label_field="Clinic Name",
    icon_url=config.CLINIC_ICON_URL,
    title="sex health clinics",
)

CUNY_FOOD_SITES = CategoryConfig(
    key="cuny_food",
    collection=config.CUNY_FOOD_COLLECTION,
    lat_field="Latitude",
    lon_field="Longitude",
    label_field="School",
    contact_field="phone",
    icon_url=config.CUNY_FOOD_ICON_URL,
    popup_lines=(("popup", ""), ("contact", "")),
    title="CUNY food sites",
)

# Render order: later categories are added to the cluster layer last.
CATEGORIES: Tuple[CategoryConfig, ...] = (FOOD_SITES, SHELTERS, HEALTH_CLINICS, CUNY_FOOD_SITES)


def category_by_key(key: str) -> CategoryConfig:
    for category in CATEGORIES:
        if category.key == key:
            return category
    raise KeyError(f"Unknown category: {key!r}")
