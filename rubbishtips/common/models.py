"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class RawRow:
    """One CSV data line, keyed by the columns the pipeline knows about.

    ``None`` means the column is missing from the header altogether; a column
    that exists but has no value on this line is ``""``.
    """

    field_count: int
    title: str | None = None
    lat: str | None = None
    latitude: str | None = None
    lng: str | None = None
    longitude: str | None = None
    content: str | None = None
    city: str | None = None
    province: str | None = None
    categories: str | None = None
    accepted_materials: str | None = None
    street: str | None = None
    street2: str | None = None
    zip: str | None = None
    permalink: str | None = None
    region: str | None = None
    address: str | None = None

    @classmethod
    def from_fields(
        cls,
        headers: Sequence[str],
        values: Sequence[str],
        columns: Mapping[str, str],
    ) -> "RawRow":
        by_header = {header: (values[idx] if idx < len(values) else "") for idx, header in enumerate(headers)}
        known = {f.name for f in fields(cls)} - {"field_count"}
        kwargs = {}
        for attr, header in columns.items():
            if attr in known and header in by_header:
                kwargs[attr] = by_header[header]
        return cls(field_count=len(values), **kwargs)


@dataclass(frozen=True)
class CityConfig:
    slug: str
    name: str
    state: str
    keywords: tuple[str, ...]
    lat: float
    lng: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "state": self.state,
            "keywords": list(self.keywords),
            "coordinates": {"lat": self.lat, "lng": self.lng},
        }


@dataclass(frozen=True)
class Location:
    id: int
    name: str
    slug: str
    city_slug: str
    address: str
    latitude: float
    longitude: float
    phone: str
    city: str
    state: str
    type: str
    accepted_materials: tuple[str, ...]
    opening_hours: str
    region: str
    permalink: str
    content: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "citySlug": self.city_slug,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "phone": self.phone,
            "city": self.city,
            "state": self.state,
            "type": self.type,
            "acceptedMaterials": list(self.accepted_materials),
            "openingHours": self.opening_hours,
            "region": self.region,
            "permalink": self.permalink,
            "content": self.content,
            "description": self.description,
        }


@dataclass(frozen=True)
class CityGroup:
    city: CityConfig
    locations: tuple[Location, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload = self.city.to_dict()
        payload["locations"] = [location.to_dict() for location in self.locations]
        return payload


@dataclass(frozen=True)
class Issue:
    row: int
    issue: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"row": self.row}
        if self.name is not None:
            payload["name"] = self.name
        payload["issue"] = self.issue
        return payload


@dataclass(frozen=True)
class ConversionOutput:
    cities: tuple[CityGroup, ...]
    static_params: tuple[dict[str, str], ...]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_locations(self) -> int:
        return sum(len(group.locations) for group in self.cities)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cities": [group.to_dict() for group in self.cities],
            "staticParams": [dict(pair) for pair in self.static_params],
            "metadata": dict(self.metadata),
        }


def issues_to_dicts(issues: Sequence[Issue]) -> list[dict[str, Any]]:
    return [issue.to_dict() for issue in issues]


@dataclass(frozen=True)
class CityTable:
    """The fixed set of city buckets, in tie-break order."""

    cities: tuple[CityConfig, ...]
    state_fallback: Mapping[str, str]
    default_city: str

    def slugs(self) -> tuple[str, ...]:
        return tuple(city.slug for city in self.cities)

    def get(self, slug: str) -> CityConfig | None:
        for city in self.cities:
            if city.slug == slug:
                return city
        return None


@dataclass(frozen=True)
class MaterialVocabulary:
    keywords: tuple[str, ...]
    default_material: str = "General Waste"
