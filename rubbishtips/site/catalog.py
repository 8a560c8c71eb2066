"""Read-side lookups over the generated locations document.

This is the surface the page templates need: resolve a ``(city, location)``
pair, list a city's locations, list cities for directory and sitemap views,
and the map page's state filter and "near me" search.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pyproj import Geod

from rubbishtips.common.errors import StageError
from rubbishtips.common.fs import read_json
from rubbishtips.pipeline.coordinates import has_coordinates

DEFAULT_RADIUS_KM = 25.0
DEFAULT_NEAREST_LIMIT = 20
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_GEOD = Geod(ellps="WGS84")


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    _fwd, _back, metres = _GEOD.inv(lng1, lat1, lng2, lat2)
    return metres / 1000.0


def location_url(location: dict) -> str:
    return f"/{location['citySlug']}/{location['slug']}"


def opening_hours_by_day(hours: str | dict) -> dict[str, str]:
    """Spread a free-text hours string across every weekday.

    The converter only extracts one phrase, so each day shows the same text.
    """
    if isinstance(hours, dict):
        return dict(hours)
    return {day: hours for day in WEEKDAYS}


class LocationCatalog:
    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        self._cities: list[dict] = list(payload.get("cities", []))
        self._by_slug = {city["slug"]: city for city in self._cities}

    @classmethod
    def load(cls, path: Path) -> "LocationCatalog":
        if not path.exists():
            raise StageError(f"Locations file not found: {path}")
        return cls(read_json(path))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "LocationCatalog":
        return cls(payload)

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self.payload.get("metadata", {}))

    def cities(self) -> list[dict]:
        return list(self._cities)

    def get_city(self, city_slug: str) -> dict | None:
        return self._by_slug.get(city_slug)

    def locations_for_city(self, city_slug: str) -> list[dict]:
        city = self._by_slug.get(city_slug)
        if city is None:
            return []
        return list(city.get("locations", []))

    def all_locations(self) -> list[dict]:
        return [location for city in self._cities for location in city.get("locations", [])]

    def get_location(self, city_slug: str, location_slug: str) -> dict | None:
        # Slugs are not guaranteed unique within a city; the first one wins.
        for location in self.locations_for_city(city_slug):
            if location.get("slug") == location_slug:
                return location
        return None

    def static_params(self) -> list[dict[str, str]]:
        return [dict(pair) for pair in self.payload.get("staticParams", [])]

    def locations_in_state(self, state: str | None) -> list[dict]:
        if not state:
            return self.all_locations()
        return [location for location in self.all_locations() if location.get("state") == state]

    def nearest(
        self,
        lat: float,
        lng: float,
        *,
        radius_km: float = DEFAULT_RADIUS_KM,
        limit: int = DEFAULT_NEAREST_LIMIT,
    ) -> list[dict]:
        candidates = []
        for location in self.all_locations():
            loc_lat = location.get("latitude") or 0
            loc_lng = location.get("longitude") or 0
            if not has_coordinates(loc_lat, loc_lng):
                continue
            distance = distance_km(lat, lng, loc_lat, loc_lng)
            if distance <= radius_km:
                candidates.append({**location, "distance": distance})
        candidates.sort(key=lambda item: item["distance"])
        return candidates[:limit]

    def city_stats(self, city_slug: str) -> dict[str, int]:
        locations = self.locations_for_city(city_slug)
        return {
            "totalTips": len(locations),
            "recyclingCentres": sum(1 for loc in locations if "Recycling" in (loc.get("type") or "")),
            "transferStations": sum(1 for loc in locations if "Transfer" in (loc.get("type") or "")),
        }
