"""Group locations into city buckets and build the static route manifest."""

from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

from rubbishtips.common.errors import ContractError
from rubbishtips.common.models import CityGroup, CityTable, ConversionOutput, Location


def group_by_city(locations: Iterable[Location], table: CityTable) -> tuple[CityGroup, ...]:
    """Bucket locations by ``city_slug`` in table order, keeping input order inside each city.

    Cities with no locations are dropped.
    """
    buckets: dict[str, list[Location]] = {city.slug: [] for city in table.cities}
    for location in locations:
        if location.city_slug not in buckets:
            raise ContractError(f"Location {location.id} assigned to unknown city {location.city_slug!r}")
        buckets[location.city_slug].append(location)

    return tuple(
        CityGroup(city=city, locations=tuple(buckets[city.slug]))
        for city in table.cities
        if buckets[city.slug]
    )


def build_static_params(groups: Iterable[CityGroup]) -> tuple[dict[str, str], ...]:
    return tuple(
        {"city": group.city.slug, "location": location.slug}
        for group in groups
        for location in group.locations
    )


def check_output_contract(cities: list[dict], static_params: list[dict], metadata: dict) -> None:
    """Raise ``ContractError`` unless groups, manifest and totals agree.

    Works on the serialised shape so it can also check a document read back
    from disk.
    """
    grouped = Counter(
        (city["slug"], location["slug"])
        for city in cities
        for location in city.get("locations", [])
    )
    manifest = Counter((pair["city"], pair["location"]) for pair in static_params)
    if grouped != manifest:
        missing = sorted((grouped - manifest).elements())
        extra = sorted((manifest - grouped).elements())
        raise ContractError(f"staticParams mismatch: missing={missing[:5]} extra={extra[:5]}")

    empty = [city["slug"] for city in cities if not city.get("locations")]
    if empty:
        raise ContractError(f"Empty city groups in output: {', '.join(empty)}")

    total = sum(len(city["locations"]) for city in cities)
    if metadata.get("totalLocations") != total:
        raise ContractError(f"metadata.totalLocations={metadata.get('totalLocations')} but groups hold {total}")
    if metadata.get("totalCities") != len(cities):
        raise ContractError(f"metadata.totalCities={metadata.get('totalCities')} but output has {len(cities)}")


def build_output(
    locations: list[Location],
    table: CityTable,
    *,
    source_name: str,
    last_updated: str,
    skipped_rows: int = 0,
    run_id: str | None = None,
) -> ConversionOutput:
    groups = group_by_city(locations, table)
    static_params = build_static_params(groups)
    metadata: dict[str, Any] = {
        "totalLocations": sum(len(group.locations) for group in groups),
        "totalCities": len(groups),
        "lastUpdated": last_updated,
        "source": source_name,
        "skippedRows": skipped_rows,
    }
    if run_id is not None:
        metadata["runId"] = run_id
    output = ConversionOutput(cities=groups, static_params=static_params, metadata=metadata)

    payload = output.to_dict()
    check_output_contract(payload["cities"], payload["staticParams"], payload["metadata"])
    return output
