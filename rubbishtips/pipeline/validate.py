"""Validation stage: re-read the written document and report on its quality."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from rubbishtips.common.constants import HOURS_FALLBACK
from rubbishtips.common.fs import write_json
from rubbishtips.pipeline.aggregate import check_output_contract
from rubbishtips.pipeline.coordinates import valid_lat_lon, within_bbox
from rubbishtips.site.catalog import LocationCatalog


def _fill_rate(filled: int, total: int) -> float:
    return 0.0 if total == 0 else round((filled / total) * 100, 2)


def _compute_fill_rates(locations: list[dict], default_material: str) -> list[dict]:
    checks = {
        "phone": lambda loc: bool(loc.get("phone")),
        "openingHours": lambda loc: bool(loc.get("openingHours")) and loc.get("openingHours") != HOURS_FALLBACK,
        "acceptedMaterials": lambda loc: loc.get("acceptedMaterials") not in ([], [default_material], None),
        "permalink": lambda loc: bool(loc.get("permalink")),
        "region": lambda loc: bool(loc.get("region")),
    }
    total = len(locations)
    stats = []
    for column, check in checks.items():
        filled = sum(1 for loc in locations if check(loc))
        stats.append(
            {
                "column": column,
                "filled": filled,
                "null": total - filled,
                "fill_percent": _fill_rate(filled, total),
            }
        )
    return stats


def find_duplicate_slugs(catalog: LocationCatalog) -> list[dict]:
    counts = Counter(
        (city["slug"], location["slug"])
        for city in catalog.cities()
        for location in city.get("locations", [])
    )
    return [
        {"city": city, "location": slug, "count": count}
        for (city, slug), count in sorted(counts.items())
        if count > 1
    ]


def find_bbox_outliers(catalog: LocationCatalog, bbox: dict) -> list[dict]:
    outliers = []
    for location in catalog.all_locations():
        lat = location.get("latitude")
        lng = location.get("longitude")
        if not valid_lat_lon(lat, lng) or not within_bbox(lat, lng, bbox):
            outliers.append({"id": location.get("id"), "name": location.get("name"), "latitude": lat, "longitude": lng})
    return outliers


def run_validate(
    primary_path: Path,
    reports_dir: Path,
    *,
    bbox: dict,
    default_material: str,
    run_id: str,
    run_date: str,
) -> dict:
    catalog = LocationCatalog.load(primary_path)
    cities = catalog.cities()
    metadata = catalog.metadata
    check_output_contract(cities, catalog.static_params(), metadata)

    locations = catalog.all_locations()
    empty_slugs = [location.get("id") for location in locations if not location.get("slug")]
    duplicates = find_duplicate_slugs(catalog)
    outliers = find_bbox_outliers(catalog, bbox)

    warnings: list[str] = []
    if empty_slugs:
        warnings.append("EMPTY_LOCATION_SLUGS_PRESENT")
    if duplicates:
        warnings.append("DUPLICATE_LOCATION_SLUGS_PRESENT")
    if outliers:
        warnings.append("COORDINATES_OUTSIDE_BBOX")

    report_payload = {
        "run_id": run_id,
        "run_date": run_date,
        "source": metadata.get("source"),
        "counts": {
            "locations": len(locations),
            "cities": len(cities),
            "static_params": len(catalog.static_params()),
            "skipped_rows": int(metadata.get("skippedRows") or 0),
            "by_city": {city["slug"]: len(city["locations"]) for city in cities},
        },
        "facility_types": dict(sorted(Counter(loc.get("type") for loc in locations).items())),
        "fill": _compute_fill_rates(locations, default_material),
        "quality": {
            "duplicate_slugs": duplicates,
            "empty_slug_ids": empty_slugs,
            "bbox_outliers": len(outliers),
        },
        "diagnostics": {"bbox_outlier_samples": outliers[:20]},
        "warnings": warnings,
        "errors": [],
    }

    report_path = reports_dir / "validation_report.json"
    write_json(report_path, report_payload)
    return {"report_path": report_path, "warnings": warnings, "counts": report_payload["counts"]}
