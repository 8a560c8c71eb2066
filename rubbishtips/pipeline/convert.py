"""Convert the CSV export into the site's locations document."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from rubbishtips.common.constants import (
    ISSUE_EMPTY_ROW,
    ISSUE_MISSING_COORDINATES,
    ISSUE_MISSING_TITLE,
    ISSUE_TOO_FEW_FIELDS,
    MIN_ROW_FIELDS,
    UNKNOWN_NAME,
)
from rubbishtips.common.config_loader import ConfigBundle
from rubbishtips.common.errors import StageError
from rubbishtips.common.http import HttpClient
from rubbishtips.common.logging import log_event
from rubbishtips.common.models import CityTable, ConversionOutput, Issue, Location, MaterialVocabulary, RawRow
from rubbishtips.common.slug import slugify
from rubbishtips.common.time_utils import utc_timestamp_iso
from rubbishtips.pipeline.aggregate import build_output
from rubbishtips.pipeline.city_assign import assign_city
from rubbishtips.pipeline.coordinates import has_coordinates, parse_coordinate
from rubbishtips.pipeline.export import OutputPaths, write_outputs
from rubbishtips.pipeline.extractors import (
    build_address,
    extract_accepted_materials,
    extract_facility_type,
    extract_opening_hours,
    extract_phone,
    generate_description,
    truncate_content,
)
from rubbishtips.pipeline.source import load_source
from rubbishtips.pipeline.tokenizer import parse_csv

ISSUE_SAMPLE_SIZE = 3


@dataclass
class RowResults:
    locations: list[Location] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)


def _rejection(values: Sequence[str], row: RawRow, lat: float, lng: float) -> tuple[str, str | None] | None:
    if len(values) < MIN_ROW_FIELDS:
        return ISSUE_TOO_FEW_FIELDS, None
    if not any(value.strip() for value in values):
        return ISSUE_EMPTY_ROW, None
    if not has_coordinates(lat, lng):
        return ISSUE_MISSING_COORDINATES, row.title or UNKNOWN_NAME
    if not (row.title or "").strip():
        return ISSUE_MISSING_TITLE, None
    return None


def build_location(row_index: int, row: RawRow, lat: float, lng: float, cities: CityTable, vocabulary: MaterialVocabulary) -> Location:
    name = (row.title or "").strip()
    address = build_address(row)
    content = row.content or ""
    city_slug = assign_city(
        cities,
        name=name,
        address=address,
        city=row.city or "",
        state=row.province or "",
        region=row.region or "",
    )
    city = cities.get(city_slug)

    return Location(
        id=row_index,
        name=name,
        slug=slugify(name),
        city_slug=city_slug,
        address=address,
        latitude=lat,
        longitude=lng,
        phone=extract_phone(content),
        city=row.city or "",
        state=row.province or "",
        type=extract_facility_type(row.categories, content),
        accepted_materials=extract_accepted_materials(row.accepted_materials, content, vocabulary),
        opening_hours=extract_opening_hours(content),
        region=row.region or "",
        permalink=row.permalink or "",
        content=truncate_content(content),
        description=generate_description(name, content, city.name if city else None),
    )


def process_rows(
    headers: Sequence[str],
    rows: Iterable[Sequence[str]],
    *,
    columns: Mapping[str, str],
    cities: CityTable,
    vocabulary: MaterialVocabulary,
) -> RowResults:
    """Turn data rows into locations, recording an ``Issue`` for each rejected row.

    ``rows`` excludes the header. Row numbers in issues are 1-based counting the
    header, so the first data row is row 2.
    """
    results = RowResults()
    for row_index, values in enumerate(rows, start=1):
        row = RawRow.from_fields(headers, values, columns)
        lat = parse_coordinate(row.lat, row.latitude)
        lng = parse_coordinate(row.lng, row.longitude)

        rejected = _rejection(values, row, lat, lng)
        if rejected is not None:
            reason, name = rejected
            results.issues.append(Issue(row=row_index + 1, issue=reason, name=name))
            continue

        results.locations.append(build_location(row_index, row, lat, lng, cities, vocabulary))
    return results


def convert_text(
    text: str,
    bundle: ConfigBundle,
    *,
    source_name: str,
    run_id: str | None = None,
    last_updated: str | None = None,
) -> tuple[ConversionOutput, list[Issue]]:
    rows = parse_csv(text)
    if len(rows) < 2:
        raise StageError("Not enough data rows found")

    headers = [header.strip() for header in rows[0]]
    results = process_rows(
        headers,
        rows[1:],
        columns=bundle.columns,
        cities=bundle.cities,
        vocabulary=bundle.materials,
    )
    output = build_output(
        results.locations,
        bundle.cities,
        source_name=source_name,
        last_updated=last_updated or utc_timestamp_iso(),
        skipped_rows=len(results.issues),
        run_id=run_id,
    )
    return output, results.issues


def run_convert(
    bundle: ConfigBundle,
    *,
    run_id: str,
    run_date: str,
    logger: logging.Logger,
    source: str | Path | None = None,
    base_dir: Path | None = None,
    http_client: HttpClient | None = None,
) -> dict:
    source = source or bundle.pipeline["input"]["csv_path"]
    log_event(logger, f"reading {source}", run_id=run_id, stage="convert", source=str(source), event="SOURCE_READ")
    source_text = load_source(source, http_client=http_client)
    log_event(
        logger,
        f"read {source_text.name} ({source_text.size_kb}KB)",
        run_id=run_id,
        stage="convert",
        source=source_text.name,
        event="SOURCE_LOADED",
        status="ok",
    )

    output, issues = convert_text(source_text.text, bundle, source_name=source_text.name, run_id=run_id)
    rows_in = output.total_locations + len(issues)

    for issue in issues:
        log_event(
            logger,
            f"row {issue.row}: {issue.name or 'N/A'} - {issue.issue}",
            level="debug",
            run_id=run_id,
            stage="convert",
            event="ROW_REJECTED",
            status="skipped",
            row=issue.row,
        )
    if issues:
        reasons = Counter(issue.issue for issue in issues)
        sample = "; ".join(f"row {issue.row}: {issue.name or 'N/A'} - {issue.issue}" for issue in issues[:ISSUE_SAMPLE_SIZE])
        log_event(
            logger,
            f"skipped {len(issues)} rows ({dict(sorted(reasons.items()))}); e.g. {sample}",
            level="warning",
            run_id=run_id,
            stage="convert",
            event="ROWS_SKIPPED",
            status="warning",
            rows_in=rows_in,
            rows_out=output.total_locations,
        )

    for group in output.cities:
        log_event(
            logger,
            f"{group.city.name}: {len(group.locations)} locations",
            run_id=run_id,
            stage="convert",
            event="CITY_DISTRIBUTION",
            city=group.city.slug,
            rows_out=len(group.locations),
        )

    paths = OutputPaths.from_config(bundle.pipeline["output"], run_date=run_date, base_dir=base_dir)
    written = write_outputs(output, issues, paths)
    log_event(
        logger,
        f"wrote {len(output.static_params)} static routes across {len(output.cities)} cities",
        run_id=run_id,
        stage="convert",
        event="OUTPUT_WRITTEN",
        status="ok",
        rows_in=rows_in,
        rows_out=output.total_locations,
    )

    return {
        "rows_in": rows_in,
        "locations": output.total_locations,
        "cities": len(output.cities),
        "issues": len(issues),
        "static_params": len(output.static_params),
        "paths": {
            "primary": str(paths.primary),
            "backup": str(paths.backup),
            "issues": str(paths.issues) if issues else None,
        },
        "written": [str(path) for path in written],
    }
