"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from rubbishtips.common.errors import ConfigError
from rubbishtips.common.models import RawRow


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_pipeline_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top = {"input", "output", "columns", "validation"}
    _assert_required_keys(cfg, top, "pipeline config")
    _assert_no_unknown_keys(cfg, top, "pipeline config", allow_unknown)

    _assert_required_keys(cfg["input"], {"csv_path"}, "input")
    _assert_required_keys(
        cfg["output"],
        {"primary_path", "backup_dir", "backup_filename", "issues_path", "reports_dir"},
        "output",
    )
    if "{run_date}" not in str(cfg["output"]["backup_filename"]):
        raise ConfigError("output.backup_filename must contain {run_date}")

    columns = cfg["columns"]
    _assert_required_keys(columns, {"title", "content"}, "columns")
    known_columns = set(RawRow.__dataclass_fields__) - {"field_count"}
    _assert_no_unknown_keys(columns, known_columns, "columns", allow_unknown)
    if not (("lat" in columns or "latitude" in columns) and ("lng" in columns or "longitude" in columns)):
        raise ConfigError("columns must map lat/latitude and lng/longitude")

    _assert_required_keys(cfg["validation"], {"bbox_wgs84"}, "validation")
    _assert_required_keys(
        cfg["validation"]["bbox_wgs84"],
        {"min_lat", "max_lat", "min_lon", "max_lon"},
        "validation.bbox_wgs84",
    )
    return cfg


def validate_cities_config(cfg: dict) -> dict:
    _assert_required_keys(cfg, {"cities", "state_fallback", "default_city"}, "cities config")
    if not isinstance(cfg["cities"], list) or not cfg["cities"]:
        raise ConfigError("cities must be a non-empty list")

    slugs: list[str] = []
    for idx, city in enumerate(cfg["cities"]):
        _assert_required_keys(city, {"slug", "name", "state", "keywords", "coordinates"}, f"cities[{idx}]")
        _assert_required_keys(city["coordinates"], {"lat", "lng"}, f"cities[{idx}].coordinates")
        if not isinstance(city["keywords"], list):
            raise ConfigError(f"cities[{idx}].keywords must be a list")
        slugs.append(city["slug"])

    dupes = {slug for slug in slugs if slugs.count(slug) > 1}
    if dupes:
        raise ConfigError(f"Duplicate city slugs: {', '.join(sorted(dupes))}")

    _assert_mapping(cfg["state_fallback"], "state_fallback")
    unknown_targets = set(cfg["state_fallback"].values()) - set(slugs)
    if unknown_targets:
        raise ConfigError(f"state_fallback points at unknown cities: {', '.join(sorted(unknown_targets))}")
    if cfg["default_city"] not in slugs:
        raise ConfigError(f"default_city is not a configured city: {cfg['default_city']}")
    return cfg


def validate_materials_config(cfg: dict) -> dict:
    _assert_required_keys(cfg, {"keywords", "default_material"}, "materials config")
    if not isinstance(cfg["keywords"], list) or not cfg["keywords"]:
        raise ConfigError("materials.keywords must be a non-empty list")
    if not str(cfg["default_material"]).strip():
        raise ConfigError("materials.default_material must not be blank")
    return cfg
