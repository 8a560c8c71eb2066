"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from rubbishtips.common.errors import ConfigError
from rubbishtips.common.fs import read_yaml
from rubbishtips.common.models import CityConfig, CityTable, MaterialVocabulary
from rubbishtips.common.schema import (
    validate_cities_config,
    validate_materials_config,
    validate_pipeline_config,
)


@dataclass(frozen=True)
class ConfigBundle:
    pipeline: dict
    cities: CityTable
    materials: MaterialVocabulary

    @property
    def columns(self) -> dict[str, str]:
        return self.pipeline["columns"]

    @property
    def bbox(self) -> dict:
        return self.pipeline["validation"]["bbox_wgs84"]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def build_city_table(cfg: dict) -> CityTable:
    cities = tuple(
        CityConfig(
            slug=str(city["slug"]),
            name=str(city["name"]),
            state=str(city["state"]),
            keywords=tuple(str(keyword).lower() for keyword in city["keywords"]),
            lat=float(city["coordinates"]["lat"]),
            lng=float(city["coordinates"]["lng"]),
        )
        for city in cfg["cities"]
    )
    fallback = {str(code).lower(): str(slug) for code, slug in cfg["state_fallback"].items()}
    return CityTable(
        cities=cities,
        state_fallback=MappingProxyType(fallback),
        default_city=str(cfg["default_city"]),
    )


def build_material_vocabulary(cfg: dict) -> MaterialVocabulary:
    return MaterialVocabulary(
        keywords=tuple(str(keyword).lower() for keyword in cfg["keywords"]),
        default_material=str(cfg["default_material"]),
    )


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    def _overlay(name: str) -> Path | None:
        return (overlay_config_dir / name) if overlay_config_dir is not None else None

    pipeline = validate_pipeline_config(
        _load_yaml_with_overlay(config_dir / "pipeline.yml", _overlay("pipeline.yml")),
        allow_unknown=allow_unknown,
    )
    cities = validate_cities_config(
        _load_yaml_with_overlay(config_dir / "cities.yml", _overlay("cities.yml"))
    )
    materials = validate_materials_config(
        _load_yaml_with_overlay(config_dir / "materials.yml", _overlay("materials.yml"))
    )
    return ConfigBundle(
        pipeline=pipeline,
        cities=build_city_table(cities),
        materials=build_material_vocabulary(materials),
    )
