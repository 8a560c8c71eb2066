from pathlib import Path

import pytest

from rubbishtips.common.config_loader import load_all_configs
from rubbishtips.common.models import CityConfig, CityTable
from rubbishtips.pipeline.city_assign import assign_city, score_city


@pytest.fixture(scope="module")
def cities() -> CityTable:
    return load_all_configs(Path("config")).cities


def _city(slug: str, name: str, state: str, keywords: tuple[str, ...]) -> CityConfig:
    return CityConfig(slug=slug, name=name, state=state, keywords=keywords, lat=0.0, lng=0.0)


def test_score_weights_name_state_and_other_keywords():
    city = _city("sydney", "Sydney", "NSW", ("sydney", "nsw", "penrith"))
    assert score_city(city, "penrith tip sydney nsw") == 17
    assert score_city(city, "sydney sydney sydney") == 10
    assert score_city(city, "brisbane") == 0


def test_assign_city_by_name_and_state(cities):
    slug = assign_city(
        cities,
        name="Eastern Creek Tip",
        address="Wallgrove Rd, Sydney, NSW, 2766",
        city="Sydney",
        state="NSW",
        region="Western Sydney",
    )
    assert slug == "sydney"


def test_assign_city_by_suburb_keyword(cities):
    assert assign_city(cities, name="Geelong Resource Recovery", address="Geelong") == "melbourne"


def test_assign_city_is_case_insensitive(cities):
    assert assign_city(cities, name="HOBART CITY TIP") == "hobart"


def test_assign_city_defaults_to_sydney_when_nothing_matches(cities):
    assert assign_city(cities, name="Bush Dump", address="Yulara", city="Yulara") == "sydney"


def test_assign_city_state_fallback_when_no_keyword_scores():
    table = CityTable(
        cities=(_city("perth", "Perth", "WA", ("perth",)), _city("darwin", "Darwin", "NT", ("darwin",))),
        state_fallback={"nt": "darwin", "wa": "perth"},
        default_city="perth",
    )
    assert assign_city(table, name="Remote Dump", state="NT") == "darwin"
    assert assign_city(table, name="Remote Dump", state="XX") == "perth"


def test_assign_city_tie_keeps_first_city_in_table():
    table = CityTable(
        cities=(_city("first", "First", "AA", ("shared",)), _city("second", "Second", "BB", ("shared",))),
        state_fallback={},
        default_city="second",
    )
    assert assign_city(table, name="shared depot") == "first"


def test_assign_city_is_deterministic(cities):
    kwargs = dict(name="Ipswich Landfill", address="Riverview", city="Ipswich", state="QLD", region="")
    assert assign_city(cities, **kwargs) == assign_city(cities, **kwargs) == "brisbane"


def test_city_table_order_comes_from_config(cities):
    assert cities.slugs() == (
        "sydney",
        "melbourne",
        "brisbane",
        "perth",
        "adelaide",
        "hobart",
        "canberra",
        "darwin",
    )
