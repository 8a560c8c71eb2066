"""Bucket a facility into one of the fixed capital-city groups."""

from __future__ import annotations

from rubbishtips.common.models import CityConfig, CityTable

CITY_NAME_WEIGHT = 10
STATE_CODE_WEIGHT = 5
KEYWORD_WEIGHT = 2


def score_city(city: CityConfig, search_text: str) -> int:
    """Sum keyword weights for every keyword contained in ``search_text``.

    ``search_text`` must already be lower-cased. A keyword counts once no
    matter how often it appears.
    """
    name = city.name.lower()
    state = city.state.lower()
    score = 0
    for keyword in city.keywords:
        if keyword not in search_text:
            continue
        if keyword == name:
            score += CITY_NAME_WEIGHT
        elif keyword == state:
            score += STATE_CODE_WEIGHT
        else:
            score += KEYWORD_WEIGHT
    return score


def assign_city(
    table: CityTable,
    *,
    name: str = "",
    address: str = "",
    city: str = "",
    state: str = "",
    region: str = "",
) -> str:
    search_text = f"{name} {address} {city} {state} {region}".lower()

    best_slug: str | None = None
    best_score = 0
    for candidate in table.cities:
        score = score_city(candidate, search_text)
        # Strictly greater: ties keep the city that comes first in the table.
        if score > best_score:
            best_score = score
            best_slug = candidate.slug

    if best_slug is not None:
        return best_slug
    return table.state_fallback.get(state.lower(), table.default_city)
