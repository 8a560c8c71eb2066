"""Heuristic field extraction from listing text.

None of these functions raise. Each one degrades to a fixed fallback when the
text gives it nothing to work with, so a row with a name and coordinates always
produces a location.
"""

from __future__ import annotations

import re

from rubbishtips.common.constants import (
    ADDRESS_FALLBACK,
    CONTENT_MAX_CHARS,
    DESCRIPTION_MIN_CONTENT_CHARS,
    FACILITY_TYPE_FALLBACK,
    HOURS_FALLBACK,
    PLACEHOLDER_VALUES,
)
from rubbishtips.common.models import MaterialVocabulary, RawRow

# Priority order: the first pattern with any match wins, even if a later
# pattern would match earlier in the text. Digits are ASCII only; whitespace
# stays Unicode-aware.
PHONE_PATTERNS = (
    re.compile(r"\([0-9]{2}\)\s*[0-9]{4}\s*[0-9]{4}"),
    re.compile(r"[0-9]{2}\s*[0-9]{4}\s*[0-9]{4}"),
    re.compile(r"[0-9]{10}"),
    re.compile(r"\+61\s*[0-9]{1}\s*[0-9]{4}\s*[0-9]{4}"),
)

HOURS_PATTERNS = (
    re.compile(r"(?:open|hours?|operating)[\s:]*([^.!?]{20,100}(?:am|pm|hours?))", re.IGNORECASE),
    re.compile(r"(?:monday|mon).*?(?:sunday|sun)[^.!?]*(?:am|pm)", re.IGNORECASE),
    re.compile(r"[0-9]{1,2}(?::[0-9]{2})?\s*(?:am|pm).*?[0-9]{1,2}(?::[0-9]{2})?\s*(?:am|pm)", re.IGNORECASE),
)
HOURS_MIN_LENGTH = 10
HOURS_MAX_LENGTH = 200

# Decoded in this order, so "&amp;lt;" ends up as "<".
HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

FACILITY_TYPE_RULES = (
    (("transfer station",), "Transfer Station"),
    (("resource recovery",), "Resource Recovery"),
    (("recycling centre", "recycling center"), "Recycling Centre"),
    (("council tip",), "Council Tip"),
    (("waste management",), "Waste Management"),
    (("tip",), "Rubbish Tip"),
    (("landfill",), "Landfill"),
)

_WHITESPACE_RE = re.compile(r"\s+")


def extract_phone(content: str | None) -> str:
    if not content:
        return ""
    for pattern in PHONE_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(0).strip()
    return ""


def extract_opening_hours(content: str | None) -> str:
    if not content:
        return HOURS_FALLBACK

    text = _WHITESPACE_RE.sub(" ", content)
    for pattern in HOURS_PATTERNS:
        match = pattern.search(text)
        # Only the first hit of each pattern is considered.
        if match and HOURS_MIN_LENGTH < len(match.group(0)) < HOURS_MAX_LENGTH:
            return match.group(0).strip()
    return HOURS_FALLBACK


def decode_entities(value: str) -> str:
    for entity, char in HTML_ENTITIES:
        value = value.replace(entity, char)
    return value


def _title_words(keyword: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in keyword.split(" "))


def _materials_from_column(raw: str) -> list[str]:
    materials = []
    for part in raw.split("|"):
        part = part.strip()
        if not part or part in PLACEHOLDER_VALUES:
            continue
        materials.append(decode_entities(part).strip())
    return materials


def _materials_from_content(content: str, keywords: tuple[str, ...]) -> list[str]:
    lowered = content.lower()
    return [_title_words(keyword) for keyword in keywords if keyword in lowered]


def extract_accepted_materials(
    materials: str | None,
    content: str | None,
    vocabulary: MaterialVocabulary,
) -> tuple[str, ...]:
    """Materials from the pipe-delimited column, else keywords found in the content.

    Never empty: falls back to the vocabulary's default material.
    """
    found: list[str] = []
    if materials and materials.strip():
        found = _materials_from_column(materials)
    if not found and content:
        found = _materials_from_content(content, vocabulary.keywords)

    unique = tuple(dict.fromkeys(found))
    return unique or (vocabulary.default_material,)


def extract_facility_type(categories: str | None, content: str | None) -> str:
    text = f"{categories or ''} {content or ''}".lower()
    for needles, facility_type in FACILITY_TYPE_RULES:
        if any(needle in text for needle in needles):
            return facility_type
    return FACILITY_TYPE_FALLBACK


def build_address(row: RawRow) -> str:
    parts = []
    if row.street:
        parts.append(row.street)
    if row.street2 and row.street2 != "undefined":
        parts.append(row.street2)
    if row.city:
        parts.append(row.city)
    if row.province:
        parts.append(row.province)
    if row.zip and row.zip != "undefined":
        parts.append(row.zip)
    return ", ".join(parts) or row.address or ADDRESS_FALLBACK


def truncate_content(content: str | None) -> str:
    return (content or "")[:CONTENT_MAX_CHARS]


def generate_description(name: str, content: str | None, city_name: str | None) -> str:
    if content and len(content) > DESCRIPTION_MIN_CONTENT_CHARS:
        return content[:CONTENT_MAX_CHARS] + "..."

    city = city_name or "Australia"
    return (
        f"{name} is a waste disposal facility serving the {city} area. "
        "Contact the facility for specific details about accepted materials, "
        "opening hours, and disposal fees."
    )
