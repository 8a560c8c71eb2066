from rubbishtips.common.models import MaterialVocabulary, RawRow
from rubbishtips.pipeline.extractors import (
    build_address,
    decode_entities,
    extract_accepted_materials,
    extract_facility_type,
    extract_opening_hours,
    extract_phone,
    generate_description,
    truncate_content,
)

VOCAB = MaterialVocabulary(
    keywords=("general waste", "green waste", "metal", "metals", "e-waste", "tyres", "mattresses"),
    default_material="General Waste",
)


def test_phone_prefers_bracketed_area_code_pattern():
    content = "Call 0412345678 or (02) 9832 1234 for bookings"
    assert extract_phone(content) == "(02) 9832 1234"


def test_phone_spaced_pattern():
    assert extract_phone("Phone: 08 9406 7777.") == "08 9406 7777"


def test_phone_ten_digit_run():
    assert extract_phone("Phone0894067777") == "0894067777"


def test_phone_international_format():
    assert extract_phone("Ring +61 2 9832 1234 today") == "+61 2 9832 1234"


def test_phone_ignores_non_ascii_digits():
    assert extract_phone("Call \u0660\u0662\u0669\u0668\u0663\u0662\u0661\u0662\u0663\u0664") == ""
    assert extract_phone("Call \uff10\uff12 \uff19\uff18\uff13\uff12 \uff11\uff12\uff13\uff14") == ""


def test_phone_allows_non_breaking_spaces():
    assert extract_phone("Call (02)\u00a09832\u00a01234") == "(02)\u00a09832\u00a01234"


def test_phone_missing_returns_empty_string():
    assert extract_phone("no numbers here") == ""
    assert extract_phone(None) == ""


def test_hours_keyword_phrase_returned_verbatim():
    content = "Open Monday to Friday 8am-5pm, Saturday 9am-1pm"
    assert extract_opening_hours(content) == content


def test_hours_collapses_whitespace():
    content = "Open   Monday to Friday\n8am-5pm, Saturday 9am-1pm"
    assert extract_opening_hours(content) == "Open Monday to Friday 8am-5pm, Saturday 9am-1pm"


def test_hours_time_range_pattern():
    assert extract_opening_hours("Gates: 7:30am to 4:30pm daily.") == "7:30am to 4:30pm"


def test_hours_too_short_match_falls_back():
    # "7am to 4pm" is exactly 10 characters, which is not long enough.
    assert extract_opening_hours("Gates 7am to 4pm.") == "Contact for hours"


def test_hours_fallback_when_nothing_matches():
    assert extract_opening_hours("Call ahead.") == "Contact for hours"
    assert extract_opening_hours("") == "Contact for hours"


def test_materials_from_pipe_column_decode_entities_and_drop_placeholders():
    raw = " Green Waste | undefined |Paint &amp; Chemicals||null| Bricks &lt;1m&gt; "
    assert extract_accepted_materials(raw, "metal", VOCAB) == (
        "Green Waste",
        "Paint & Chemicals",
        "Bricks <1m>",
    )


def test_materials_column_deduplicates_in_order():
    assert extract_accepted_materials("Metal|Glass|Metal", None, VOCAB) == ("Metal", "Glass")


def test_materials_fall_back_to_content_keywords_in_vocabulary_order():
    content = "We take old MATTRESSES, scrap metals and e-waste."
    assert extract_accepted_materials("", content, VOCAB) == ("Metal", "Metals", "E-waste", "Mattresses")


def test_materials_placeholder_only_column_uses_content():
    assert extract_accepted_materials("undefined|null", "tyres accepted", VOCAB) == ("Tyres",)


def test_materials_never_empty():
    assert extract_accepted_materials(None, None, VOCAB) == ("General Waste",)
    assert extract_accepted_materials("  ", "nothing useful", VOCAB) == ("General Waste",)


def test_decode_entities_applies_in_fixed_order():
    assert decode_entities("&amp;lt;") == "<"
    assert decode_entities("&quot;x&#39;") == "\"x'"


def test_facility_type_order_first_match_wins():
    assert extract_facility_type("Transfer Station", "a landfill") == "Transfer Station"
    assert extract_facility_type("", "Resource Recovery Centre and tip") == "Resource Recovery"
    assert extract_facility_type("Recycling Center", "") == "Recycling Centre"
    assert extract_facility_type("", "the council tip") == "Council Tip"
    assert extract_facility_type("", "Waste Management Facility") == "Waste Management"
    assert extract_facility_type("Tips", "") == "Rubbish Tip"
    assert extract_facility_type("", "landfill") == "Landfill"
    assert extract_facility_type(None, None) == "Waste Facility"


def test_build_address_skips_undefined_parts():
    row = RawRow(field_count=13, street="Wallgrove Rd", street2="undefined", city="Sydney", province="NSW", zip="2766")
    assert build_address(row) == "Wallgrove Rd, Sydney, NSW, 2766"


def test_build_address_undefined_zip_and_fallbacks():
    assert build_address(RawRow(field_count=5, city="Hobart", zip="undefined")) == "Hobart"
    assert build_address(RawRow(field_count=5, address="1 Tip Rd")) == "1 Tip Rd"
    assert build_address(RawRow(field_count=5)) == "Address not available"


def test_description_uses_long_content():
    content = "x" * 150
    assert generate_description("Tip", content, "Sydney") == content + "..."


def test_description_truncates_at_5000_chars():
    content = "y" * 6000
    assert generate_description("Tip", content, "Sydney") == "y" * 5000 + "..."


def test_description_generic_sentence_for_short_content():
    text = generate_description("Bush Dump", "short", None)
    assert text.startswith("Bush Dump is a waste disposal facility serving the Australia area.")


def test_truncate_content():
    assert truncate_content("z" * 5001) == "z" * 5000
    assert truncate_content(None) == ""


def test_hours_time_range_needs_ascii_digits():
    assert extract_opening_hours("Gates ٨am until ٥pm") == "Contact for hours"
