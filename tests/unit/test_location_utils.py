"""Checks for legacy location parsing and country filtering."""

from coachrank.core.location.utils import (
    get_country_code,
    get_country_code_from_name,
    get_country_name_from_code,
    get_display_location,
    get_location_city,
    get_location_country,
    get_location_region,
    get_structured_location_with_fallbacks,
    has_inferred_location,
    has_structured_location,
    matches_country_filter,
    parse_legacy_location,
)
from coachrank.core.models.coach import CoachRecord


def test_parse_single_part_city_or_country():
    assert parse_legacy_location("High Wycombe").city == "High Wycombe"

    poland = parse_legacy_location("Poland")
    assert poland.city is None
    assert poland.country == "Poland"
    assert poland.country_code == "PL"


def test_parse_city_and_country():
    parsed = parse_legacy_location("London, United Kingdom")
    assert parsed.city == "London"
    assert parsed.country == "United Kingdom"
    assert parsed.country_code == "GB"
    assert parsed.region is None


def test_parse_region_only_when_country_recognised():
    parsed = parse_legacy_location("Leeds, West Yorkshire, England")
    assert parsed.region == "West Yorkshire"
    assert parsed.country_code == "GB"

    unknown = parse_legacy_location("Springfield, Somewhere, Atlantis")
    assert unknown.city == "Springfield"
    assert unknown.region is None
    assert unknown.country is None


def test_parse_blank_input():
    for value in (None, "", "   ", ", ,"):
        parsed = parse_legacy_location(value)
        assert parsed.city is None and parsed.country_code is None


def test_structured_fields_win_over_legacy_text():
    coach = CoachRecord(
        id="coach-1",
        location="Old Town, Poland",
        location_city="Berlin",
        location_country_code="de",
    )

    resolved = get_structured_location_with_fallbacks(coach)

    assert resolved.city == "Berlin"
    assert resolved.country == "Germany"
    assert resolved.country_code == "DE"
    assert resolved.has_structured_data is True
    assert resolved.is_inferred is False
    assert has_structured_location(coach)
    assert not has_inferred_location(coach)
    assert get_country_code(coach) == "DE"
    assert get_location_country(coach) == "Germany"


def test_legacy_fallbacks_are_marked_inferred():
    coach = {"id": "coach-2", "location": "Rzeszow, Podkarpackie, Poland"}

    resolved = get_structured_location_with_fallbacks(coach)

    assert resolved.is_inferred is True
    assert resolved.legacy_source == "Rzeszow, Podkarpackie, Poland"
    assert get_location_city(coach) == "Rzeszow"
    assert get_location_region(coach) == "Podkarpackie"
    assert get_location_country(coach) == "Poland"
    assert has_inferred_location(coach)


def test_display_location():
    assert get_display_location({"location_city": "Leeds", "location_country": "UK"}) == "Leeds, UK"
    assert get_display_location({"location_city": "Leeds"}) == "Leeds"
    assert get_display_location({"location": "somewhere nice"}) == "somewhere nice"
    assert get_display_location({}) == "Location not set"


def test_country_filter_keeps_unknown_countries():
    in_gb = {"location_country_code": "gb"}
    in_pl = {"location": "Krakow, Poland"}
    unknown = {"location": "Up the hill"}

    assert matches_country_filter(in_gb, "GB")
    assert not matches_country_filter(in_pl, "gb")
    assert matches_country_filter(unknown, "GB")
    assert matches_country_filter(in_pl, None)


def test_country_lookups():
    assert get_country_name_from_code("ae") == "United Arab Emirates"
    assert get_country_name_from_code("ZZ") is None
    assert get_country_name_from_code(None) is None
    assert get_country_code_from_name("Czechia") == "CZ"
    assert get_country_code_from_name("") is None
