"""Coach location parsing and filtering."""

from .utils import (
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

__all__ = [
    "parse_legacy_location",
    "get_display_location",
    "get_country_code",
    "get_location_city",
    "get_location_region",
    "get_location_country",
    "get_structured_location_with_fallbacks",
    "has_structured_location",
    "has_inferred_location",
    "matches_country_filter",
    "get_country_name_from_code",
    "get_country_code_from_name",
]
