"""Location helpers for coach profiles with legacy free-text fallbacks.

Coaches created before structured place data existed only carry a free-text
``location`` such as ``"London, United Kingdom"``. These helpers prefer the
structured ``location_*`` fields and infer the missing components from the
legacy text, flagging anything inferred. A coach whose country cannot be
determined is never excluded by the country filter.
"""

from typing import Any

from ..models.base import read_field
from ..models.location import ParsedLegacyLocation, StructuredLocation

# Lowercased country name / alias -> ISO 3166-1 alpha-2 code
COUNTRY_MAP: dict[str, str] = {
    # UK variations
    "united kingdom": "GB",
    "uk": "GB",
    "england": "GB",
    "scotland": "GB",
    "wales": "GB",
    "northern ireland": "GB",
    "great britain": "GB",
    # US variations
    "united states": "US",
    "usa": "US",
    "us": "US",
    "america": "US",
    # Europe
    "poland": "PL",
    "germany": "DE",
    "france": "FR",
    "spain": "ES",
    "italy": "IT",
    "netherlands": "NL",
    "belgium": "BE",
    "portugal": "PT",
    "ireland": "IE",
    "sweden": "SE",
    "norway": "NO",
    "denmark": "DK",
    "finland": "FI",
    "austria": "AT",
    "switzerland": "CH",
    "greece": "GR",
    "czech republic": "CZ",
    "czechia": "CZ",
    "hungary": "HU",
    "romania": "RO",
    "bulgaria": "BG",
    "croatia": "HR",
    "slovakia": "SK",
    "slovenia": "SI",
    "estonia": "EE",
    "latvia": "LV",
    "lithuania": "LT",
    "luxembourg": "LU",
    "malta": "MT",
    "cyprus": "CY",
    # Rest of the world
    "canada": "CA",
    "australia": "AU",
    "new zealand": "NZ",
    "japan": "JP",
    "china": "CN",
    "india": "IN",
    "brazil": "BR",
    "mexico": "MX",
    "south africa": "ZA",
    "uae": "AE",
    "united arab emirates": "AE",
    "singapore": "SG",
    "hong kong": "HK",
    "thailand": "TH",
    "malaysia": "MY",
    "indonesia": "ID",
    "philippines": "PH",
    "vietnam": "VN",
    "south korea": "KR",
    "korea": "KR",
    "taiwan": "TW",
    "russia": "RU",
    "ukraine": "UA",
    "turkey": "TR",
    "israel": "IL",
    "saudi arabia": "SA",
    "qatar": "QA",
    "kuwait": "KW",
    "egypt": "EG",
    "morocco": "MA",
    "nigeria": "NG",
    "kenya": "KE",
    "argentina": "AR",
    "chile": "CL",
    "colombia": "CO",
    "peru": "PE",
}

CODE_TO_COUNTRY: dict[str, str] = {
    "GB": "United Kingdom",
    "US": "United States",
    "PL": "Poland",
    "DE": "Germany",
    "FR": "France",
    "ES": "Spain",
    "IT": "Italy",
    "NL": "Netherlands",
    "BE": "Belgium",
    "PT": "Portugal",
    "IE": "Ireland",
    "SE": "Sweden",
    "NO": "Norway",
    "DK": "Denmark",
    "FI": "Finland",
    "AT": "Austria",
    "CH": "Switzerland",
    "GR": "Greece",
    "CZ": "Czech Republic",
    "HU": "Hungary",
    "RO": "Romania",
    "BG": "Bulgaria",
    "HR": "Croatia",
    "SK": "Slovakia",
    "SI": "Slovenia",
    "EE": "Estonia",
    "LV": "Latvia",
    "LT": "Lithuania",
    "LU": "Luxembourg",
    "MT": "Malta",
    "CY": "Cyprus",
    "CA": "Canada",
    "AU": "Australia",
    "NZ": "New Zealand",
    "JP": "Japan",
    "CN": "China",
    "IN": "India",
    "BR": "Brazil",
    "MX": "Mexico",
    "ZA": "South Africa",
    "AE": "United Arab Emirates",
    "SG": "Singapore",
    "HK": "Hong Kong",
    "TH": "Thailand",
    "MY": "Malaysia",
    "ID": "Indonesia",
    "PH": "Philippines",
    "VN": "Vietnam",
    "KR": "South Korea",
    "TW": "Taiwan",
    "RU": "Russia",
    "UA": "Ukraine",
    "TR": "Turkey",
    "IL": "Israel",
    "SA": "Saudi Arabia",
    "QA": "Qatar",
    "KW": "Kuwait",
    "EG": "Egypt",
    "MA": "Morocco",
    "NG": "Nigeria",
    "KE": "Kenya",
    "AR": "Argentina",
    "CL": "Chile",
    "CO": "Colombia",
    "PE": "Peru",
}


def parse_legacy_location(location: str | None) -> ParsedLegacyLocation:
    """Split a free-text location into city, region and country.

    Examples:
        "High Wycombe"            -> city="High Wycombe"
        "London, United Kingdom"  -> city="London", country="United Kingdom", GB
        "Leeds, Yorkshire, UK"    -> city="Leeds", region="Yorkshire", country="UK", GB
    """
    if not location or not location.strip():
        return ParsedLegacyLocation()

    parts = [part.strip() for part in location.split(",") if part.strip()]
    if not parts:
        return ParsedLegacyLocation()

    if len(parts) == 1:
        code = COUNTRY_MAP.get(parts[0].lower())
        if code:
            return ParsedLegacyLocation(country=parts[0], country_code=code)
        return ParsedLegacyLocation(city=parts[0])

    city = parts[0]
    last = parts[-1]
    country_code = COUNTRY_MAP.get(last.lower())
    country = last if country_code else None

    # Middle parts are only a region when the tail was recognised as a country
    region = ", ".join(parts[1:-1]) if len(parts) >= 3 and country else None

    return ParsedLegacyLocation(
        city=city,
        region=region,
        country=country,
        country_code=country_code,
    )


def get_display_location(coach: Any) -> str:
    """Display string preferring structured data over the legacy text."""
    city = read_field(coach, "location_city")
    if city:
        country = read_field(coach, "location_country")
        return f"{city}, {country}" if country else city

    return read_field(coach, "location") or "Location not set"


def get_country_code(coach: Any) -> str | None:
    code = read_field(coach, "location_country_code")
    if code:
        return code.upper()

    legacy = read_field(coach, "location")
    if legacy:
        return parse_legacy_location(legacy).country_code

    return None


def get_location_city(coach: Any) -> str | None:
    city = read_field(coach, "location_city")
    if city:
        return city

    legacy = read_field(coach, "location")
    return parse_legacy_location(legacy).city if legacy else None


def get_location_region(coach: Any) -> str | None:
    region = read_field(coach, "location_region")
    if region:
        return region

    legacy = read_field(coach, "location")
    return parse_legacy_location(legacy).region if legacy else None


def get_location_country(coach: Any) -> str | None:
    country = read_field(coach, "location_country")
    if country:
        return country

    code = read_field(coach, "location_country_code")
    if code:
        return CODE_TO_COUNTRY.get(code.upper())

    legacy = read_field(coach, "location")
    return parse_legacy_location(legacy).country if legacy else None


def has_structured_location(coach: Any) -> bool:
    return bool(read_field(coach, "location_city") or read_field(coach, "location_country_code"))


def get_structured_location_with_fallbacks(coach: Any) -> StructuredLocation:
    """Resolve a coach's location, marking components inferred from legacy text."""
    if has_structured_location(coach):
        code = read_field(coach, "location_country_code")
        country = read_field(coach, "location_country") or (
            CODE_TO_COUNTRY.get(code.upper()) if code else None
        )
        return StructuredLocation(
            city=read_field(coach, "location_city") or None,
            region=read_field(coach, "location_region") or None,
            country=country or None,
            country_code=code.upper() if code else None,
            has_structured_data=True,
            is_inferred=False,
        )

    legacy = read_field(coach, "location")
    parsed = parse_legacy_location(legacy)
    has_any = bool(parsed.city or parsed.region or parsed.country or parsed.country_code)

    return StructuredLocation(
        **parsed.model_dump(),
        has_structured_data=False,
        is_inferred=has_any,
        legacy_source=legacy or None,
    )


def has_inferred_location(coach: Any) -> bool:
    if has_structured_location(coach):
        return False
    parsed = parse_legacy_location(read_field(coach, "location"))
    return bool(parsed.city or parsed.country or parsed.country_code)


def matches_country_filter(coach: Any, country_code: str | None) -> bool:
    """True when the coach is in ``country_code`` or its country is unknown.

    No filter matches everything. Coaches whose country cannot be determined
    from either structured or legacy data are kept visible.
    """
    if not country_code:
        return True

    coach_code = get_country_code(coach)
    if coach_code:
        return coach_code == country_code.upper()

    return True


def get_country_name_from_code(code: str | None) -> str | None:
    if not code:
        return None
    return CODE_TO_COUNTRY.get(code.upper())


def get_country_code_from_name(name: str | None) -> str | None:
    if not name:
        return None
    return COUNTRY_MAP.get(name.lower())
