"""Location models for viewers and coaches (Pydantic only)."""

from pydantic import Field

from .base import CoachRankBaseModel


class LocationData(CoachRankBaseModel):
    """Detected or selected location of the person browsing coaches."""

    city: str | None = Field(None, description="City name")
    region: str | None = Field(None, description="Region / state")
    county: str | None = Field(None, description="County, used when region is missing")
    country: str | None = Field(None, description="Country name")

    def is_empty(self) -> bool:
        return not (self.city or self.region or self.country)


class ParsedLegacyLocation(CoachRankBaseModel):
    """Components parsed out of a free-text location string."""

    city: str | None = None
    region: str | None = None
    country: str | None = None
    country_code: str | None = None


class StructuredLocation(ParsedLegacyLocation):
    """Resolved location of a coach with provenance flags."""

    has_structured_data: bool = Field(
        False, description="True when taken from structured place data"
    )
    is_inferred: bool = Field(
        False, description="True when any component was parsed from legacy text"
    )
    legacy_source: str | None = Field(
        None, description="Legacy location string used for inference"
    )
