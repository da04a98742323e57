"""Coach profile and engagement models (Pydantic only)."""

from datetime import datetime

from pydantic import Field

from .base import CoachRankBaseModel


class CoachEngagementData(CoachRankBaseModel):
    """Aggregated engagement signals for one coach."""

    review_count: int = Field(0, ge=0, description="Number of reviews")
    avg_rating: float | None = Field(None, ge=0.0, le=5.0, description="Average review rating")
    session_count: int = Field(0, ge=0, description="Completed sessions")
    last_session_at: datetime | None = Field(None, description="Most recent session")


class CoachRecord(CoachRankBaseModel):
    """A coach profile as handed over by the data layer."""

    id: str = Field(..., description="Coach identifier")
    display_name: str | None = Field(None, description="Public name")

    # Profile
    bio: str | None = None
    profile_image_url: str | None = None
    card_image_url: str | None = None
    coach_types: list[str] = Field(default_factory=list)
    hourly_rate: float | None = Field(None, ge=0.0)
    certifications: list[str] | str | None = None

    # Location, structured fields take precedence over the legacy text
    location: str | None = Field(None, description="Legacy free-text location")
    location_city: str | None = None
    location_region: str | None = None
    location_country: str | None = None
    location_country_code: str | None = None
    online_available: bool = False
    in_person_available: bool = True

    # Marketplace state
    is_verified: bool = False
    is_sponsored: bool = Field(False, description="Active boost purchase")
    boost_expires_at: datetime | None = Field(None, description="End of the boost period")

    engagement: CoachEngagementData | None = None

    @property
    def has_image(self) -> bool:
        return bool(self.profile_image_url or self.card_image_url)
