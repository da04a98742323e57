"""Ranking factors, results and tunable settings (Pydantic only)."""

from typing import Any, Generic, TypeVar

from pydantic import Field, model_validator

from .base import CoachRankBaseModel
from .enums import LocationMatchLevel, RankingBucket

# Type variable for the caller's candidate record
T = TypeVar("T")


# =============================================================================
# Settings
# =============================================================================


class RankingWeights(CoachRankBaseModel):
    """Component weights of the weighted total score."""

    location: float = Field(0.5, ge=0.0, le=1.0)
    engagement: float = Field(0.3, ge=0.0, le=1.0)
    profile: float = Field(0.2, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _weights_sum_to_one(self) -> "RankingWeights":
        total = self.location + self.engagement + self.profile
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"ranking weights must sum to 1.0, got {total:.3f}")
        return self


class RankingThresholds(CoachRankBaseModel):
    """Tunable constants used by the ranking engines."""

    high_rated_threshold: float = Field(
        4.0, ge=0.0, le=5.0, description="avg_rating at or above this is high-rated"
    )
    close_threshold: float = Field(
        70.0, ge=0.0, description="location_score at or above this is close (same region)"
    )
    validate_invariants: bool = Field(
        False, description="Emit duplicate / malformed id warnings"
    )
    min_results_before_expansion: int = Field(3, ge=1)
    weights: RankingWeights = Field(default_factory=RankingWeights)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "RankingThresholds":
        """Build thresholds from the ``ranking`` section of a loaded config."""
        return cls(**(config.get("ranking") or {}))


# =============================================================================
# Unified ranking
# =============================================================================


class RankingFactors(CoachRankBaseModel):
    """Per-candidate inputs to bucket classification and sorting."""

    is_boosted: bool = Field(False, description="Has active paid priority placement")
    is_verified: bool = Field(False, description="Passed verification")
    # Sort keys, finite only
    avg_rating: float = Field(
        0.0, allow_inf_nan=False, description="Average rating, 0 when unrated"
    )
    location_score: float = Field(
        0.0, allow_inf_nan=False, description="Proximity, higher is closer"
    )
    match_level: LocationMatchLevel = Field(
        LocationMatchLevel.NO_MATCH,
        validate_default=True,
        description="Kind of location match (not ranked on)",
    )


class RankedResult(CoachRankBaseModel, Generic[T]):
    """A candidate with the factors and bucket it was ranked by."""

    candidate: T = Field(..., description="Caller's candidate record, unchanged")
    factors: RankingFactors
    bucket: RankingBucket


# =============================================================================
# Weighted ranking
# =============================================================================


class RankingScore(CoachRankBaseModel):
    """Breakdown of the weighted score for one coach."""

    location_score: float = Field(..., ge=0.0, le=100.0)
    engagement_score: float = Field(..., ge=0.0, le=100.0)
    profile_score: float = Field(..., ge=0.0, le=100.0)
    total_score: float = Field(..., ge=0.0, le=100.0)
    match_level: LocationMatchLevel
    is_sponsored: bool = False


class RankedCoach(CoachRankBaseModel, Generic[T]):
    """A coach with its weighted ranking score."""

    coach: T
    ranking: RankingScore


class LocationExpansion(CoachRankBaseModel, Generic[T]):
    """Outcome of widening the location match level."""

    items: list[T] = Field(default_factory=list)
    effective_match_level: LocationMatchLevel
    expanded: bool
