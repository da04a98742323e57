"""coachrank data models for coaches, locations, and ranking."""

from .base import CoachRankBaseModel, read_field, utc_now
from .coach import CoachEngagementData, CoachRecord
from .enums import LocationMatchLevel, RankingBucket, RankingStrategy
from .location import LocationData, ParsedLegacyLocation, StructuredLocation
from .ranking import (
    LocationExpansion,
    RankedCoach,
    RankedResult,
    RankingFactors,
    RankingScore,
    RankingThresholds,
    RankingWeights,
)

__all__ = [
    # Base
    "CoachRankBaseModel",
    "read_field",
    "utc_now",
    # Enums
    "LocationMatchLevel",
    "RankingBucket",
    "RankingStrategy",
    # Coach
    "CoachRecord",
    "CoachEngagementData",
    # Location
    "LocationData",
    "ParsedLegacyLocation",
    "StructuredLocation",
    # Ranking
    "RankingFactors",
    "RankedResult",
    "RankingScore",
    "RankedCoach",
    "LocationExpansion",
    "RankingThresholds",
    "RankingWeights",
]
