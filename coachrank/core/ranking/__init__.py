"""Coach ranking engines: unified bucketed ranking and weighted scoring."""

from .factors import build_ranking_factors, is_boost_active, make_factor_extractor
from .scoring import (
    calculate_coach_ranking_score,
    calculate_engagement_score,
    calculate_location_score,
    calculate_profile_score,
    filter_by_location_with_expansion,
    get_match_level_description,
    rank_coaches,
)
from .unified import classify_bucket, rank, validate_invariants

__all__ = [
    # Unified
    "classify_bucket",
    "rank",
    "validate_invariants",
    # Factors
    "build_ranking_factors",
    "make_factor_extractor",
    "is_boost_active",
    # Weighted
    "calculate_location_score",
    "calculate_engagement_score",
    "calculate_profile_score",
    "calculate_coach_ranking_score",
    "rank_coaches",
    "filter_by_location_with_expansion",
    "get_match_level_description",
]
