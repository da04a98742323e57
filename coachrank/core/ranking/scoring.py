"""Weighted coach ranking for location-aware marketplace listings.

Total score = location * 0.50 + engagement * 0.30 + profile * 0.20, each
component on a 0-100 scale. Sponsored coaches are listed first; within a
sponsorship tier coaches sort by total score, then by name.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Sequence, TypeVar

from ...observability.logger import get_logger
from ..location.utils import get_structured_location_with_fallbacks
from ..models.base import read_field, utc_now
from ..models.coach import CoachEngagementData
from ..models.enums import LocationMatchLevel
from ..models.location import LocationData
from ..models.ranking import (
    LocationExpansion,
    RankedCoach,
    RankingScore,
    RankingWeights,
)

logger = get_logger(__name__)

T = TypeVar("T")

LOCATION_SCORES: dict[LocationMatchLevel, float] = {
    LocationMatchLevel.EXACT_CITY: 100,
    LocationMatchLevel.SAME_REGION: 70,
    LocationMatchLevel.SAME_COUNTRY: 40,
    LocationMatchLevel.ONLINE_ONLY: 30,
    LocationMatchLevel.NO_MATCH: 0,
}

# Neutral scores when the viewer's location is unknown
UNKNOWN_VIEWER_ONLINE_SCORE = 60
UNKNOWN_VIEWER_SCORE = 50
ONLINE_ONLY_COUNTRY_BONUS = 5

RECENT_ACTIVITY_WINDOW = timedelta(days=30)
MIN_RESULTS_BEFORE_EXPANSION = 3

MATCH_LEVEL_DESCRIPTIONS: dict[LocationMatchLevel, str] = {
    LocationMatchLevel.EXACT_CITY: "In your city",
    LocationMatchLevel.SAME_REGION: "In your region",
    LocationMatchLevel.SAME_COUNTRY: "In your country",
    LocationMatchLevel.ONLINE_ONLY: "Available online",
    LocationMatchLevel.NO_MATCH: "All coaches",
}


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def _locations_match(a: str | None, b: str | None) -> bool:
    norm_a, norm_b = _normalize(a), _normalize(b)
    return bool(norm_a) and bool(norm_b) and norm_a == norm_b


def _as_aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def calculate_location_score(
    user_location: LocationData | None, coach: Any
) -> tuple[float, LocationMatchLevel]:
    """Score (0-100) and match level of a coach relative to the viewer.

    The coach's city, region and country are resolved from structured fields
    first and from the legacy free-text location otherwise.
    """
    online = read_field(coach, "online_available") is True

    if user_location is None or user_location.is_empty():
        if online:
            return UNKNOWN_VIEWER_ONLINE_SCORE, LocationMatchLevel.ONLINE_ONLY
        return UNKNOWN_VIEWER_SCORE, LocationMatchLevel.NO_MATCH

    location = get_structured_location_with_fallbacks(coach)

    if _locations_match(user_location.city, location.city):
        return LOCATION_SCORES[LocationMatchLevel.EXACT_CITY], LocationMatchLevel.EXACT_CITY

    user_region = user_location.region or user_location.county
    if _locations_match(user_region, location.region):
        return LOCATION_SCORES[LocationMatchLevel.SAME_REGION], LocationMatchLevel.SAME_REGION

    if _locations_match(user_location.country, location.country):
        if online and not read_field(coach, "in_person_available", True):
            score = LOCATION_SCORES[LocationMatchLevel.SAME_COUNTRY] + ONLINE_ONLY_COUNTRY_BONUS
            return score, LocationMatchLevel.ONLINE_ONLY
        return LOCATION_SCORES[LocationMatchLevel.SAME_COUNTRY], LocationMatchLevel.SAME_COUNTRY

    if online:
        return LOCATION_SCORES[LocationMatchLevel.ONLINE_ONLY], LocationMatchLevel.ONLINE_ONLY

    return LOCATION_SCORES[LocationMatchLevel.NO_MATCH], LocationMatchLevel.NO_MATCH


def calculate_engagement_score(
    engagement: CoachEngagementData | None,
    is_verified: bool = False,
    has_image: bool = False,
    now: datetime | None = None,
) -> float:
    """Engagement score (0-100).

    Scoring factors:
    - Has any reviews: +20
    - Rating >= 4.5: +20 (or >= 4.0: +10)
    - Has completed sessions: +15
    - Session in the last 30 days: +10
    - Is verified: +15
    - Has profile image: +10
    """
    score = 0

    if engagement:
        if engagement.review_count > 0:
            score += 20
            if engagement.avg_rating is not None:
                if engagement.avg_rating >= 4.5:
                    score += 20
                elif engagement.avg_rating >= 4.0:
                    score += 10

        if engagement.session_count > 0:
            score += 15

        if engagement.last_session_at:
            now = now or utc_now()
            if _as_aware(engagement.last_session_at) >= now - RECENT_ACTIVITY_WINDOW:
                score += 10

    if is_verified:
        score += 15

    if has_image:
        score += 10

    return min(score, 100)


def calculate_profile_score(coach: Any) -> float:
    """Profile completeness score (0-100).

    Checks: bio longer than 20 characters (+20), image (+20), coach types
    (+15), hourly rate (+15), location text (+15), certifications (+15).
    """
    score = 0

    bio = read_field(coach, "bio")
    if bio and len(bio.strip()) > 20:
        score += 20

    if read_field(coach, "profile_image_url") or read_field(coach, "card_image_url"):
        score += 20

    if read_field(coach, "coach_types"):
        score += 15

    hourly_rate = read_field(coach, "hourly_rate")
    if hourly_rate and hourly_rate > 0:
        score += 15

    location = read_field(coach, "location")
    if location and location.strip():
        score += 15

    certifications = read_field(coach, "certifications")
    if certifications and (not isinstance(certifications, (list, tuple)) or len(certifications) > 0):
        score += 15

    return min(score, 100)


def calculate_coach_ranking_score(
    user_location: LocationData | None,
    coach: Any,
    engagement: CoachEngagementData | None,
    is_sponsored: bool = False,
    weights: RankingWeights | None = None,
    now: datetime | None = None,
) -> RankingScore:
    """Complete weighted score with its breakdown."""
    weights = weights or RankingWeights()

    location_score, match_level = calculate_location_score(user_location, coach)
    has_image = bool(read_field(coach, "profile_image_url") or read_field(coach, "card_image_url"))
    engagement_score = calculate_engagement_score(
        engagement,
        is_verified=bool(read_field(coach, "is_verified", False)),
        has_image=has_image,
        now=now,
    )
    profile_score = calculate_profile_score(coach)

    total = (
        location_score * weights.location
        + engagement_score * weights.engagement
        + profile_score * weights.profile
    )

    return RankingScore(
        location_score=location_score,
        engagement_score=engagement_score,
        profile_score=profile_score,
        total_score=round(total, 2),
        match_level=match_level,
        is_sponsored=is_sponsored,
    )


def rank_coaches(
    coaches: Sequence[T],
    user_location: LocationData | None,
    engagement_map: Mapping[str, CoachEngagementData],
    is_sponsored: Callable[[T], bool] | None = None,
    weights: RankingWeights | None = None,
    now: datetime | None = None,
) -> list[RankedCoach[T]]:
    """Rank coaches: sponsored first, then total score, then name.

    Args:
        coaches: Coach records exposing ``id`` and ``display_name``
        user_location: Viewer location, or None when unknown
        engagement_map: Engagement aggregates keyed by coach id
        is_sponsored: Boost lookup, defaults to the record's ``is_sponsored``
        weights: Component weights
        now: Reference time for recency checks
    """
    if is_sponsored is None:
        is_sponsored = _record_is_sponsored

    ranked = [
        RankedCoach(
            coach=coach,
            ranking=calculate_coach_ranking_score(
                user_location,
                coach,
                engagement_map.get(read_field(coach, "id")),
                is_sponsored=is_sponsored(coach),
                weights=weights,
                now=now,
            ),
        )
        for coach in coaches
    ]

    ranked.sort(
        key=lambda rc: (
            not rc.ranking.is_sponsored,
            -rc.ranking.total_score,
            (read_field(rc.coach, "display_name") or "").casefold(),
        )
    )

    logger.debug("ranking_complete", strategy="weighted", candidates=len(ranked))
    return ranked


def _record_is_sponsored(coach: Any) -> bool:
    return bool(read_field(coach, "is_sponsored", False))


def _default_match_level(item: Any) -> LocationMatchLevel:
    if hasattr(item, "factors"):
        return item.factors.match_level
    return item.ranking.match_level


def filter_by_location_with_expansion(
    ranked: Sequence[T],
    min_results: int = MIN_RESULTS_BEFORE_EXPANSION,
    match_level: Callable[[T], LocationMatchLevel] | None = None,
) -> LocationExpansion[T]:
    """Keep the closest match levels that still yield ``min_results`` items.

    Levels widen from exact city to no match; the first level whose
    cumulative set is large enough wins, and the widest level always does.
    Ranked order is preserved.
    """
    match_level = match_level or _default_match_level
    levels = LocationMatchLevel.ordered()
    position = {level: index for index, level in enumerate(levels)}

    for target_index, level in enumerate(levels):
        kept = [
            item
            for item in ranked
            if position[LocationMatchLevel(match_level(item))] <= target_index
        ]
        if len(kept) >= min_results or level is LocationMatchLevel.NO_MATCH:
            if level is not LocationMatchLevel.EXACT_CITY:
                logger.debug(
                    "location_expanded",
                    match_level=level.value,
                    results=len(kept),
                    min_results=min_results,
                )
            return LocationExpansion(
                items=kept,
                effective_match_level=level,
                expanded=level is not LocationMatchLevel.EXACT_CITY,
            )

    # Fallback: return all
    return LocationExpansion(
        items=list(ranked),
        effective_match_level=LocationMatchLevel.NO_MATCH,
        expanded=True,
    )


def get_match_level_description(level: LocationMatchLevel | str) -> str:
    """Human-readable label for a match level."""
    try:
        return MATCH_LEVEL_DESCRIPTIONS[LocationMatchLevel(level)]
    except ValueError:
        return "Nearby"
