"""Build unified ranking factors from coach records.

This is the caller side of the unified engine: it resolves boost state,
verification, rating and proximity for a coach so the engine itself never
looks at where those signals come from.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from pydantic import TypeAdapter

from ..models.base import read_field, utc_now
from ..models.coach import CoachEngagementData
from ..models.location import LocationData
from ..models.ranking import RankingFactors
from .scoring import calculate_location_score

_DATETIME = TypeAdapter(datetime)


def is_boost_active(coach: Any, now: datetime | None = None) -> bool:
    """A coach is boosted while sponsored or before its boost expiry."""
    if read_field(coach, "is_sponsored", False):
        return True

    expires_at = read_field(coach, "boost_expires_at")
    if expires_at is None:
        return False
    if not isinstance(expires_at, datetime):
        # ISO strings from plain mapping records
        expires_at = _DATETIME.validate_python(expires_at)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at > (now or utc_now())


def average_rating(engagement: CoachEngagementData | None) -> float:
    if engagement is None or engagement.review_count == 0 or engagement.avg_rating is None:
        return 0.0
    return engagement.avg_rating


def build_ranking_factors(
    coach: Any,
    user_location: LocationData | None,
    engagement: CoachEngagementData | None = None,
    now: datetime | None = None,
) -> RankingFactors:
    """Derive the unified ranking factors for one coach."""
    if engagement is None:
        engagement = read_field(coach, "engagement")
    if engagement is not None and not isinstance(engagement, CoachEngagementData):
        engagement = CoachEngagementData.model_validate(engagement)

    location_score, match_level = calculate_location_score(user_location, coach)

    return RankingFactors(
        is_boosted=is_boost_active(coach, now),
        is_verified=bool(read_field(coach, "is_verified", False)),
        avg_rating=average_rating(engagement),
        location_score=location_score,
        match_level=match_level,
    )


def make_factor_extractor(
    user_location: LocationData | None,
    engagement_map: Mapping[str, CoachEngagementData] | None = None,
    now: datetime | None = None,
) -> Callable[[Any], RankingFactors]:
    """Return a ``get_factors`` callable bound to one viewer and one instant.

    The instant is fixed once so every coach in a ranking call is judged
    against the same clock.
    """
    engagement_map = engagement_map or {}
    now = now or utc_now()

    def get_factors(coach: Any) -> RankingFactors:
        return build_ranking_factors(
            coach,
            user_location,
            engagement=engagement_map.get(read_field(coach, "id")),
            now=now,
        )

    return get_factors
