"""Checks for weighted coach scoring and location expansion."""

from datetime import datetime, timedelta, timezone

import pytest

from coachrank.core.models.coach import CoachEngagementData, CoachRecord
from coachrank.core.models.enums import LocationMatchLevel
from coachrank.core.models.location import LocationData
from coachrank.core.models.ranking import RankedResult, RankingFactors
from coachrank.core.ranking.scoring import (
    calculate_coach_ranking_score,
    calculate_engagement_score,
    calculate_location_score,
    calculate_profile_score,
    filter_by_location_with_expansion,
    get_match_level_description,
    rank_coaches,
)

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
LONDON = LocationData(city="London", region="Greater London", country="United Kingdom")


def _coach(coach_id, **kwargs):
    return CoachRecord(id=coach_id, **kwargs)


@pytest.mark.parametrize(
    "coach_kwargs, expected",
    [
        (dict(location_city="london", location_country_code="GB"), (100, "exact_city")),
        (
            dict(location_city="Croydon", location_region="Greater London", location_country_code="GB"),
            (70, "same_region"),
        ),
        (dict(location_city="Leeds", location_country="United Kingdom"), (40, "same_country")),
        (
            dict(
                location_city="Leeds",
                location_country="United Kingdom",
                online_available=True,
                in_person_available=False,
            ),
            (45, "online_only"),
        ),
        (dict(location_city="Paris", location_country="France", online_available=True), (30, "online_only")),
        (dict(location_city="Paris", location_country="France"), (0, "no_match")),
        (dict(location="London, United Kingdom"), (100, "exact_city")),
    ],
)
def test_location_score_levels(coach_kwargs, expected):
    score, level = calculate_location_score(LONDON, _coach("coach-1", **coach_kwargs))
    assert (score, level) == expected


def test_location_score_without_viewer_location():
    online = _coach("coach-1", online_available=True)
    offline = _coach("coach-2")

    assert calculate_location_score(None, online) == (60, LocationMatchLevel.ONLINE_ONLY)
    assert calculate_location_score(LocationData(), offline) == (50, LocationMatchLevel.NO_MATCH)


def test_county_stands_in_for_region():
    viewer = LocationData(city="Wycombe", county="Buckinghamshire")
    coach = _coach("coach-1", location_city="Marlow", location_region="buckinghamshire ")
    assert calculate_location_score(viewer, coach)[1] == LocationMatchLevel.SAME_REGION


def test_engagement_score_components():
    engagement = CoachEngagementData(
        review_count=3,
        avg_rating=4.6,
        session_count=10,
        last_session_at=NOW - timedelta(days=3),
    )
    assert calculate_engagement_score(engagement, now=NOW) == 65
    assert calculate_engagement_score(engagement, is_verified=True, has_image=True, now=NOW) == 90

    stale = engagement.model_copy(update={"last_session_at": NOW - timedelta(days=45), "avg_rating": 4.1})
    assert calculate_engagement_score(stale, now=NOW) == 45

    assert calculate_engagement_score(None, is_verified=True) == 15


def test_engagement_rating_ignored_without_reviews():
    engagement = CoachEngagementData(review_count=0, avg_rating=5.0)
    assert calculate_engagement_score(engagement, now=NOW) == 0


def test_profile_score():
    complete = _coach(
        "coach-1",
        bio="Strength coach with ten years of experience.",
        profile_image_url="https://img.example/a.png",
        coach_types=["strength"],
        hourly_rate=45,
        location="Leeds",
        certifications=["REPs L3"],
    )
    assert calculate_profile_score(complete) == 100
    assert calculate_profile_score(_coach("coach-2", bio="short bio")) == 0
    assert calculate_profile_score(_coach("coach-3", certifications=[])) == 0


def test_total_score_uses_weights():
    coach = _coach("coach-1", location_city="London", is_verified=True)

    score = calculate_coach_ranking_score(LONDON, coach, None, now=NOW)

    # 100 * 0.5 + 15 * 0.3 + 0 * 0.2
    assert score.total_score == 54.5
    assert score.match_level == LocationMatchLevel.EXACT_CITY


def test_rank_coaches_sponsored_first_then_score_then_name():
    near = _coach("coach-1", display_name="zoe", location_city="London")
    near_b = _coach("coach-2", display_name="Adam", location_city="London")
    sponsored_far = _coach("coach-3", display_name="Mia", location_city="Paris", is_sponsored=True)

    ranked = rank_coaches([near, near_b, sponsored_far], LONDON, {}, now=NOW)

    assert [rc.coach.id for rc in ranked] == ["coach-3", "coach-2", "coach-1"]


def test_rank_coaches_uses_engagement_map_and_custom_sponsorship():
    a = _coach("coach-1", display_name="A")
    b = _coach("coach-2", display_name="B")
    engagement = {"coach-2": CoachEngagementData(review_count=5, avg_rating=4.9)}

    ranked = rank_coaches([a, b], None, engagement, now=NOW)
    assert ranked[0].coach is b

    ranked = rank_coaches([a, b], None, engagement, is_sponsored=lambda c: c.id == "coach-1", now=NOW)
    assert ranked[0].coach is a


def _unified(level):
    factors = RankingFactors(match_level=level)
    return RankedResult(candidate={"id": level}, factors=factors, bucket=8)


def test_expansion_stays_local_when_enough_results():
    items = [_unified("exact_city")] * 3 + [_unified("same_country")]

    expansion = filter_by_location_with_expansion(items, min_results=3)

    assert len(expansion.items) == 3
    assert expansion.effective_match_level == LocationMatchLevel.EXACT_CITY
    assert expansion.expanded is False


def test_expansion_widens_until_minimum():
    items = [
        _unified("same_country"),
        _unified("exact_city"),
        _unified("no_match"),
        _unified("same_region"),
    ]

    expansion = filter_by_location_with_expansion(items, min_results=3)

    assert expansion.effective_match_level == LocationMatchLevel.SAME_COUNTRY
    assert expansion.expanded is True
    assert [i.factors.match_level for i in expansion.items] == [
        "same_country",
        "exact_city",
        "same_region",
    ]


def test_expansion_falls_back_to_everything():
    items = [_unified("online_only")]

    expansion = filter_by_location_with_expansion(items, min_results=5)

    assert expansion.items == items
    assert expansion.effective_match_level == LocationMatchLevel.NO_MATCH


def test_expansion_on_weighted_results():
    coaches = [
        _coach("coach-1", location_city="London"),
        _coach("coach-2", location_city="Paris"),
    ]
    ranked = rank_coaches(coaches, LONDON, {}, now=NOW)

    expansion = filter_by_location_with_expansion(ranked, min_results=1)

    assert [rc.coach.id for rc in expansion.items] == ["coach-1"]


def test_match_level_descriptions():
    assert get_match_level_description(LocationMatchLevel.EXACT_CITY) == "In your city"
    assert get_match_level_description("no_match") == "All coaches"
    assert get_match_level_description("somewhere") == "Nearby"
