"""Unified coach ranking - bucketed priority plus a deterministic sort.

Every candidate is classified into one of eight buckets by an ordered rule
cascade, then candidates are sorted by bucket, rating, proximity and name.
Paid boosts only count for verified coaches. Location filtering happens
before this runs; the engine never drops a candidate.
"""

from collections import Counter
from typing import Any, Callable, Iterable, Sequence, TypeVar

from ...observability.logger import get_logger
from ..models.base import read_field
from ..models.enums import RankingBucket
from ..models.ranking import RankedResult, RankingFactors, RankingThresholds

logger = get_logger(__name__)

T = TypeVar("T")

# Ids shorter than this are reported as implausible by validate_invariants
MIN_PLAUSIBLE_ID_LENGTH = 8

DEFAULT_THRESHOLDS = RankingThresholds()

# (boosted, verified, high_rated, close) -> bucket, first match wins.
# None means the flag is not part of the rule.
BUCKET_RULES: tuple[tuple[tuple[bool | None, ...], RankingBucket], ...] = (
    ((True, True, True, True), RankingBucket.BOOSTED_VERIFIED_RATED_CLOSE),
    ((True, True, True, None), RankingBucket.BOOSTED_VERIFIED_RATED),
    ((True, True, None, None), RankingBucket.BOOSTED_VERIFIED),
    ((None, True, True, True), RankingBucket.VERIFIED_CLOSE_RATED),
    ((None, True, True, None), RankingBucket.VERIFIED_RATED),
    ((None, True, None, True), RankingBucket.VERIFIED_CLOSE),
    ((None, None, True, True), RankingBucket.RATED_CLOSE),
)


def classify_bucket(
    factors: RankingFactors, thresholds: RankingThresholds | None = None
) -> RankingBucket:
    """Assign the priority bucket for one candidate's factors."""
    thresholds = thresholds or DEFAULT_THRESHOLDS
    flags = (
        factors.is_boosted,
        factors.is_verified,
        factors.avg_rating >= thresholds.high_rated_threshold,
        factors.location_score >= thresholds.close_threshold,
    )

    for required, bucket in BUCKET_RULES:
        if all(want is None or have for want, have in zip(required, flags)):
            return bucket

    return RankingBucket.OTHER


def _sort_key(result: RankedResult) -> tuple[int, float, float, str]:
    name = read_field(result.candidate, "display_name") or ""
    return (
        int(result.bucket),
        -result.factors.avg_rating,
        -result.factors.location_score,
        name.casefold(),
    )


def rank(
    candidates: Iterable[T],
    get_factors: Callable[[T], RankingFactors],
    *,
    thresholds: RankingThresholds | None = None,
    validate: bool = False,
) -> list[RankedResult[T]]:
    """Rank candidates by bucket, rating, location score and name.

    Args:
        candidates: Candidate records exposing ``id`` and ``display_name``
        get_factors: Side-effect free factor extraction for one candidate
        thresholds: Rating / proximity thresholds (defaults 4.0 and 70)
        validate: Run the diagnostic id checks before ranking

    Returns:
        A new list holding every candidate exactly once. Candidates tied on
        all four keys keep their input order.
    """
    candidates = list(candidates)
    if validate:
        validate_invariants(candidates, enabled=True)

    results = []
    for candidate in candidates:
        factors = get_factors(candidate)
        results.append(
            RankedResult(
                candidate=candidate,
                factors=factors,
                bucket=classify_bucket(factors, thresholds),
            )
        )

    results.sort(key=_sort_key)

    logger.debug(
        "ranking_complete",
        strategy="unified",
        candidates=len(results),
        buckets=dict(sorted(Counter(int(r.bucket) for r in results).items())),
    )
    return results


def validate_invariants(candidates: Sequence[Any], enabled: bool = False) -> list[str]:
    """Report duplicate, empty or implausibly short candidate ids.

    Advisory only: findings are logged as warnings and returned, nothing is
    raised and the candidates are not touched. Returns an empty list without
    scanning when ``enabled`` is false.
    """
    if not enabled:
        return []

    issues: list[str] = []
    seen: Counter[str] = Counter()

    for index, candidate in enumerate(candidates):
        candidate_id = read_field(candidate, "id")
        if candidate_id is None or not str(candidate_id).strip():
            message = f"candidate at position {index} has an empty id"
            logger.warning("empty_candidate_id", position=index)
            issues.append(message)
            continue

        candidate_id = str(candidate_id)
        if len(candidate_id) < MIN_PLAUSIBLE_ID_LENGTH:
            message = f"candidate id {candidate_id!r} looks malformed (too short)"
            logger.warning("malformed_candidate_id", candidate_id=candidate_id, position=index)
            issues.append(message)

        seen[candidate_id] += 1

    for candidate_id, count in seen.items():
        if count > 1:
            message = f"candidate id {candidate_id!r} appears {count} times"
            logger.warning("duplicate_candidate_id", candidate_id=candidate_id, count=count)
            issues.append(message)

    return issues
