"""Enumeration types for coachrank models."""

from enum import Enum, IntEnum


class LocationMatchLevel(str, Enum):
    """How a coach's location relates to the viewer's, closest first."""

    EXACT_CITY = "exact_city"
    SAME_REGION = "same_region"
    SAME_COUNTRY = "same_country"
    ONLINE_ONLY = "online_only"
    NO_MATCH = "no_match"

    @classmethod
    def ordered(cls) -> list["LocationMatchLevel"]:
        """Levels from narrowest to widest."""
        return list(cls)


class RankingBucket(IntEnum):
    """Priority tier from the unified ranking cascade (1 = highest)."""

    BOOSTED_VERIFIED_RATED_CLOSE = 1
    BOOSTED_VERIFIED_RATED = 2
    BOOSTED_VERIFIED = 3
    VERIFIED_CLOSE_RATED = 4
    VERIFIED_RATED = 5
    VERIFIED_CLOSE = 6
    RATED_CLOSE = 7
    OTHER = 8


class RankingStrategy(str, Enum):
    """Ranking algorithms exposed by the CLI."""

    UNIFIED = "unified"
    WEIGHTED = "weighted"
