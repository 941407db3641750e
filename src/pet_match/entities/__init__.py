"""Domain entities for internal representation.

These are pure dataclasses (frozen) and enums used internally by services
and repositories. They are NOT used for API or store contracts - use DTOs
from the dto package for that.
"""

from .interaction_stats import InteractionStats, TraitStats
from .pet import Pet, PetSize, Species
from .preferences import (
    ActivityLevel,
    AgeRange,
    ExperienceLevel,
    LivingSpace,
    Preferences,
    PetType,
    SizePreference,
    UserSnapshot,
)
from .ranked_list import MatchFilters, RankedList
from .score_entry import MAX_SCORE, MIN_SCORE, NEUTRAL_SCORE, ScoreEntry, ScoreOutcome, clamp_score

__all__ = [
    "Pet",
    "PetSize",
    "Species",
    "ActivityLevel",
    "AgeRange",
    "ExperienceLevel",
    "LivingSpace",
    "Preferences",
    "PetType",
    "SizePreference",
    "UserSnapshot",
    "InteractionStats",
    "TraitStats",
    "ScoreEntry",
    "ScoreOutcome",
    "RankedList",
    "MatchFilters",
    "MIN_SCORE",
    "MAX_SCORE",
    "NEUTRAL_SCORE",
    "clamp_score",
]
