"""Adopter preference and profile snapshot entities."""

from dataclasses import dataclass, field
from enum import Enum


class PetType(str, Enum):
    DOG = "DOG"
    CAT = "CAT"
    BIRD = "BIRD"
    RABBIT = "RABBIT"
    FISH = "FISH"
    ANY = "ANY"


class SizePreference(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ANY = "any"


class ActivityLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    ANY = "any"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class LivingSpace(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    FARM = "farm"
    OTHER = "other"


@dataclass(frozen=True)
class AgeRange:
    """Inclusive age range in years."""

    min: float
    max: float

    def __str__(self) -> str:
        return f"{self.min:g}-{self.max:g} years"


@dataclass(frozen=True)
class Preferences:
    """Adopter's stated preferences, as validated at the profile-read boundary."""

    pet_types: tuple[PetType, ...]
    size_preferences: tuple[SizePreference, ...]
    activity_level: ActivityLevel
    max_distance: float
    experience_level: ExperienceLevel
    living_space: LivingSpace
    has_children: bool = False
    has_other_pets: bool = False
    age_range: AgeRange | None = None


@dataclass(frozen=True)
class UserSnapshot:
    """Everything the engine reads about a user for one scoring cycle.

    Attributes:
        user_id: Profile identifier
        preferences: Validated preferences
        preferences_last_updated: Unix timestamp of the last preference edit,
            or None when the profile predates timestamps
        liked_ids: Pets the user favorited
        disliked_ids: Pets the user dismissed
    """

    user_id: str
    preferences: Preferences
    preferences_last_updated: float | None
    liked_ids: frozenset[str] = field(default_factory=frozenset)
    disliked_ids: frozenset[str] = field(default_factory=frozenset)
