"""Store document DTOs.

These Pydantic models define the contract of documents read from the
profile and catalog stores. Unrecognized enumeration values fail validation
here, at the read boundary, so they never reach a scoring request.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pet_match.entities import (
    ActivityLevel,
    AgeRange,
    ExperienceLevel,
    LivingSpace,
    Pet,
    PetSize,
    PetType,
    Preferences,
    SizePreference,
    Species,
)


class AgeRangeDocument(BaseModel):
    """Preferred age range in years."""

    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)


class BuyerPreferencesDocument(BaseModel):
    """Adopter preferences as stored on the profile."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    pet_types: list[PetType] = Field(..., alias="petTypes")
    size_preferences: list[SizePreference] = Field(..., alias="sizePreferences")
    activity_level: ActivityLevel = Field(..., alias="activityLevel")
    max_distance: float = Field(..., alias="maxDistance", ge=0)
    experience_level: ExperienceLevel = Field(..., alias="experienceLevel")
    living_space: LivingSpace = Field(..., alias="livingSpace")
    has_children: bool = Field(False, alias="hasChildren")
    has_other_pets: bool = Field(False, alias="hasOtherPets")
    age_range: AgeRangeDocument | None = Field(None, alias="ageRange")

    def to_entity(self) -> Preferences:
        return Preferences(
            pet_types=tuple(self.pet_types),
            size_preferences=tuple(self.size_preferences),
            activity_level=self.activity_level,
            max_distance=self.max_distance,
            experience_level=self.experience_level,
            living_space=self.living_space,
            has_children=self.has_children,
            has_other_pets=self.has_other_pets,
            age_range=(
                AgeRange(min=self.age_range.min, max=self.age_range.max)
                if self.age_range
                else None
            ),
        )


class ProfileDocument(BaseModel):
    """User profile document as stored by the profile store.

    Preferences are kept as a raw mapping so that a profile with invalid
    preferences can still be told apart from a missing profile.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    buyer_preferences: dict | None = Field(None, alias="buyerPreferences")
    preferences_last_updated: float | datetime | None = Field(
        None,
        alias="preferencesLastUpdated",
        description="Unix timestamp or ISO-8601 datetime of the last preference edit",
    )
    favorites: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)

    @property
    def preferences_timestamp(self) -> float | None:
        """Last preference edit as a Unix timestamp, None if never recorded."""
        value = self.preferences_last_updated
        if isinstance(value, datetime):
            return value.timestamp()
        return value


class PetDocument(BaseModel):
    """Pet record as stored by the catalog store."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    name: str
    species: Species
    breed: str = ""
    age: float = Field(..., ge=0)
    size: PetSize
    location: str = ""
    description: str = ""
    interests: list[str] = Field(default_factory=list)

    def to_entity(self) -> Pet:
        return Pet(
            id=self.id,
            name=self.name,
            species=self.species,
            breed=self.breed,
            age=self.age,
            size=self.size,
            location=self.location,
            description=self.description,
            interests=tuple(self.interests),
        )
