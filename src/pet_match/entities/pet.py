"""Pet domain entity."""

from dataclasses import dataclass, field, replace
from enum import Enum


class Species(str, Enum):
    """Species a catalog pet can have."""

    DOG = "dog"
    CAT = "cat"
    BUNNY = "bunny"
    OTHER = "other"


class PetSize(str, Enum):
    """Size class of a catalog pet."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class Pet:
    """Domain entity for an adoptable pet.

    Owned by the catalog store. The engine only ever attaches a transient
    ``match_score`` to a copy; the authoritative score lives in the score cache.

    Attributes:
        id: Catalog identifier
        name: Display name
        species: Species of the pet
        breed: Breed name (free text)
        age: Age in years
        size: Size class
        location: Free-text location (e.g. "2.5 miles away")
        description: Owner's description
        interests: Activity/interest tags
        match_score: Score in [1, 100] valid at assembly time, if any
    """

    id: str
    name: str
    species: Species
    breed: str
    age: float
    size: PetSize
    location: str = ""
    description: str = ""
    interests: tuple[str, ...] = field(default_factory=tuple)
    match_score: float | None = None

    def with_score(self, score: float) -> "Pet":
        """Return a copy of this pet carrying ``score``."""
        return replace(self, match_score=score)
