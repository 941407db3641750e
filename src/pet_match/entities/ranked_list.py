"""Ranked list domain entity."""

from dataclasses import dataclass, field

from pet_match.entities.pet import Pet, PetSize, Species


@dataclass(frozen=True)
class MatchFilters:
    """Optional narrowing of a ranked list for display.

    Empty tuples and a None minimum mean "no restriction".
    """

    species: tuple[Species, ...] = ()
    sizes: tuple[PetSize, ...] = ()
    min_score: float | None = None

    def accepts(self, pet: Pet) -> bool:
        if self.species and pet.species not in self.species:
            return False
        if self.sizes and pet.size not in self.sizes:
            return False
        if self.min_score is not None and (pet.match_score or 0) < self.min_score:
            return False
        return True


@dataclass(frozen=True)
class RankedList:
    """Pets ordered by descending score, ties in catalog order.

    Attributes:
        user_id: User the list was assembled for
        pets: Pets carrying the score valid at assembly time
        generated_at: Unix timestamp of assembly
        neutral: True when every score is the neutral fallback because the
            user has no usable preferences
    """

    user_id: str
    pets: tuple[Pet, ...] = field(default_factory=tuple)
    generated_at: float = 0.0
    neutral: bool = False

    def __len__(self) -> int:
        return len(self.pets)

    def score_of(self, pet_id: str) -> float | None:
        for pet in self.pets:
            if pet.id == pet_id:
                return pet.match_score
        return None

    def filter(self, filters: MatchFilters) -> "RankedList":
        """Return a list keeping only pets accepted by ``filters``, order unchanged."""
        return RankedList(
            user_id=self.user_id,
            pets=tuple(pet for pet in self.pets if filters.accepts(pet)),
            generated_at=self.generated_at,
            neutral=self.neutral,
        )
