"""Interaction statistics entities."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TraitStats:
    """Trait-overlap counts between a candidate pet and one historical set.

    Attributes:
        total: Number of pets in the set
        species: Pets with the same species as the candidate
        size: Pets with the same size as the candidate
        age: Pets with the same age as the candidate
        interests: Pets sharing at least one interest with the candidate
    """

    total: int
    species: int = 0
    size: int = 0
    age: int = 0
    interests: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def percentage(self, count: int) -> int:
        """Share of the set, rounded half-up to the nearest integer percent."""
        if self.total == 0:
            return 0
        return math.floor(count * 100 / self.total + 0.5)

    def counts(self) -> list[tuple[str, int]]:
        """Trait counts in their fixed reporting order."""
        return [
            ("species", self.species),
            ("size", self.size),
            ("age", self.age),
            ("shared interests", self.interests),
        ]


@dataclass(frozen=True)
class InteractionStats:
    """Derived, never cached: overlap of a candidate pet with likes and dislikes."""

    liked: TraitStats
    disliked: TraitStats
    favorite_patterns: str
    dislike_patterns: str
