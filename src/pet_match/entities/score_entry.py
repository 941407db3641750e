"""Score cache entry and scoring outcome entities."""

from dataclasses import dataclass

from pet_match.errors import ScoringError

MIN_SCORE = 1.0
MAX_SCORE = 100.0
NEUTRAL_SCORE = 50.0


def clamp_score(score: float) -> float:
    """Clamp a score to the [1, 100] range."""
    return min(max(score, MIN_SCORE), MAX_SCORE)


@dataclass(frozen=True)
class ScoreEntry:
    """A cached score for one (user, pet) pair.

    Entries are never swept eagerly. An entry is stale when the user's
    preferences were edited after ``computed_at``; see ScoreCache.is_valid.

    Attributes:
        user_id: Owner of the score
        pet_id: Scored pet
        score: Score in [1, 100]
        computed_at: Unix timestamp the score is valid from
    """

    user_id: str
    pet_id: str
    score: float
    computed_at: float

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.pet_id)


@dataclass(frozen=True)
class ScoreOutcome:
    """Result of one scoring attempt: either a score or the error that prevented it."""

    pet_id: str
    score: float | None = None
    error: ScoringError | None = None

    @classmethod
    def success(cls, pet_id: str, score: float) -> "ScoreOutcome":
        return cls(pet_id=pet_id, score=score)

    @classmethod
    def failure(cls, pet_id: str, error: ScoringError) -> "ScoreOutcome":
        return cls(pet_id=pet_id, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None and self.score is not None
