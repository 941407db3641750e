"""Batch scorer.

Drives the scoring client over a list of pets in fixed-size chunks. Each
chunk runs concurrently; the next chunk only starts when the whole chunk is
done, so at most ``concurrency`` oracle calls are outstanding.

This is the one place where failed scores are replaced by the neutral score.
"""

import asyncio
import logging
from collections.abc import Sequence

from pet_match.config import settings
from pet_match.entities import NEUTRAL_SCORE, Pet, Preferences, ScoreOutcome
from pet_match.errors import ScoringError
from pet_match.metrics import ScoringMetrics
from pet_match.services.interaction_analyzer import analyze
from pet_match.services.score_cache import ScoreCache
from pet_match.services.scoring_client import ScoringOracleClient

logger = logging.getLogger(__name__)


def chunked(items: Sequence[Pet], size: int) -> list[Sequence[Pet]]:
    """Split items into consecutive chunks of at most ``size``."""
    return [items[i : i + size] for i in range(0, len(items), size)]


def rank_by_score(pets: Sequence[Pet]) -> list[Pet]:
    """Sort pets by descending match score. Ties keep their input order."""
    return sorted(pets, key=lambda pet: -(pet.match_score or 0.0))


class BatchScorer:
    """Scores many pets with bounded concurrency and per-item fallback.

    Example:
        ```python
        scorer = BatchScorer(client=client, cache=cache)
        ranked = await scorer.score_all(pets, preferences, user_id="user-1")
        ```
    """

    def __init__(
        self,
        client: ScoringOracleClient,
        cache: ScoreCache,
        concurrency: int | None = None,
        metrics: ScoringMetrics | None = None,
    ) -> None:
        """Initialize the batch scorer.

        Args:
            client: Scoring oracle client (required).
            cache: Score cache that successful scores are written to (required).
            concurrency: Default chunk size. Defaults to settings.batch_concurrency.
            metrics: Counters for fallbacks.
        """
        self._client = client
        self._cache = cache
        self._concurrency = concurrency or settings.batch_concurrency
        self._metrics = metrics or ScoringMetrics()

    async def _score_one(
        self,
        pet: Pet,
        preferences: Preferences,
        liked: Sequence[Pet],
        disliked: Sequence[Pet],
    ) -> ScoreOutcome:
        stats = analyze(pet, liked, disliked)
        try:
            score = await self._client.score(pet, preferences, stats)
        except ScoringError as e:
            return ScoreOutcome.failure(pet.id, e)
        except Exception as e:
            logger.exception(f"Unexpected error scoring pet {pet.id}")
            return ScoreOutcome.failure(pet.id, ScoringError(f"Unexpected error: {e}"))
        return ScoreOutcome.success(pet.id, score)

    async def score_outcomes(
        self,
        pets: Sequence[Pet],
        preferences: Preferences,
        liked: Sequence[Pet] = (),
        disliked: Sequence[Pet] = (),
        concurrency: int | None = None,
    ) -> list[ScoreOutcome]:
        """Score every pet, one outcome per pet in input order.

        Args:
            pets: Pets to score
            preferences: The adopter's preferences
            liked: Pet records the adopter favorited
            disliked: Pet records the adopter dismissed
            concurrency: Chunk size override

        Returns:
            One ScoreOutcome per input pet

        Raises:
            ValueError: If concurrency is less than 1
        """
        size = self._concurrency if concurrency is None else concurrency
        if size < 1:
            raise ValueError("concurrency must be at least 1")

        outcomes: list[ScoreOutcome] = []
        for chunk in chunked(pets, size):
            outcomes.extend(
                await asyncio.gather(
                    *(self._score_one(pet, preferences, liked, disliked) for pet in chunk)
                )
            )
        return outcomes

    async def score_all(
        self,
        pets: Sequence[Pet],
        preferences: Preferences,
        user_id: str,
        liked: Sequence[Pet] = (),
        disliked: Sequence[Pet] = (),
        concurrency: int | None = None,
        as_of: float | None = None,
    ) -> list[Pet]:
        """Score every pet, cache the successes and rank the result.

        The batch never fails as a whole: a pet whose scoring failed gets the
        neutral score and is not cached.

        Args:
            pets: Pets to score
            preferences: The adopter's preferences
            user_id: Owner of the scores
            liked: Pet records the adopter favorited
            disliked: Pet records the adopter dismissed
            concurrency: Chunk size override
            as_of: Timestamp the cached scores are valid from. Defaults to now.

        Returns:
            Exactly one pet per input, carrying its score, highest first
        """
        outcomes = await self.score_outcomes(pets, preferences, liked, disliked, concurrency)

        scored: list[Pet] = []
        for pet, outcome in zip(pets, outcomes):
            if outcome.ok:
                self._cache.put(user_id, pet.id, outcome.score, computed_at=as_of)
                scored.append(pet.with_score(outcome.score))
            else:
                logger.warning(
                    f"Scoring failed for pet {pet.id} (user {user_id}), using neutral score: {outcome.error}"
                )
                self._metrics.record_fallback()
                scored.append(pet.with_score(NEUTRAL_SCORE))

        return rank_by_score(scored)

    @property
    def concurrency(self) -> int:
        return self._concurrency
