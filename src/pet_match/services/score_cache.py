"""Score cache service.

Wraps a ScoreStore with the freshness rule: a cached score is only valid if
it was computed no earlier than the user's last preference edit. Invalidation
is a comparison at read time, never an eager sweep.
"""

import logging
import time
from collections.abc import Callable

from pet_match.entities import ScoreEntry, clamp_score
from pet_match.metrics import ScoringMetrics
from pet_match.protocols import ScoreStore

logger = logging.getLogger(__name__)


class ScoreCache:
    """Per-user score cache keyed by (user_id, pet_id).

    Owned by whoever builds the MatchAssembler and injected into it, so tests
    get a fresh instance per case and deployments can choose the store.

    Example:
        ```python
        cache = ScoreCache(store=InMemoryScoreStore())
        cache.put("user-1", "pet-1", 72)
        entry = cache.lookup("user-1", "pet-1", preferences_last_updated=snapshot_ts)
        ```
    """

    def __init__(
        self,
        store: ScoreStore,
        clock: Callable[[], float] = time.time,
        metrics: ScoringMetrics | None = None,
    ) -> None:
        """Initialize the score cache.

        Args:
            store: Storage backend (required).
            clock: Source of Unix timestamps for ``computed_at``.
            metrics: Counters for cache hits and misses.
        """
        self._store = store
        self._clock = clock
        self._metrics = metrics or ScoringMetrics()

    def get(self, user_id: str, pet_id: str) -> ScoreEntry | None:
        """Return the stored entry, valid or not."""
        return self._store.get(user_id, pet_id)

    def put(
        self,
        user_id: str,
        pet_id: str,
        score: float,
        computed_at: float | None = None,
    ) -> ScoreEntry:
        """Store a score, overwriting any prior entry for the pair.

        Args:
            user_id: Owner of the score
            pet_id: Scored pet
            score: Score, clamped to [1, 100]
            computed_at: Time the score is valid from. Defaults to now; the
                batch scorer passes the time its preference snapshot was read.

        Returns:
            The stored entry
        """
        entry = ScoreEntry(
            user_id=user_id,
            pet_id=pet_id,
            score=clamp_score(score),
            computed_at=self._clock() if computed_at is None else computed_at,
        )
        self._store.put(entry)
        return entry

    @staticmethod
    def is_valid(entry: ScoreEntry, preferences_last_updated: float | None) -> bool:
        """Check whether an entry is still fresh.

        Without a preference timestamp freshness cannot be proven, so the
        entry counts as stale.
        """
        if preferences_last_updated is None:
            return False
        return entry.computed_at >= preferences_last_updated

    def lookup(
        self,
        user_id: str,
        pet_id: str,
        preferences_last_updated: float | None,
    ) -> ScoreEntry | None:
        """Return the entry only if it is still valid, recording hit or miss."""
        entry = self._store.get(user_id, pet_id)
        if entry is not None and self.is_valid(entry, preferences_last_updated):
            self._metrics.record_hit()
            return entry

        if entry is not None:
            logger.debug(f"Stale score for user {user_id}, pet {pet_id} (computed {entry.computed_at})")
        self._metrics.record_miss()
        return None

    def invalidate(self, user_id: str, pet_id: str | None = None) -> int:
        """Drop one cached score, or all of a user's scores when pet_id is None.

        Returns:
            Number of entries deleted
        """
        if pet_id is not None:
            return int(self._store.delete(user_id, pet_id))
        count = self._store.delete_user(user_id)
        logger.info(f"Invalidated {count} cached scores for user {user_id}")
        return count

    def clear(self) -> int:
        return self._store.clear_all()

    def now(self) -> float:
        return self._clock()

    def get_stats(self) -> dict:
        return {"total_entries": self._store.count_all()}

    def is_healthy(self) -> bool:
        return self._store.health_check()

    @property
    def store(self) -> ScoreStore:
        """Get the underlying store (for testing)."""
        return self._store
