"""Match assembler.

Top-level orchestration of a user's ranked list. Each user has a session
moving through IDLE → LOADING → READY (or ERROR). A loading cycle reads the
user's snapshot, rescoring only pets without a valid cached score, merges
fresh and cached scores in catalog order and publishes the sorted list.

Concurrency rules:
    - At most one cycle is in flight per user. A refresh arriving while
      LOADING joins the in-flight cycle instead of starting another.
    - A catalog or profile change bumps the session generation, cancels the
      in-flight cycle and starts a new one. A cycle whose generation is no
      longer current discards its result instead of publishing it.

Must be used from within a running asyncio event loop.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from pet_match.entities import NEUTRAL_SCORE, Pet, RankedList, UserSnapshot
from pet_match.errors import (
    LogicCollision,
    PetMatchError,
    PetNotFound,
    PreferencesMissing,
    ProfileNotFound,
)
from pet_match.metrics import ScoringMetrics
from pet_match.protocols import CatalogStore, ProfileStore, ScoreStore, ScoringOracle
from pet_match.services.batch_scorer import BatchScorer, rank_by_score
from pet_match.services.preference_reader import PreferenceReader
from pet_match.services.score_cache import ScoreCache
from pet_match.services.scoring_client import ScoringOracleClient

logger = logging.getLogger(__name__)

Listener = Callable[[str, RankedList], None]


class MatchState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class _Session:
    """Mutable per-user state. Only touched from the event loop."""

    user_id: str
    state: MatchState = MatchState.IDLE
    generation: int = 0
    task: asyncio.Task | None = None
    ranked: RankedList | None = None
    error: ProfileNotFound | None = None
    preferences_last_updated: float | None = None
    neutral: bool = False


@dataclass(frozen=True)
class _CycleResult:
    ranked: RankedList
    preferences_last_updated: float | None


class MatchAssembler:
    """Produces and republishes ranked match lists per user.

    Example:
        ```python
        assembler = MatchAssembler.create(
            catalog_store=catalog,
            profile_store=profiles,
            oracle=OpenAIScoringOracle.create(),
        )
        ranked = await assembler.get_ranked_list("user-1")
        for pet in ranked.pets:
            print(pet.name, pet.match_score)
        ```
    """

    def __init__(
        self,
        catalog_store: CatalogStore,
        reader: PreferenceReader,
        cache: ScoreCache,
        scorer: BatchScorer,
        concurrency: int | None = None,
        metrics: ScoringMetrics | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            catalog_store: Source of the pet catalog (required).
            reader: Preference & history reader (required).
            cache: Score cache shared with the batch scorer (required).
            scorer: Batch scorer (required).
            concurrency: Chunk size for batch scoring. Defaults to the scorer's.
            metrics: Counters for cycles run and discarded.
        """
        self._catalog = catalog_store
        self._reader = reader
        self._cache = cache
        self._scorer = scorer
        self._concurrency = concurrency
        self._metrics = metrics or ScoringMetrics()
        self._sessions: dict[str, _Session] = {}
        self._pending: dict[tuple[str, str], asyncio.Task] = {}
        self._resolved: dict[tuple[str, str], float | PetMatchError] = {}
        self._listeners: list[Listener] = []

    @classmethod
    def create(
        cls,
        catalog_store: CatalogStore,
        profile_store: ProfileStore,
        oracle: ScoringOracle,
        score_store: ScoreStore,
        concurrency: int | None = None,
        timeout: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "MatchAssembler":
        """Factory method wiring the reader, cache, client and scorer.

        All components share one ScoringMetrics instance, reachable through
        the ``metrics`` property.

        Args:
            catalog_store: Source of the pet catalog (required).
            profile_store: Source of profile documents (required).
            oracle: Scoring oracle implementation (required).
            score_store: Backend for cached scores (required).
            concurrency: Batch chunk size. If None, uses settings.
            timeout: Oracle call timeout in seconds. If None, uses settings.
            clock: Source of Unix timestamps.

        Returns:
            Configured MatchAssembler
        """
        metrics = ScoringMetrics()
        cache = ScoreCache(store=score_store, clock=clock, metrics=metrics)
        client = ScoringOracleClient(oracle=oracle, timeout=timeout, metrics=metrics)
        scorer = BatchScorer(client=client, cache=cache, concurrency=concurrency, metrics=metrics)
        return cls(
            catalog_store=catalog_store,
            reader=PreferenceReader(profile_store),
            cache=cache,
            scorer=scorer,
            concurrency=concurrency,
            metrics=metrics,
        )

    def _session(self, user_id: str) -> _Session:
        session = self._sessions.get(user_id)
        if session is None:
            session = _Session(user_id=user_id)
            self._sessions[user_id] = session
        return session

    # ------------------------------------------------------------------
    # Presentation-layer operations
    # ------------------------------------------------------------------

    async def get_ranked_list(self, user_id: str) -> RankedList:
        """Return the user's ranked list, loading it if needed.

        A READY list is returned as-is unless the user's preferences changed
        since it was assembled. A user in ERROR gets the stored error again;
        call refresh() to retry.

        Raises:
            ProfileNotFound: If the user has no profile
        """
        session = self._session(user_id)
        if session.state is MatchState.ERROR and session.error is not None:
            raise session.error
        if session.state is MatchState.READY and session.ranked is not None:
            if not await self._is_outdated(session):
                return session.ranked
        return await self._load(session)

    async def refresh(self, user_id: str) -> RankedList:
        """Reload the user's ranked list, joining an in-flight cycle if there is one.

        Raises:
            ProfileNotFound: If the user has no profile
        """
        return await self._load(self._session(user_id))

    def score_for(self, user_id: str, pet_id: str) -> float | None:
        """Return a pet's current score, or None while it is pending.

        Never blocks. Every answer comes from a background score_pet run,
        which re-reads the profile, so a preference edit is always checked
        before a cached score is shown. The first lookup schedules that run
        (one per pet and user) and returns None; the next lookup after it
        finishes takes its result. A result is handed out once.

        Raises:
            ProfileNotFound: If the background run found no profile
            PetNotFound: If the background run found no such pet
        """
        key = (user_id, pet_id)
        if key in self._resolved:
            result = self._resolved.pop(key)
            if isinstance(result, PetMatchError):
                raise result
            return result

        self._schedule_single(user_id, pet_id)
        return None

    async def score_pet(self, user_id: str, pet_id: str) -> float:
        """Score a single pet on demand, using the cache when still valid.

        Raises:
            ProfileNotFound: If the user has no profile
            PetNotFound: If the pet is not in the catalog
        """
        as_of = self._cache.now()
        try:
            snapshot = await self._reader.read(user_id)
        except PreferencesMissing:
            return NEUTRAL_SCORE

        entry = self._cache.lookup(user_id, pet_id, snapshot.preferences_last_updated)
        if entry is not None:
            return entry.score

        catalog = await self._catalog.list_pets()
        pet = next((p for p in catalog if p.id == pet_id), None)
        if pet is None:
            raise PetNotFound(pet_id)

        liked, disliked = self._history(catalog, snapshot)
        scored = await self._scorer.score_all(
            [pet], snapshot.preferences, user_id, liked, disliked, as_of=as_of
        )
        return scored[0].match_score

    def notify_profile_changed(self, user_id: str) -> None:
        """Reload a user's list after their preferences or history changed."""
        session = self._sessions.get(user_id)
        self._drop_single_results(user_id)
        if session is None:
            return
        logger.info(f"Profile changed for user {user_id}, reloading matches")
        self._start_cycle(session)

    def notify_catalog_changed(self) -> None:
        """Reload every known user's list after the catalog changed.

        Users in ERROR are left alone; refresh() is the only way out of it.
        """
        sessions = [s for s in self._sessions.values() if s.state is not MatchState.ERROR]
        logger.info(f"Catalog changed, reloading matches for {len(sessions)} users")
        for session in sessions:
            self._start_cycle(session)

    def invalidate_scores(self, user_id: str) -> int:
        """Drop a user's cached scores. The next cycle rescores everything."""
        self._drop_single_results(user_id)
        return self._cache.invalidate(user_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback receiving (user_id, ranked_list) on every publish.

        Returns:
            A function that unregisters the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def state(self, user_id: str) -> MatchState:
        session = self._sessions.get(user_id)
        return session.state if session else MatchState.IDLE

    def current(self, user_id: str) -> RankedList | None:
        """Return the last published list without any I/O."""
        session = self._sessions.get(user_id)
        return session.ranked if session else None

    async def close(self) -> None:
        """Cancel all in-flight cycles and pending single-pet scores."""
        tasks = [s.task for s in self._sessions.values() if s.task and not s.task.done()]
        tasks.extend(t for t in self._pending.values() if not t.done())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cycle management
    # ------------------------------------------------------------------

    async def _is_outdated(self, session: _Session) -> bool:
        try:
            snapshot = await self._reader.read(session.user_id)
        except PreferencesMissing:
            return not session.neutral
        except ProfileNotFound:
            return True

        if session.neutral or snapshot.preferences_last_updated is None:
            return True
        return snapshot.preferences_last_updated != session.preferences_last_updated

    async def _load(self, session: _Session) -> RankedList:
        if session.state is MatchState.LOADING and session.task and not session.task.done():
            logger.debug(f"Joining in-flight cycle for user {session.user_id}")
        else:
            self._start_cycle(session)
        return await self._await_latest(session)

    def _start_cycle(self, session: _Session) -> None:
        if session.task is not None and not session.task.done():
            logger.info(f"Cancelling superseded cycle for user {session.user_id}")
            session.task.cancel()

        session.generation += 1
        session.state = MatchState.LOADING
        session.error = None
        task = asyncio.create_task(
            self._run_cycle(session, session.generation),
            name=f"match-cycle:{session.user_id}:{session.generation}",
        )
        task.add_done_callback(self._retrieve_result)
        session.task = task

    async def _await_latest(self, session: _Session) -> RankedList:
        """Wait until a cycle that is still current publishes a list."""
        while True:
            task = session.task
            if task is None:
                raise RuntimeError(f"No cycle scheduled for user {session.user_id}")
            try:
                result = await asyncio.shield(task)
            except asyncio.CancelledError:
                # The cycle was superseded; follow the newer one
                if task.cancelled() and session.task is not task:
                    continue
                raise
            if result is not None:
                return result

    async def _run_cycle(self, session: _Session, generation: int) -> RankedList | None:
        user_id = session.user_id
        try:
            result = await self._assemble(user_id)
        except ProfileNotFound as e:
            if generation != session.generation:
                self._metrics.record_cycle(discarded=True)
                return None
            logger.warning(f"Cannot rank matches: {e}")
            session.state = MatchState.ERROR
            session.error = e
            session.ranked = None
            self._metrics.record_cycle()
            raise
        except Exception:
            if generation == session.generation:
                session.state = MatchState.IDLE
            logger.exception(f"Match cycle failed for user {user_id}")
            raise

        if generation != session.generation:
            logger.info(f"Discarding results of superseded cycle {generation} for user {user_id}")
            self._metrics.record_cycle(discarded=True)
            return None

        session.state = MatchState.READY
        session.ranked = result.ranked
        session.neutral = result.ranked.neutral
        session.preferences_last_updated = result.preferences_last_updated
        self._metrics.record_cycle()
        self._publish(user_id, result.ranked)
        return result.ranked

    async def _assemble(self, user_id: str) -> _CycleResult:
        # Fresh scores are stamped with the snapshot read time, not their arrival
        as_of = self._cache.now()
        catalog = await self._catalog.list_pets()

        try:
            snapshot = await self._reader.read(user_id)
        except PreferencesMissing as e:
            logger.info(f"{e}; using neutral scores for {len(catalog)} pets")
            ranked = RankedList(
                user_id=user_id,
                pets=tuple(pet.with_score(NEUTRAL_SCORE) for pet in catalog),
                generated_at=self._cache.now(),
                neutral=True,
            )
            return _CycleResult(ranked=ranked, preferences_last_updated=None)

        cached: dict[str, float] = {}
        needs_score: list[Pet] = []
        for pet in catalog:
            entry = self._cache.lookup(user_id, pet.id, snapshot.preferences_last_updated)
            if entry is not None:
                cached[pet.id] = entry.score
            else:
                needs_score.append(pet)

        fresh: dict[str, float] = {}
        if needs_score:
            logger.info(f"Scoring {len(needs_score)} of {len(catalog)} pets for user {user_id}")
            liked, disliked = self._history(catalog, snapshot)
            scored = await self._scorer.score_all(
                needs_score,
                snapshot.preferences,
                user_id,
                liked,
                disliked,
                concurrency=self._concurrency,
                as_of=as_of,
            )
            fresh = {pet.id: pet.match_score for pet in scored}

        merged: list[Pet] = []
        for pet in catalog:
            if pet.id in fresh:
                if pet.id in cached:
                    logger.error(str(LogicCollision(user_id, pet.id)))
                merged.append(pet.with_score(fresh[pet.id]))
            else:
                merged.append(pet.with_score(cached[pet.id]))

        ranked = RankedList(
            user_id=user_id,
            pets=tuple(rank_by_score(merged)),
            generated_at=self._cache.now(),
        )
        return _CycleResult(ranked=ranked, preferences_last_updated=snapshot.preferences_last_updated)

    @staticmethod
    def _history(catalog: list[Pet], snapshot: UserSnapshot) -> tuple[list[Pet], list[Pet]]:
        """Resolve liked/disliked ids against the catalog, ignoring pets no longer listed."""
        liked = [pet for pet in catalog if pet.id in snapshot.liked_ids]
        disliked = [pet for pet in catalog if pet.id in snapshot.disliked_ids]
        return liked, disliked

    def _publish(self, user_id: str, ranked: RankedList) -> None:
        for listener in list(self._listeners):
            try:
                listener(user_id, ranked)
            except Exception:
                logger.exception(f"Match listener failed for user {user_id}")

    def _schedule_single(self, user_id: str, pet_id: str) -> None:
        key = (user_id, pet_id)
        if key in self._pending:
            return

        task = asyncio.create_task(self.score_pet(user_id, pet_id), name=f"score-pet:{user_id}:{pet_id}")
        self._pending[key] = task

        def _done(finished: asyncio.Task) -> None:
            self._retrieve_result(finished)
            # Dropped tasks belong to a profile state that no longer applies
            if self._pending.get(key) is not finished:
                return
            del self._pending[key]
            if finished.cancelled():
                return
            error = finished.exception()
            if error is None:
                self._resolved[key] = finished.result()
            elif isinstance(error, PetMatchError):
                self._resolved[key] = error
            else:
                logger.error(f"Scoring pet {pet_id} for user {user_id} failed: {error!r}")

        task.add_done_callback(_done)

    def _drop_single_results(self, user_id: str) -> None:
        # Single-pet results computed before a profile change are not shown
        for key in [k for k in self._resolved if k[0] == user_id]:
            del self._resolved[key]
        for key in [k for k in self._pending if k[0] == user_id]:
            self._pending.pop(key).cancel()

    @staticmethod
    def _retrieve_result(task: asyncio.Task) -> None:
        # Errors were already logged or handed to awaiting callers
        if not task.cancelled():
            task.exception()

    @property
    def metrics(self) -> ScoringMetrics:
        return self._metrics

    @property
    def cache(self) -> ScoreCache:
        return self._cache

    @property
    def scorer(self) -> BatchScorer:
        return self._scorer
