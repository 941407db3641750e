"""
Tests for the score cache and the in-memory score store.
"""

from pet_match.entities import ScoreEntry
from pet_match.metrics import ScoringMetrics
from pet_match.repositories import InMemoryScoreStore
from pet_match.services import ScoreCache


def test_put_then_lookup_is_hit(score_store, clock):
    metrics = ScoringMetrics()
    cache = ScoreCache(store=score_store, clock=clock, metrics=metrics)

    cache.put("u1", "rex", 72)
    entry = cache.lookup("u1", "rex", preferences_last_updated=500.0)

    assert entry is not None
    assert entry.score == 72
    assert entry.computed_at == clock.now
    assert metrics.cache_hits == 1


def test_entry_older_than_preferences_is_stale(score_store):
    cache = ScoreCache(store=score_store)
    cache.put("u1", "rex", 62, computed_at=100.0)

    assert cache.lookup("u1", "rex", preferences_last_updated=200.0) is None
    # Stale entries are not swept; the stored value is still there
    assert cache.get("u1", "rex").score == 62


def test_entry_at_exact_edit_time_is_valid():
    entry = ScoreEntry(user_id="u1", pet_id="rex", score=70, computed_at=200.0)

    assert ScoreCache.is_valid(entry, 200.0)
    assert not ScoreCache.is_valid(entry, 200.5)


def test_missing_timestamp_means_stale():
    entry = ScoreEntry(user_id="u1", pet_id="rex", score=70, computed_at=200.0)

    assert not ScoreCache.is_valid(entry, None)


def test_scores_are_isolated_per_user(score_store):
    cache = ScoreCache(store=score_store)
    cache.put("u1", "rex", 90, computed_at=10.0)

    assert cache.lookup("u2", "rex", preferences_last_updated=0.0) is None
    assert cache.lookup("u1", "rex", preferences_last_updated=0.0).score == 90


def test_put_overwrites_and_clamps(score_store):
    cache = ScoreCache(store=score_store)
    cache.put("u1", "rex", 40, computed_at=10.0)
    cache.put("u1", "rex", 250, computed_at=20.0)

    entry = cache.get("u1", "rex")
    assert entry.score == 100.0
    assert entry.computed_at == 20.0
    assert cache.get_stats() == {"total_entries": 1}


def test_invalidate_user_only_touches_that_user(score_store):
    cache = ScoreCache(store=score_store)
    cache.put("u1", "rex", 40)
    cache.put("u1", "milo", 50)
    cache.put("u2", "rex", 60)

    assert cache.invalidate("u1") == 2
    assert cache.get("u1", "rex") is None
    assert cache.get("u2", "rex") is not None
    assert cache.invalidate("u2", "rex") == 1
    assert cache.invalidate("u2", "rex") == 0


def test_bounded_store_evicts_least_recently_used():
    store = InMemoryScoreStore(max_entries=2)
    store.put(ScoreEntry("u1", "a", 10, 1.0))
    store.put(ScoreEntry("u1", "b", 20, 1.0))
    store.get("u1", "a")
    store.put(ScoreEntry("u1", "c", 30, 1.0))

    assert store.get("u1", "b") is None
    assert store.get("u1", "a") is not None
    assert store.count_all() == 2


def test_unbounded_store_keeps_everything():
    store = InMemoryScoreStore(max_entries=0)
    for i in range(50):
        store.put(ScoreEntry("u1", f"p{i}", 50, 1.0))

    assert store.max_entries is None
    assert store.count_all() == 50
    assert store.clear_all() == 50
    assert store.health_check()
