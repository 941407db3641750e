"""
Tests for the batch scorer.
"""

import pytest

from pet_match.dto import BuyerPreferencesDocument
from pet_match.entities import NEUTRAL_SCORE
from pet_match.errors import OracleUnavailable
from pet_match.metrics import ScoringMetrics
from pet_match.services import BatchScorer, ScoreCache, ScoringOracleClient, rank_by_score


@pytest.fixture
def preferences(preferences_doc):
    return BuyerPreferencesDocument.model_validate(preferences_doc).to_entity()


@pytest.fixture
def metrics():
    return ScoringMetrics()


@pytest.fixture
def cache(score_store, clock, metrics):
    return ScoreCache(store=score_store, clock=clock, metrics=metrics)


@pytest.fixture
def scorer(oracle, cache, metrics):
    client = ScoringOracleClient(oracle=oracle, timeout=1.0, metrics=metrics)
    return BatchScorer(client=client, cache=cache, concurrency=2, metrics=metrics)


def test_rank_by_score_is_stable(make_pet):
    a = make_pet("a", score=70)
    b = make_pet("b", score=70)
    c = make_pet("c", score=90)

    assert [p.id for p in rank_by_score([a, b, c])] == ["c", "a", "b"]


@pytest.mark.asyncio
async def test_all_failures_give_neutral_scores(scorer, oracle, pets, preferences, cache, metrics):
    oracle.default = OracleUnavailable("down")

    ranked = await scorer.score_all(pets, preferences, user_id="u1")

    assert len(ranked) == len(pets)
    assert all(p.match_score == NEUTRAL_SCORE for p in ranked)
    # Neutral fallbacks keep catalog order and are never cached
    assert [p.id for p in ranked] == [p.id for p in pets]
    assert cache.get_stats() == {"total_entries": 0}
    assert metrics.fallbacks == 3


@pytest.mark.asyncio
async def test_only_successes_are_cached(scorer, oracle, pets, preferences, cache):
    oracle.answers = {"Rex": "88", "Milo": "not sure", "Luna": "61"}

    ranked = await scorer.score_all(pets, preferences, user_id="u1", as_of=900.0)

    assert [(p.id, p.match_score) for p in ranked] == [("rex", 88.0), ("luna", 61.0), ("milo", 50.0)]
    assert cache.get("u1", "rex").computed_at == 900.0
    assert cache.get("u1", "milo") is None


@pytest.mark.asyncio
async def test_chunks_bound_concurrency(scorer, oracle, make_pet, preferences):
    oracle.delay = 0.01
    catalog = [make_pet(f"p{i}") for i in range(5)]

    outcomes = await scorer.score_outcomes(catalog, preferences)

    assert [o.pet_id for o in outcomes] == [p.id for p in catalog]
    assert all(o.ok for o in outcomes)
    assert oracle.max_in_flight == 2
    assert len(oracle.calls) == 5


@pytest.mark.asyncio
async def test_concurrency_override(scorer, oracle, make_pet, preferences):
    oracle.delay = 0.01
    catalog = [make_pet(f"p{i}") for i in range(4)]

    await scorer.score_outcomes(catalog, preferences, concurrency=4)

    assert oracle.max_in_flight == 4


@pytest.mark.asyncio
async def test_concurrency_below_one_is_rejected(scorer, pets, preferences):
    with pytest.raises(ValueError):
        await scorer.score_outcomes(pets, preferences, concurrency=0)


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(scorer, oracle, pets, preferences):
    oracle.answers["Milo"] = RuntimeError("boom")

    outcomes = await scorer.score_outcomes(pets, preferences)

    assert [o.ok for o in outcomes] == [True, False, True]


@pytest.mark.asyncio
async def test_liked_candidate_counts_in_its_own_history(scorer, oracle, pets, preferences):
    rex, milo = pets[0], pets[1]

    await scorer.score_outcomes([rex], preferences, liked=[rex, milo])

    assert (
        "Similar to Favorited Pets: species: 1/2 (50% match), size: 1/2 (50% match), "
        "age: 1/2 (50% match), shared interests: 1/2 (50% match) (Total pets: 2)"
    ) in oracle.prompts[0]


@pytest.mark.asyncio
async def test_empty_input(scorer, oracle, preferences):
    assert await scorer.score_all([], preferences, user_id="u1") == []
    assert oracle.calls == []
