"""
Tests for the scoring oracle client.
"""

import asyncio

import pytest

from pet_match.dto import BuyerPreferencesDocument
from pet_match.errors import OracleMalformedResponse, OracleUnavailable
from pet_match.metrics import ScoringMetrics
from pet_match.services.interaction_analyzer import analyze
from pet_match.services.scoring_client import (
    SYSTEM_PROMPT,
    ScoringOracleClient,
    build_user_prompt,
    parse_score,
)


@pytest.fixture
def preferences(preferences_doc):
    return BuyerPreferencesDocument.model_validate(preferences_doc).to_entity()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("85", 85.0),
        (" 72.5\n", 72.5),
        ("90 points", 90.0),
        ("150", 100.0),
        ("-5", 1.0),
        ("0", 1.0),
    ],
)
def test_parse_score_clamps(raw, expected):
    assert parse_score(raw) == expected


@pytest.mark.parametrize("raw", ["", "great match", "Score: 80", None])
def test_parse_score_rejects_non_numeric(raw):
    with pytest.raises(OracleMalformedResponse):
        parse_score(raw)


def test_user_prompt_contains_pet_and_preferences(make_pet, preferences):
    pet = make_pet("rex", name="Rex", interests=("fetch", "hiking"))
    stats = analyze(pet, [], [])

    prompt = build_user_prompt(pet, preferences, stats)

    assert "- Name: Rex" in prompt
    assert "- Activity Indicators: fetch, hiking" in prompt
    assert "- Preferred Pet Types: DOG" in prompt
    assert "- Size Preferences: medium, large" in prompt
    assert "- Age Range: 1-6 years" in prompt
    assert "- Similar to Favorited Pets: No favorite patterns yet" in prompt
    assert "Output only a number between 1 and 100" in SYSTEM_PROMPT


def test_user_prompt_marks_empty_lists(make_pet, preferences_doc):
    preferences_doc["petTypes"] = []
    preferences = BuyerPreferencesDocument.model_validate(preferences_doc).to_entity()
    pet = make_pet("milo", name="Milo")

    prompt = build_user_prompt(pet, preferences, analyze(pet, [], []))

    assert "- Activity Indicators: None" in prompt
    assert "- Preferred Pet Types: None" in prompt


@pytest.mark.asyncio
async def test_score_returns_clamped_value(oracle, make_pet, preferences):
    oracle.default = "150"
    metrics = ScoringMetrics()
    client = ScoringOracleClient(oracle=oracle, timeout=1.0, metrics=metrics)
    pet = make_pet("rex")

    score = await client.score(pet, preferences, analyze(pet, [], []))

    assert score == 100.0
    assert metrics.oracle_calls == 1
    assert metrics.oracle_failures == 0


@pytest.mark.asyncio
async def test_score_timeout_is_unavailable(oracle, make_pet, preferences):
    oracle.delay = 0.5
    metrics = ScoringMetrics()
    client = ScoringOracleClient(oracle=oracle, timeout=0.01, metrics=metrics)
    pet = make_pet("rex")

    with pytest.raises(OracleUnavailable):
        await client.score(pet, preferences, analyze(pet, [], []))

    assert metrics.oracle_failures == 1


@pytest.mark.asyncio
async def test_score_malformed_answer_raises(oracle, make_pet, preferences):
    oracle.default = "I think they'd get along"
    client = ScoringOracleClient(oracle=oracle, timeout=1.0)
    pet = make_pet("rex")

    with pytest.raises(OracleMalformedResponse):
        await client.score(pet, preferences, analyze(pet, [], []))


@pytest.mark.asyncio
async def test_score_does_not_retry(oracle, make_pet, preferences):
    oracle.answers["Rex"] = OracleUnavailable("down")
    client = ScoringOracleClient(oracle=oracle, timeout=1.0)
    pet = make_pet("rex", name="Rex")

    with pytest.raises(OracleUnavailable):
        await client.score(pet, preferences, analyze(pet, [], []))

    assert oracle.calls == ["Rex"]


@pytest.mark.asyncio
async def test_cancelled_score_propagates(oracle, make_pet, preferences):
    oracle.gate = asyncio.Event()
    client = ScoringOracleClient(oracle=oracle, timeout=1.0)
    pet = make_pet("rex")

    task = asyncio.create_task(client.score(pet, preferences, analyze(pet, [], [])))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
