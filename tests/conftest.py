"""
Shared fixtures for the match engine tests.

No test talks to a real oracle or Redis: the oracle is a scripted fake and
scores live in an InMemoryScoreStore.
"""

import asyncio
import re

import pytest

from pet_match.entities import Pet, PetSize, Species
from pet_match.repositories import InMemoryCatalogStore, InMemoryProfileStore, InMemoryScoreStore

_NAME = re.compile(r"^- Name: (.+)$", re.MULTILINE)


class FakeOracle:
    """Scripted ScoringOracle.

    Answers are looked up by the pet name found in the user prompt. An
    answer that is an exception instance is raised instead of returned.
    """

    model_name = "fake-judge"

    def __init__(self, answers=None, default="75", delay=0.0):
        self.answers = dict(answers or {})
        self.default = default
        self.delay = delay
        self.gate: asyncio.Event | None = None
        self.calls: list[str] = []
        self.prompts: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def judge(self, system_prompt: str, user_prompt: str) -> str:
        match = _NAME.search(user_prompt)
        name = match.group(1) if match else ""
        self.calls.append(name)
        self.prompts.append(user_prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            answer = self.answers.get(name, self.default)
            if isinstance(answer, BaseException):
                raise answer
            return answer
        finally:
            self.in_flight -= 1

    async def is_available(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


class Clock:
    """Manually advanced Unix clock."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


PREFERENCES = {
    "petTypes": ["DOG"],
    "sizePreferences": ["medium", "large"],
    "activityLevel": "high",
    "maxDistance": 25,
    "experienceLevel": "intermediate",
    "livingSpace": "house",
    "hasChildren": True,
    "hasOtherPets": False,
    "ageRange": {"min": 1, "max": 6},
}


@pytest.fixture
def make_pet():
    """Factory for catalog pets with sensible defaults."""

    def _make(
        pet_id: str,
        name: str | None = None,
        species: Species = Species.DOG,
        size: PetSize = PetSize.MEDIUM,
        age: float = 3,
        interests: tuple[str, ...] = (),
        score: float | None = None,
    ) -> Pet:
        return Pet(
            id=pet_id,
            name=name or pet_id.capitalize(),
            species=species,
            breed="Mixed",
            age=age,
            size=size,
            location="2 miles away",
            description="Friendly",
            interests=interests,
            match_score=score,
        )

    return _make


@pytest.fixture
def preferences_doc():
    return dict(PREFERENCES)


@pytest.fixture
def pets(make_pet):
    """Three-pet catalog: Rex, Milo and Luna."""
    return [
        make_pet("rex", species=Species.DOG, size=PetSize.LARGE, age=4, interests=("fetch", "hiking")),
        make_pet("milo", species=Species.CAT, size=PetSize.SMALL, age=2, interests=("naps",)),
        make_pet("luna", species=Species.DOG, size=PetSize.MEDIUM, age=4, interests=("fetch",)),
    ]


@pytest.fixture
def catalog(pets):
    return InMemoryCatalogStore(pets)


@pytest.fixture
def profiles(preferences_doc):
    """Profile store with one user (u1) whose preferences were set at t=500."""
    return InMemoryProfileStore(
        {
            "u1": {
                "buyerPreferences": preferences_doc,
                "preferencesLastUpdated": 500.0,
                "favorites": ["rex"],
                "dislikes": [],
            },
            "no-prefs": {"favorites": [], "dislikes": []},
        }
    )


@pytest.fixture
def score_store():
    return InMemoryScoreStore()


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def clock():
    return Clock()
