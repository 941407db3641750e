"""Scoring oracle client.

Formats the fixed scoring request, calls the oracle under a timeout and
enforces the output contract: a float clamped to [1, 100]. Failures are
raised as ScoringError subclasses; substituting the neutral score is the
batch scorer's job, not this client's.
"""

import asyncio
import logging
import math
import re
import time
from collections.abc import Iterable
from enum import Enum

from pet_match.config import settings
from pet_match.entities import InteractionStats, Pet, Preferences, clamp_score
from pet_match.errors import OracleMalformedResponse, OracleUnavailable, ScoringError
from pet_match.metrics import ScoringMetrics
from pet_match.protocols import ScoringOracle

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert pet adoption matchmaker. Your task is to evaluate the compatibility between a potential adopter and a pet by analyzing the provided pet details, adopter preferences, and interaction history.

Core Matching Philosophy:
1. Focus on potential for success rather than perfect matches
2. Consider adaptability of both pet and adopter
3. Recognize that preferences can be flexible

Factor Weights:
- Species/Type Match: 15%
- Breed Fit: 15%
- Size Compatibility: 10%
- Activity Level & Living Space: 15%
- Experience Level: 15%
- Age & Location: 15%
- Lifestyle (children, other pets): 10%
- Interaction History (similarity to liked and disliked pets): 5%

Output only a number between 1 and 100, with no additional text."""

# Leading number, the way a lenient float parser reads "85", "85.5" or "85 points"
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _join(values: Iterable[str | Enum]) -> str:
    return ", ".join(v.value if isinstance(v, Enum) else v for v in values) or "None"


def build_user_prompt(pet: Pet, preferences: Preferences, stats: InteractionStats) -> str:
    """Format pet, preference and interaction details for the oracle."""
    return f"""
Pet Details:
- Name: {pet.name}
- Species: {pet.species.value}
- Breed: {pet.breed}
- Age: {pet.age:g} years
- Size: {pet.size.value}
- Location: {pet.location}
- Activity Indicators: {_join(pet.interests)}
- Description: {pet.description}

Adopter Preferences (Current):
- Preferred Pet Types: {_join(preferences.pet_types)}
- Size Preferences: {_join(preferences.size_preferences)}
- Activity Level: {preferences.activity_level.value}
- Maximum Distance: {preferences.max_distance:g}km
- Experience Level: {preferences.experience_level.value}
- Living Space: {preferences.living_space.value}
- Has Children: {str(preferences.has_children).lower()}
- Has Other Pets: {str(preferences.has_other_pets).lower()}
- Age Range: {preferences.age_range or "Any"}

Interaction History Analysis:
- Similar to Favorited Pets: {stats.favorite_patterns}
- Similar to Disliked Pets: {stats.dislike_patterns}"""


def parse_score(text: str | None) -> float:
    """Parse an oracle answer into a score in [1, 100].

    Args:
        text: Raw oracle answer

    Returns:
        The clamped score

    Raises:
        OracleMalformedResponse: If the answer does not start with a number
    """
    stripped = (text or "").strip()
    match = _LEADING_NUMBER.match(stripped)
    if match is None:
        raise OracleMalformedResponse(f"Oracle answer is not numeric: {stripped!r}", raw=text)

    value = float(match.group())
    if math.isnan(value):
        raise OracleMalformedResponse(f"Oracle answer is not a number: {stripped!r}", raw=text)
    return clamp_score(value)


class ScoringOracleClient:
    """Requests one compatibility score per call from a ScoringOracle.

    Example:
        ```python
        client = ScoringOracleClient(oracle=OpenAIScoringOracle.create())
        score = await client.score(pet, preferences, stats)  # 1.0 .. 100.0
        ```
    """

    def __init__(
        self,
        oracle: ScoringOracle,
        timeout: float | None = None,
        metrics: ScoringMetrics | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            oracle: The scoring oracle implementation (required).
            timeout: Per-call timeout in seconds. Defaults to settings.oracle_timeout.
            metrics: Counters to record oracle calls in.
        """
        self._oracle = oracle
        self._timeout = timeout or settings.oracle_timeout
        self._metrics = metrics or ScoringMetrics()

    async def score(self, pet: Pet, preferences: Preferences, stats: InteractionStats) -> float:
        """Score one pet for one adopter.

        No retries are made.

        Raises:
            OracleUnavailable: On transport failure or timeout
            OracleMalformedResponse: If the answer is not numeric
        """
        user_prompt = build_user_prompt(pet, preferences, stats)
        start_time = time.time()
        failed = True

        try:
            raw = await asyncio.wait_for(
                self._oracle.judge(SYSTEM_PROMPT, user_prompt),
                timeout=self._timeout,
            )
            score = parse_score(raw)
            failed = False
            return score
        except asyncio.TimeoutError as e:
            raise OracleUnavailable(
                f"Oracle did not answer for pet {pet.id} within {self._timeout}s"
            ) from e
        except ScoringError as e:
            logger.debug(f"Oracle failed for pet {pet.id}: {e}")
            raise
        finally:
            self._metrics.record_oracle_call((time.time() - start_time) * 1000, failed=failed)

    @property
    def oracle(self) -> ScoringOracle:
        """Get the underlying oracle (for testing)."""
        return self._oracle

    @property
    def timeout(self) -> float:
        return self._timeout
