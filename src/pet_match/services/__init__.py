"""Service layer for business logic.

This layer contains the core scoring logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> MatchAssembler -> BatchScorer -> ScoringOracleClient -> ScoringOracle
                              -> ScoreCache -> ScoreStore
                              -> PreferenceReader -> ProfileStore

Usage:
    ```python
    from pet_match.services import MatchAssembler

    # Using factory method (recommended)
    assembler = MatchAssembler.create(
        catalog_store=catalog,
        profile_store=profiles,
        oracle=oracle,
        score_store=InMemoryScoreStore(),
    )
    ```
"""

from .batch_scorer import BatchScorer, rank_by_score
from .interaction_analyzer import analyze
from .match_assembler import MatchAssembler, MatchState
from .preference_reader import PreferenceReader
from .score_cache import ScoreCache
from .scoring_client import ScoringOracleClient, parse_score

__all__ = [
    "BatchScorer",
    "MatchAssembler",
    "MatchState",
    "PreferenceReader",
    "ScoreCache",
    "ScoringOracleClient",
    "analyze",
    "parse_score",
    "rank_by_score",
]
