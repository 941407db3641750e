"""Pet Match - ranks adoptable pets per user with cached compatibility scores.

This package provides a layered architecture for match scoring:

Layers:
    - protocols: Interface contracts (ScoreStore, ScoringOracle, CatalogStore, ProfileStore)
    - repositories: Data access implementations
    - services: Business logic (cache, batch scorer, match assembler)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts and stored documents)
    - entities: Domain models (internal)

Usage:
    ```python
    from pet_match.services import MatchAssembler

    assembler = MatchAssembler.create(
        catalog_store=catalog, profile_store=profiles,
        oracle=oracle, score_store=store,
    )
    ranked = await assembler.get_ranked_list("user-1")
    ```

For HTTP API:
    ```python
    from pet_match.api.app import app
    ```
"""

from pet_match.config import get_redis_client, settings
from pet_match.entities import MatchFilters, Pet, RankedList, ScoreEntry
from pet_match.errors import PetMatchError, ProfileNotFound, ScoringError
from pet_match.handlers import MatchHandler
from pet_match.protocols import CatalogStore, ProfileStore, ScoreStore, ScoringOracle
from pet_match.repositories import InMemoryScoreStore, RedisScoreStore
from pet_match.services import MatchAssembler, ScoreCache

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CatalogStore",
    "ProfileStore",
    "ScoreStore",
    "ScoringOracle",
    # Services (business logic)
    "MatchAssembler",
    "ScoreCache",
    # Handlers (HTTP)
    "MatchHandler",
    # Repositories (data access)
    "InMemoryScoreStore",
    "RedisScoreStore",
    # Entities (domain models)
    "Pet",
    "RankedList",
    "ScoreEntry",
    "MatchFilters",
    # Errors
    "PetMatchError",
    "ProfileNotFound",
    "ScoringError",
]
