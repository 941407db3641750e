"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the catalog and profile
stores, scoring oracle APIs) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (memory → Redis, OpenAI → Ollama, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from pet_match.protocols import CatalogStore, ProfileStore, ScoreStore, ScoringOracle

from .memory_score_store import InMemoryScoreStore
from .memory_stores import InMemoryCatalogStore, InMemoryProfileStore, load_seed_file
from .ollama_scoring_oracle import OllamaScoringOracle
from .openai_scoring_oracle import OpenAIScoringOracle
from .redis_score_store import RedisScoreStore

__all__ = [
    "CatalogStore",
    "ProfileStore",
    "ScoreStore",
    "ScoringOracle",
    "InMemoryScoreStore",
    "RedisScoreStore",
    "InMemoryCatalogStore",
    "InMemoryProfileStore",
    "load_seed_file",
    "OpenAIScoringOracle",
    "OllamaScoringOracle",
]
