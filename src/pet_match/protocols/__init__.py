"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory → Redis, OpenAI → Ollama, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from pet_match.protocols import ScoreStore, ScoringOracle

    store: ScoreStore = InMemoryScoreStore()
    oracle: ScoringOracle = OpenAIScoringOracle.create()
    ```
"""

from .score_store import ScoreStore
from .scoring_oracle import ScoringOracle
from .stores import CatalogStore, ProfileStore

__all__ = [
    "CatalogStore",
    "ProfileStore",
    "ScoreStore",
    "ScoringOracle",
]
