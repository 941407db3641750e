"""Data Transfer Objects for external contracts.

These Pydantic models define the store document contracts and the HTTP API
contract. They are used for validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .profile import AgeRangeDocument, BuyerPreferencesDocument, PetDocument, ProfileDocument
from .responses import (
    HealthCheckResponse,
    PetScoreResponse,
    RankedListResponse,
    RankedPetItem,
    StatsResponse,
)

__all__ = [
    "AgeRangeDocument",
    "BuyerPreferencesDocument",
    "PetDocument",
    "ProfileDocument",
    "RankedPetItem",
    "RankedListResponse",
    "PetScoreResponse",
    "StatsResponse",
    "HealthCheckResponse",
]
