"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class RankedPetItem(BaseModel):
    """Single pet in a ranked list."""

    id: str = Field(..., description="Catalog identifier of the pet")
    name: str = Field(..., description="Display name")
    species: str = Field(..., description="Species of the pet")
    breed: str = Field(..., description="Breed name")
    age: float = Field(..., description="Age in years")
    size: str = Field(..., description="Size class")
    location: str = Field(..., description="Free-text location")
    interests: list[str] = Field(default_factory=list, description="Activity/interest tags")
    match_score: float = Field(
        ...,
        description="Compatibility score valid at assembly time",
        ge=1.0,
        le=100.0,
    )


class RankedListResponse(BaseModel):
    """Response DTO for a ranked match list."""

    user_id: str = Field(..., description="User the list was assembled for")
    neutral: bool = Field(
        ...,
        description="True when every score is the neutral fallback (no preferences set)",
    )
    generated_at: float = Field(..., description="Assembly time (Unix timestamp)")
    total: int = Field(..., description="Number of pets returned", ge=0)
    pets: list[RankedPetItem] = Field(
        default_factory=list,
        description="Pets sorted by match score, highest first",
    )


class PetScoreResponse(BaseModel):
    """Response DTO for a single-pet score lookup."""

    user_id: str = Field(..., description="User the score belongs to")
    pet_id: str = Field(..., description="Scored pet")
    pending: bool = Field(..., description="True while the score is being computed")
    score: float | None = Field(
        None,
        description="Score in [1, 100], null while pending",
        ge=1.0,
        le=100.0,
    )


class StatsResponse(BaseModel):
    """Response DTO for engine statistics."""

    total_entries: int = Field(..., description="Number of cached scores", ge=0)
    oracle_model: str = Field(..., description="Model used by the scoring oracle")
    batch_concurrency: int = Field(..., description="Maximum concurrent oracle calls", ge=1)
    metrics: dict[str, float | int] = Field(
        default_factory=dict,
        description="Cache and oracle counters",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the score store is reachable")
    oracle_healthy: bool | None = Field(
        None,
        description="Whether the scoring oracle is reachable (null when not checked)",
    )
