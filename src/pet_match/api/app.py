from typing import Annotated, Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from pet_match.api.dependencies import HandlerDep, lifespan
from pet_match.config import settings
from pet_match.dto import (
    HealthCheckResponse,
    PetScoreResponse,
    RankedListResponse,
    StatsResponse,
)
from pet_match.entities import MatchFilters, PetSize, Species

app = FastAPI(
    title="Pet Match API",
    description="Ranks adoptable pets per user with cached compatibility scores",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Pet Match API",
        "version": "0.1.0",
        "description": "Ranks adoptable pets per user with cached compatibility scores",
        "endpoints": {
            "matches": "/users/{user_id}/matches",
            "stats": "/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep, check_oracle: bool = False) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check(check_oracle=check_oracle)


@app.get("/stats", response_model=StatsResponse)
async def stats(handler: HandlerDep) -> StatsResponse:
    """Get score cache and oracle statistics."""
    return await handler.get_stats()


@app.get("/users/{user_id}/matches", response_model=RankedListResponse)
async def get_matches(
    user_id: str,
    handler: HandlerDep,
    species: Annotated[list[Species] | None, Query()] = None,
    size: Annotated[list[PetSize] | None, Query()] = None,
    min_score: Annotated[float | None, Query(ge=1.0, le=100.0)] = None,
) -> RankedListResponse:
    """
    Get the user's pets ranked by match score.

    Args:
        user_id: The user to rank pets for.
        species: Only include these species.
        size: Only include these sizes.
        min_score: Only include pets scoring at least this much.

    Returns:
        Ranked list, highest score first.
    """
    filters = MatchFilters(
        species=tuple(species or ()),
        sizes=tuple(size or ()),
        min_score=min_score,
    )
    return await handler.get_matches(user_id, filters)


@app.post("/users/{user_id}/matches/refresh", response_model=RankedListResponse)
async def refresh_matches(user_id: str, handler: HandlerDep) -> RankedListResponse:
    """Reload the user's ranked list (joins a reload already in progress)."""
    return await handler.refresh_matches(user_id)


@app.get("/users/{user_id}/matches/{pet_id}", response_model=PetScoreResponse)
async def get_pet_score(
    user_id: str,
    pet_id: str,
    handler: HandlerDep,
    wait: bool = False,
) -> PetScoreResponse:
    """Get one pet's score for a detail view; ``pending`` until it is known."""
    return await handler.get_pet_score(user_id, pet_id, wait=wait)


@app.post("/users/{user_id}/profile/changed", response_model=dict[str, Any])
async def profile_changed(user_id: str, handler: HandlerDep) -> dict[str, Any]:
    """Signal that the user's preferences or likes changed."""
    return await handler.profile_changed(user_id)


@app.post("/catalog/changed", response_model=dict[str, Any])
async def catalog_changed(handler: HandlerDep) -> dict[str, Any]:
    """Signal that the pet catalog changed."""
    return await handler.catalog_changed()


@app.delete("/users/{user_id}/scores", response_model=dict[str, Any])
async def clear_scores(user_id: str, handler: HandlerDep) -> dict[str, Any]:
    """Drop the user's cached scores."""
    return await handler.clear_scores(user_id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pet_match.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
