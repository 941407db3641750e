"""HTTP handlers for match operations.

Handlers convert between engine results and DTOs (API contracts).
They handle HTTP concerns like status codes and error responses.
"""

from fastapi import HTTPException, status

from pet_match.dto import (
    HealthCheckResponse,
    PetScoreResponse,
    RankedListResponse,
    RankedPetItem,
    StatsResponse,
)
from pet_match.entities import MatchFilters, RankedList
from pet_match.errors import PetNotFound, ProfileNotFound
from pet_match.protocols import ScoringOracle
from pet_match.services import MatchAssembler


def _to_response(ranked: RankedList) -> RankedListResponse:
    return RankedListResponse(
        user_id=ranked.user_id,
        neutral=ranked.neutral,
        generated_at=ranked.generated_at,
        total=len(ranked),
        pets=[
            RankedPetItem(
                id=pet.id,
                name=pet.name,
                species=pet.species.value,
                breed=pet.breed,
                age=pet.age,
                size=pet.size.value,
                location=pet.location,
                interests=list(pet.interests),
                match_score=pet.match_score,
            )
            for pet in ranked.pets
        ],
    )


class MatchHandler:
    """HTTP handlers for ranked matches.

    This handler delegates to MatchAssembler and handles HTTP-specific
    concerns like:
    - Converting entities to DTOs
    - Mapping ProfileNotFound/PetNotFound to 404
    - Wrapping unexpected failures as 500

    Example:
        ```python
        handler = MatchHandler(assembler=assembler, oracle=oracle)

        @app.get("/users/{user_id}/matches", response_model=RankedListResponse)
        async def matches(user_id: str):
            return await handler.get_matches(user_id)
        ```
    """

    def __init__(self, assembler: MatchAssembler, oracle: ScoringOracle) -> None:
        """Initialize the match handler.

        Args:
            assembler: The match assembler (required).
            oracle: The scoring oracle, for stats and health (required).
        """
        self._assembler = assembler
        self._oracle = oracle

    async def get_matches(
        self,
        user_id: str,
        filters: MatchFilters | None = None,
    ) -> RankedListResponse:
        """Handle GET /users/{user_id}/matches requests."""
        try:
            ranked = await self._assembler.get_ranked_list(user_id)
        except ProfileNotFound as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to rank matches: {e}",
            ) from e

        if filters is not None:
            ranked = ranked.filter(filters)
        return _to_response(ranked)

    async def refresh_matches(self, user_id: str) -> RankedListResponse:
        """Handle POST /users/{user_id}/matches/refresh requests."""
        try:
            ranked = await self._assembler.refresh(user_id)
        except ProfileNotFound as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to refresh matches: {e}",
            ) from e
        return _to_response(ranked)

    async def get_pet_score(self, user_id: str, pet_id: str, wait: bool = False) -> PetScoreResponse:
        """Handle GET /users/{user_id}/matches/{pet_id} requests.

        Without ``wait`` this never blocks on the oracle and may answer
        ``pending``; with it the score is computed before responding.
        """
        try:
            if wait:
                score = await self._assembler.score_pet(user_id, pet_id)
            else:
                score = self._assembler.score_for(user_id, pet_id)
        except (ProfileNotFound, PetNotFound) as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to score pet: {e}",
            ) from e

        return PetScoreResponse(
            user_id=user_id,
            pet_id=pet_id,
            pending=score is None,
            score=score,
        )

    async def profile_changed(self, user_id: str) -> dict:
        """Handle POST /users/{user_id}/profile/changed requests."""
        self._assembler.notify_profile_changed(user_id)
        return {"success": True, "state": self._assembler.state(user_id).value}

    async def catalog_changed(self) -> dict:
        """Handle POST /catalog/changed requests."""
        self._assembler.notify_catalog_changed()
        return {"success": True}

    async def clear_scores(self, user_id: str) -> dict:
        """Handle DELETE /users/{user_id}/scores requests."""
        try:
            count = self._assembler.invalidate_scores(user_id)
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear scores: {e}",
            ) from e

        return {
            "success": True,
            "deleted_count": count,
            "message": f"Cleared cached scores for user {user_id}",
        }

    async def get_stats(self) -> StatsResponse:
        """Handle GET /stats requests."""
        try:
            cache_stats = self._assembler.cache.get_stats()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

        return StatsResponse(
            total_entries=cache_stats.get("total_entries", 0),
            oracle_model=self._oracle.model_name,
            batch_concurrency=self._assembler.scorer.concurrency,
            metrics=self._assembler.metrics.to_dict(),
        )

    async def health_check(self, check_oracle: bool = False) -> HealthCheckResponse:
        """Handle GET /health requests.

        The oracle is only probed on request since each probe is a paid call.
        """
        cache_healthy = self._assembler.cache.is_healthy()
        oracle_healthy = await self._oracle.is_available() if check_oracle else None
        healthy = cache_healthy and oracle_healthy is not False

        return HealthCheckResponse(
            status="healthy" if healthy else "unhealthy",
            cache_healthy=cache_healthy,
            oracle_healthy=oracle_healthy,
        )
