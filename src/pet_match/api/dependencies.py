"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from pet_match.config import configure_logging, settings
from pet_match.handlers import MatchHandler
from pet_match.protocols import ScoreStore, ScoringOracle
from pet_match.repositories import (
    InMemoryCatalogStore,
    InMemoryProfileStore,
    InMemoryScoreStore,
    OllamaScoringOracle,
    OpenAIScoringOracle,
    RedisScoreStore,
    load_seed_file,
)
from pet_match.services import MatchAssembler

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> MatchHandler:
    """Dependency injection for MatchHandler from app.state.

    Raises:
        RuntimeError: If the handler is not initialized
    """
    handler = getattr(request.app.state, "match_handler", None)
    if handler is None:
        raise RuntimeError("MatchHandler not initialized. Check lifespan setup.")
    return handler


def build_oracle() -> ScoringOracle:
    """Create the scoring oracle selected by ORACLE_PROVIDER."""
    if settings.oracle_provider.lower() == "ollama":
        return OllamaScoringOracle.create()
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; every score will fall back to neutral")
    return OpenAIScoringOracle.create()


def build_score_store() -> ScoreStore:
    """Create the score store selected by SCORE_STORE."""
    if settings.uses_redis:
        return RedisScoreStore.create()
    return InMemoryScoreStore.create()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Catalog and profile stores (seeded from SEED_FILE when set)
    2. Scoring oracle and score store, chosen by settings
    3. MatchAssembler - stored in app.state.assembler
    4. MatchHandler - stored in app.state.match_handler

    Cleanup:
        Cancels in-flight cycles, closes the oracle client and removes
        everything from app.state on shutdown
    """
    configure_logging()

    if settings.seed_file:
        catalog_store, profile_store = load_seed_file(settings.seed_file)
    else:
        catalog_store, profile_store = InMemoryCatalogStore(), InMemoryProfileStore()

    oracle = build_oracle()
    assembler = MatchAssembler.create(
        catalog_store=catalog_store,
        profile_store=profile_store,
        oracle=oracle,
        score_store=build_score_store(),
        concurrency=settings.batch_concurrency,
        timeout=settings.oracle_timeout,
    )

    app.state.catalog_store = catalog_store
    app.state.profile_store = profile_store
    app.state.oracle = oracle
    app.state.assembler = assembler
    app.state.match_handler = MatchHandler(assembler=assembler, oracle=oracle)

    logger.info(f"Match engine initialized (oracle: {oracle.model_name}, store: {settings.score_store})")

    yield

    await assembler.close()
    await oracle.close()

    del app.state.match_handler
    del app.state.assembler
    del app.state.oracle
    del app.state.profile_store
    del app.state.catalog_store
    logger.info("Match engine shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[MatchHandler, Depends(get_handler)]