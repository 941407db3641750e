import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis (only used when SCORE_STORE=redis)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Score cache
    score_store: str = os.getenv("SCORE_STORE", "memory")
    score_key_prefix: str = os.getenv("SCORE_KEY_PREFIX", "pet_match:score")
    score_ttl: int = int(os.getenv("SCORE_TTL", "0"))  # 0 = never expires
    score_cache_max_entries: int = int(os.getenv("SCORE_CACHE_MAX_ENTRIES", "0"))  # 0 = unbounded

    # Scoring oracle
    oracle_provider: str = os.getenv("ORACLE_PROVIDER", "openai")
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    oracle_model: str = os.getenv("ORACLE_MODEL", "gpt-4")
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1")
    oracle_timeout: float = float(os.getenv("ORACLE_TIMEOUT", "5.0"))
    oracle_temperature: float = float(os.getenv("ORACLE_TEMPERATURE", "0.7"))

    # Batch scoring
    batch_concurrency: int = int(os.getenv("BATCH_CONCURRENCY", "5"))

    # Optional JSON file with {"pets": [...], "profiles": {...}} for the in-memory stores
    seed_file: str | None = os.getenv("SEED_FILE")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def uses_redis(self) -> bool:
        """Check if scores should be kept in Redis instead of process memory."""
        return self.score_store.lower() == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.score_store.lower() not in ("memory", "redis"):
            raise ValueError(f"SCORE_STORE must be 'memory' or 'redis', got {self.score_store!r}")

        if self.oracle_provider.lower() not in ("openai", "ollama"):
            raise ValueError(
                f"ORACLE_PROVIDER must be 'openai' or 'ollama', got {self.oracle_provider!r}"
            )

        if self.oracle_timeout <= 0:
            raise ValueError("ORACLE_TIMEOUT must be positive")

        if self.batch_concurrency < 1:
            raise ValueError("BATCH_CONCURRENCY must be at least 1")

        if self.score_ttl < 0 or self.score_cache_max_entries < 0:
            raise ValueError("SCORE_TTL and SCORE_CACHE_MAX_ENTRIES must not be negative")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the API process and scripts."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
