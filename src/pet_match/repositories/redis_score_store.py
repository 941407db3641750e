"""Redis implementation of ScoreStore.

Each (user, pet) score is one Redis hash with ``score`` and ``computed_at``
fields, so scores survive process restarts and can be shared by several API
workers. Entries optionally expire after a TTL.
"""

import logging

import redis

from pet_match.config import get_redis_client, settings
from pet_match.entities import ScoreEntry

logger = logging.getLogger(__name__)


class RedisScoreStore:
    """Redis hash-per-key implementation of the ScoreStore protocol.

    This class satisfies the ScoreStore protocol through structural
    typing - no explicit inheritance needed.

    Keys look like ``{prefix}:{user_id}:{pet_id}``. The user id is part of
    the key, so scores never leak between users.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
        ttl: int | None = None,
    ) -> None:
        """Initialize the Redis score store.

        Args:
            redis_client: Redis client instance (decode_responses=True). If None, creates default.
            key_prefix: Prefix for every key.
            ttl: Time-to-live for entries in seconds. 0 or None means no expiry.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.score_key_prefix
        self._ttl = settings.score_ttl if ttl is None else ttl

    @classmethod
    def create(
        cls,
        key_prefix: str | None = None,
        ttl: int | None = None,
    ) -> "RedisScoreStore":
        """Factory method to create RedisScoreStore with defaults.

        Args:
            key_prefix: Key prefix. If None, uses settings.
            ttl: Entry TTL in seconds. If None, uses settings.

        Returns:
            Configured RedisScoreStore
        """
        return cls(key_prefix=key_prefix, ttl=ttl)

    def _make_key(self, user_id: str, pet_id: str) -> str:
        return f"{self._prefix}:{user_id}:{pet_id}"

    def get(self, user_id: str, pet_id: str) -> ScoreEntry | None:
        data = self._client.hgetall(self._make_key(user_id, pet_id))
        if not data:
            return None

        try:
            return ScoreEntry(
                user_id=user_id,
                pet_id=pet_id,
                score=float(data["score"]),
                computed_at=float(data["computed_at"]),
            )
        except (KeyError, ValueError) as e:
            # A half-written hash is treated as absent and will be rescored
            logger.warning(f"Ignoring corrupt score entry for user {user_id}, pet {pet_id}: {e}")
            return None

    def put(self, entry: ScoreEntry) -> None:
        key = self._make_key(entry.user_id, entry.pet_id)
        pipe = self._client.pipeline()
        pipe.hset(
            key,
            mapping={
                "score": str(entry.score),
                "computed_at": str(entry.computed_at),
            },
        )
        if self._ttl:
            pipe.expire(key, self._ttl)
        pipe.execute()

    def delete(self, user_id: str, pet_id: str) -> bool:
        result: int = self._client.delete(self._make_key(user_id, pet_id))  # type: ignore[assignment]
        return result > 0

    def _delete_matching(self, pattern: str) -> int:
        count = 0
        for key in self._client.scan_iter(match=pattern):
            if self._client.delete(key):
                count += 1
        return count

    def delete_user(self, user_id: str) -> int:
        return self._delete_matching(f"{self._prefix}:{user_id}:*")

    def clear_all(self) -> int:
        count = self._delete_matching(f"{self._prefix}:*")
        logger.info(f"Cleared {count} scores from Redis")
        return count

    def count_all(self) -> int:
        count = 0
        for _ in self._client.scan_iter(match=f"{self._prefix}:*"):
            count += 1
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
