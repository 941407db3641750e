"""Score storage protocol.

Defines the interface for any backend that keeps computed match scores
keyed by the composite (user_id, pet_id).

Implementations can include:
- In-process dictionary (default, optionally LRU-bounded)
- Redis hashes with optional TTL
- Any other key-value store

Eviction and expiry are the store's own policy; callers never see it.
"""

from typing import Protocol, runtime_checkable

from pet_match.entities import ScoreEntry


@runtime_checkable
class ScoreStore(Protocol):
    """Protocol for score cache backends.

    Concurrent writers may race on the same key; the last completed write
    is authoritative. Writes to different keys must never be lost.

    Example:
        ```python
        store: ScoreStore = InMemoryScoreStore()
        store: ScoreStore = RedisScoreStore.create()
        ```
    """

    def get(self, user_id: str, pet_id: str) -> ScoreEntry | None:
        """Get the entry for a (user, pet) pair.

        Args:
            user_id: The user the score belongs to
            pet_id: The scored pet

        Returns:
            The stored entry, or None if absent
        """
        ...

    def put(self, entry: ScoreEntry) -> None:
        """Store an entry, overwriting any prior entry for its key.

        Args:
            entry: The entry to store
        """
        ...

    def delete(self, user_id: str, pet_id: str) -> bool:
        """Delete the entry for a (user, pet) pair.

        Returns:
            True if an entry was deleted, False otherwise
        """
        ...

    def delete_user(self, user_id: str) -> int:
        """Delete every entry belonging to a user.

        Returns:
            Number of entries deleted
        """
        ...

    def clear_all(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries deleted
        """
        ...

    def count_all(self) -> int:
        """Count stored entries."""
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible."""
        ...
