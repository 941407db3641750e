"""In-process implementation of ScoreStore.

The default store: a dictionary keyed by (user_id, pet_id), safe for
concurrent use from several in-flight scoring tasks (and threads). With
``max_entries`` set it evicts least recently used entries; without it the
store grows for the lifetime of the process.
"""

import logging
import threading
from collections import OrderedDict

from pet_match.config import settings
from pet_match.entities import ScoreEntry

logger = logging.getLogger(__name__)


class InMemoryScoreStore:
    """Dictionary-backed implementation of the ScoreStore protocol.

    This class satisfies the ScoreStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        """Initialize the store.

        Args:
            max_entries: LRU bound on stored entries. None or 0 means unbounded.
        """
        self._max_entries = max_entries or None
        self._entries: OrderedDict[tuple[str, str], ScoreEntry] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def create(cls, max_entries: int | None = None) -> "InMemoryScoreStore":
        """Factory method using settings for the LRU bound.

        Args:
            max_entries: Override for SCORE_CACHE_MAX_ENTRIES.

        Returns:
            Configured InMemoryScoreStore
        """
        if max_entries is None:
            max_entries = settings.score_cache_max_entries
        return cls(max_entries=max_entries)

    def get(self, user_id: str, pet_id: str) -> ScoreEntry | None:
        key = (user_id, pet_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._max_entries:
                self._entries.move_to_end(key)
            return entry

    def put(self, entry: ScoreEntry) -> None:
        with self._lock:
            self._entries[entry.key] = entry
            self._entries.move_to_end(entry.key)
            if self._max_entries:
                while len(self._entries) > self._max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug(f"Evicted score for user {evicted[0]}, pet {evicted[1]}")

    def delete(self, user_id: str, pet_id: str) -> bool:
        with self._lock:
            return self._entries.pop((user_id, pet_id), None) is not None

    def delete_user(self, user_id: str) -> int:
        with self._lock:
            keys = [key for key in self._entries if key[0] == user_id]
            for key in keys:
                del self._entries[key]
            return len(keys)

    def clear_all(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def count_all(self) -> int:
        with self._lock:
            return len(self._entries)

    def health_check(self) -> bool:
        return True

    @property
    def max_entries(self) -> int | None:
        return self._max_entries
