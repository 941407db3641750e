"""In-memory catalog and profile stores.

Stand-ins for the real catalog and profile databases, used by the API when
no external stores are wired in, by the demo script and by tests. They can be
seeded from a JSON file shaped like::

    {"pets": [{...PetDocument...}], "profiles": {"user-1": {...ProfileDocument...}}}
"""

import copy
import json
import logging
import time
from pathlib import Path
from typing import Any

from pet_match.dto import PetDocument
from pet_match.entities import Pet

logger = logging.getLogger(__name__)


class InMemoryCatalogStore:
    """List-backed implementation of the CatalogStore protocol."""

    def __init__(self, pets: list[Pet] | None = None) -> None:
        self._pets: list[Pet] = list(pets or [])

    @classmethod
    def from_documents(cls, documents: list[dict[str, Any]]) -> "InMemoryCatalogStore":
        """Build a catalog from raw pet documents, validating each one."""
        return cls([PetDocument.model_validate(doc).to_entity() for doc in documents])

    async def list_pets(self) -> list[Pet]:
        return list(self._pets)

    def set_pets(self, pets: list[Pet]) -> None:
        """Replace the catalog contents."""
        self._pets = list(pets)

    def add_pet(self, pet: Pet) -> None:
        self._pets.append(pet)

    def remove_pet(self, pet_id: str) -> bool:
        before = len(self._pets)
        self._pets = [pet for pet in self._pets if pet.id != pet_id]
        return len(self._pets) < before


class InMemoryProfileStore:
    """Dict-backed implementation of the ProfileStore protocol.

    The write helpers mirror what the real profile store does: editing
    preferences stamps ``preferencesLastUpdated``, and liking a pet removes
    it from the dislikes (and vice versa).
    """

    def __init__(self, profiles: dict[str, dict[str, Any]] | None = None) -> None:
        self._profiles: dict[str, dict[str, Any]] = copy.deepcopy(profiles or {})

    async def get_profile(self, user_id: str) -> dict[str, Any] | None:
        profile = self._profiles.get(user_id)
        return copy.deepcopy(profile) if profile is not None else None

    def set_profile(self, user_id: str, document: dict[str, Any]) -> None:
        self._profiles[user_id] = copy.deepcopy(document)

    def delete_profile(self, user_id: str) -> bool:
        return self._profiles.pop(user_id, None) is not None

    def set_preferences(
        self,
        user_id: str,
        preferences: dict[str, Any],
        updated_at: float | None = None,
    ) -> float:
        """Store new preferences and stamp the edit time.

        The stamp never moves backwards, even if ``updated_at`` is older
        than the current one.

        Returns:
            The new preferencesLastUpdated value
        """
        profile = self._profiles.setdefault(user_id, {})
        stamp = time.time() if updated_at is None else updated_at
        previous = profile.get("preferencesLastUpdated")
        if isinstance(previous, (int, float)) and previous > stamp:
            stamp = previous
        profile["buyerPreferences"] = copy.deepcopy(preferences)
        profile["preferencesLastUpdated"] = stamp
        return stamp

    def add_interaction(self, user_id: str, pet_id: str, liked: bool) -> None:
        """Record a like or dislike, keeping the two sets disjoint."""
        profile = self._profiles.setdefault(user_id, {})
        target, opposite = ("favorites", "dislikes") if liked else ("dislikes", "favorites")
        ids = profile.setdefault(target, [])
        if pet_id not in ids:
            ids.append(pet_id)
        profile[opposite] = [i for i in profile.get(opposite, []) if i != pet_id]

    def remove_interaction(self, user_id: str, pet_id: str) -> None:
        profile = self._profiles.get(user_id)
        if profile is None:
            return
        for name in ("favorites", "dislikes"):
            profile[name] = [i for i in profile.get(name, []) if i != pet_id]


def load_seed_file(path: str | Path) -> tuple[InMemoryCatalogStore, InMemoryProfileStore]:
    """Build in-memory stores from a JSON seed file.

    Args:
        path: Path to a JSON file with optional ``pets`` and ``profiles`` keys

    Returns:
        Tuple of (catalog store, profile store)
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    catalog = InMemoryCatalogStore.from_documents(data.get("pets", []))
    profiles = InMemoryProfileStore(data.get("profiles", {}))
    logger.info(f"Seeded {len(data.get('pets', []))} pets and {len(data.get('profiles', {}))} profiles from {path}")
    return catalog, profiles
