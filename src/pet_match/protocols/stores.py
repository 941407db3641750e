"""Catalog and profile store protocols.

Both stores are owned by other systems; the engine only reads from them.
"""

from typing import Any, Protocol, runtime_checkable

from pet_match.entities import Pet


@runtime_checkable
class CatalogStore(Protocol):
    """Read-only access to the adoptable pet catalog.

    Eventually consistent results are acceptable.
    """

    async def list_pets(self) -> list[Pet]:
        """Return every pet currently in the catalog, in catalog order."""
        ...


@runtime_checkable
class ProfileStore(Protocol):
    """Read-only access to user profile documents."""

    async def get_profile(self, user_id: str) -> dict[str, Any] | None:
        """Return the raw profile document for a user.

        The document follows the ProfileDocument contract (see dto.profile):
        ``buyerPreferences``, ``preferencesLastUpdated``, ``favorites`` and
        ``dislikes``.

        Args:
            user_id: The user to look up

        Returns:
            The profile document, or None if the user has no profile
        """
        ...
