"""Preference & history reader.

Turns a raw profile document into a validated UserSnapshot, or one of the
profile errors the assembler branches on.
"""

import logging

from pydantic import ValidationError

from pet_match.dto import BuyerPreferencesDocument, ProfileDocument
from pet_match.entities import UserSnapshot
from pet_match.errors import PreferencesInvalid, PreferencesMissing, ProfileNotFound
from pet_match.protocols import ProfileStore

logger = logging.getLogger(__name__)


class PreferenceReader:
    """Reads a user's preferences and like/dislike history from the profile store."""

    def __init__(self, profile_store: ProfileStore) -> None:
        self._profiles = profile_store

    async def read(self, user_id: str) -> UserSnapshot:
        """Read and validate the user's current state.

        Args:
            user_id: The user to read

        Returns:
            UserSnapshot with validated preferences

        Raises:
            ProfileNotFound: If the user has no profile document
            PreferencesMissing: If preferences were never set
            PreferencesInvalid: If stored preferences contain unrecognized values
        """
        raw = await self._profiles.get_profile(user_id)
        if raw is None:
            raise ProfileNotFound(user_id)

        try:
            document = ProfileDocument.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Profile document for user {user_id} is invalid: {e}")
            raise PreferencesInvalid(user_id, str(e)) from e

        if document.buyer_preferences is None:
            raise PreferencesMissing(user_id)

        try:
            preferences = BuyerPreferencesDocument.model_validate(document.buyer_preferences)
        except ValidationError as e:
            logger.warning(f"Preferences for user {user_id} rejected: {e}")
            raise PreferencesInvalid(user_id, str(e)) from e

        disliked = frozenset(document.dislikes)
        liked = frozenset(document.favorites) - disliked
        if len(liked) != len(set(document.favorites)):
            logger.warning(f"User {user_id} has pets in both favorites and dislikes; keeping dislikes")

        return UserSnapshot(
            user_id=user_id,
            preferences=preferences.to_entity(),
            preferences_last_updated=document.preferences_timestamp,
            liked_ids=liked,
            disliked_ids=disliked,
        )
