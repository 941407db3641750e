"""Exception taxonomy for the match engine.

Profile errors come from the profile-read boundary and decide whether a
scoring cycle can run at all. Scoring errors come from a single oracle call
and are always recovered per item by the batch scorer.
"""


class PetMatchError(Exception):
    """Base class for all match engine errors."""


class ProfileError(PetMatchError):
    """Base class for errors reading a user's profile."""

    def __init__(self, user_id: str, message: str | None = None) -> None:
        self.user_id = user_id
        super().__init__(message or f"Profile error for user {user_id}")


class ProfileNotFound(ProfileError):
    """No profile document exists for the user. Fatal to the scoring cycle."""

    def __init__(self, user_id: str) -> None:
        super().__init__(user_id, f"No profile found for user {user_id}")


class PreferencesMissing(ProfileError):
    """The profile exists but preferences were never set.

    Soft failure: callers fall back to the neutral score for every pet.
    """

    def __init__(self, user_id: str, message: str | None = None) -> None:
        super().__init__(user_id, message or f"User {user_id} has not set preferences")


class PreferencesInvalid(PreferencesMissing):
    """Stored preferences contain values the engine does not recognize."""

    def __init__(self, user_id: str, detail: str) -> None:
        self.detail = detail
        super().__init__(user_id, f"User {user_id} has invalid preferences: {detail}")


class ScoringError(PetMatchError):
    """Base class for a failed scoring request for a single pet."""


class OracleUnavailable(ScoringError):
    """Transport failure or timeout talking to the scoring oracle."""


class OracleMalformedResponse(ScoringError):
    """The oracle answered, but not with a number."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        self.raw = raw
        super().__init__(message)


class LogicCollision(PetMatchError):
    """A pet landed in both the cached and the to-be-scored partitions."""

    def __init__(self, user_id: str, pet_id: str) -> None:
        self.user_id = user_id
        self.pet_id = pet_id
        super().__init__(f"Pet {pet_id} was both cached and rescored for user {user_id}")


class PetNotFound(PetMatchError):
    """The requested pet is not in the catalog."""

    def __init__(self, pet_id: str) -> None:
        self.pet_id = pet_id
        super().__init__(f"Pet {pet_id} is not in the catalog")
