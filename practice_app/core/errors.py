"""Error taxonomy shared by the session controller, the API client and the UI."""

from __future__ import annotations


class PracticeError(Exception):
    """Base class for every error raised by the practice client."""


class QuotaExceeded(PracticeError):
    """Raised when a free-tier user has no attempts left."""

    def __init__(self, attempts_used: int, attempts_limit: int) -> None:
        super().__init__(
            f"Attempt quota exhausted ({attempts_used}/{attempts_limit}). Upgrade to continue practicing."
        )
        self.attempts_used = attempts_used
        self.attempts_limit = attempts_limit


class Unauthenticated(PracticeError):
    """Raised when no user is logged in or the token was rejected."""


class InvalidSessionState(PracticeError):
    """Raised when an operation is not allowed in the session's current state."""


class ContentProviderError(PracticeError):
    """Base class for failures reported by the content backend."""


class FetchError(ContentProviderError):
    """Quiz content could not be retrieved."""


class NotFoundError(FetchError):
    """The requested quiz or attempt does not exist."""


class CreationError(ContentProviderError):
    """A new attempt record could not be created."""


class SaveError(ContentProviderError):
    """Answers could not be pushed to the attempt record."""


class SubmitError(ContentProviderError):
    """The attempt could not be finalized."""


class RegistrationError(PracticeError):
    """Raised when a new account is rejected locally or by the server."""
