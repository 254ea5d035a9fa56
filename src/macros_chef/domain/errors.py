"""Domain error types."""


class MacrosChefError(Exception):
    """Base class for errors surfaced to API clients."""


class InvalidArgumentError(MacrosChefError, ValueError):
    """Raised when an operation receives an argument it cannot accept."""


class InvalidMealDataError(MacrosChefError, ValueError):
    """Raised when external meal JSON fails validation."""


class NotFoundError(MacrosChefError, LookupError):
    """Raised when an entity does not exist or is not owned by the caller."""


class ConflictError(MacrosChefError):
    """Raised when an entity would violate a uniqueness rule."""


class AnalysisFailedError(MacrosChefError):
    """Raised when the AI model call fails."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


class AuthenticationError(MacrosChefError):
    """Raised when a bearer token cannot be verified."""
