"""Domain errors surfaced to the HTTP boundary.

Services raise these; ``app.main`` maps each one to its status code.
Request-body validation errors are handled by FastAPI itself (422) and
never reach the services.
"""


class AppError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFound(AppError):
    """Raised when an activity or profile is absent or not owned by the caller."""

    status_code = 404


class Unauthorized(AppError):
    """Raised when no identity can be resolved from the request."""

    status_code = 401


class StoreError(AppError):
    """Raised when the backing store fails on a read or write."""

    status_code = 500


class SuggestionUnavailable(AppError):
    """Raised when the AI provider is not configured or gave no usable reply."""

    status_code = 503
