from abc import ABC
from datetime import datetime


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when the request has no valid session."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when login fails. Never says whether the email or the password was wrong."""

    def __init__(self, message: str = "Email or password is incorrect") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConflictError(UserError):
    """Raised when an action conflicts with existing state (duplicate account, self-follow)."""


class RateLimitError(UserError):
    """Raised when a per-user quota is exhausted for the current window."""

    def __init__(self, reset_at: datetime, message: str | None = None) -> None:
        self.reset_at = reset_at
        if message is None:
            message = f"Upload limit reached. Please try again after {reset_at:%H:%M} UTC."
        super().__init__(message)


class InternalError(UserError):
    """Raised when a backing store fails. The message is generic, details go to the log."""

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message)
