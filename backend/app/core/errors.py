"""Error taxonomy shared by the profile services and the HTTP layer."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    message: str


class ProfileError(Exception):
    """Base exception for filament profile operations."""


class ValidationError(ProfileError):
    """A required field is missing or a value is out of range.

    Carries the individual field errors so callers can show them next to the
    offending inputs.
    """

    def __init__(self, message: str, errors: list[FieldError] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class StorageError(ProfileError):
    """The database rejected or failed a statement.

    The message is safe to show to users; the original cause is logged where
    the error is raised and kept on ``__cause__``.
    """


class AuthorizationError(ProfileError):
    """The current user may not perform the requested mutation."""
