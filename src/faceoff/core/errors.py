"""Exceptions raised by the pairing and voting engine."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class FaceoffError(Exception):
    """Base exception for per-request failures.

    Attributes:
        retryable: Whether the caller may blindly retry the same request.
    """

    retryable = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(FaceoffError):
    """Malformed or self-referential request; rejected before any store access."""


class ProfileNotFoundError(FaceoffError):
    """A referenced profile does not exist (anymore)."""

    def __init__(self, profile_id: str | None = None, message: str | None = None) -> None:
        self.profile_id = profile_id
        super().__init__(message or f"Profile '{profile_id}' not found")


class StoreUnavailableError(FaceoffError):
    """The candidate store timed out or could not be reached."""

    retryable = True


class DuplicateProfileError(FaceoffError):
    """A profile with the same identity is already stored."""

    def __init__(self, profile_id: str, name: str) -> None:
        self.profile_id = profile_id
        super().__init__(f"{name} is already in the database")


class DirectoryLookupError(FaceoffError):
    """The external character directory failed or returned an unreadable answer."""

    retryable = True
