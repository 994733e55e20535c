"""Error taxonomy surfaced to views."""

from enum import StrEnum


class AuthErrorCode(StrEnum):
    """Normalized identity provider rejection codes."""

    INVALID_EMAIL = "invalid_email"
    USER_NOT_FOUND = "user_not_found"
    WRONG_PASSWORD = "wrong_password"
    EMAIL_IN_USE = "email_in_use"
    WEAK_PASSWORD = "weak_password"


class StudyBuddyError(Exception):
    """Base error carrying a message that is safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StudyBuddyError):
    """Raised before any network call when form input is incomplete or invalid."""


class InvalidCredentials(StudyBuddyError):
    """Raised when the identity provider rejects an email/password pair."""

    def __init__(
        self, message: str = "Invalid email or password. Please try again."
    ) -> None:
        super().__init__(message)


class AccountCreationError(StudyBuddyError):
    """Raised when the identity provider refuses to create an account."""

    def __init__(self, code: str | None, message: str) -> None:
        super().__init__(message)
        self.code = code


class RemoteUnavailable(StudyBuddyError):
    """Raised on transport or storage failures that a retry may fix."""

    def __init__(
        self, message: str = "Service is unavailable. Please try again."
    ) -> None:
        super().__init__(message)


class UploadFailed(StudyBuddyError):
    """Raised when the image upload endpoint does not return a hosted URL."""

    def __init__(
        self, message: str = "Could not upload the picture. Please try again."
    ) -> None:
        super().__init__(message)


class ProviderAuthError(Exception):
    """Raised by identity adapters with a normalized rejection code."""

    def __init__(self, code: str | None) -> None:
        super().__init__(code or "unknown")
        self.code = code
