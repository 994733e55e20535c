"""User-facing messages for identity provider rejections."""

from study_buddy.domain.errors import AuthErrorCode

GENERIC_MESSAGE = "Something went wrong. Please try again."

_MESSAGES: dict[str, str] = {
    AuthErrorCode.INVALID_EMAIL: "Invalid email address.",
    AuthErrorCode.USER_NOT_FOUND: "No account found with this email.",
    AuthErrorCode.WRONG_PASSWORD: "Wrong password.",
    AuthErrorCode.EMAIL_IN_USE: "This email is already registered.",
    AuthErrorCode.WEAK_PASSWORD: "Password should be at least 6 characters.",
}


def translate(code: str | None) -> str:
    """Return the message for a provider code, or the generic fallback."""
    if code is None:
        return GENERIC_MESSAGE
    return _MESSAGES.get(code, GENERIC_MESSAGE)
