"""Domain models for sessions, profiles and uploads."""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

PROFILE_FIELDS = ("fullname", "email", "profile_photo_url")


@dataclass(frozen=True)
class SessionTokens:
    """Opaque tokens used to restore a session on cold start."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class Session:
    """Represents the currently authenticated identity."""

    uid: str
    email: str | None
    authenticated: bool = True
    tokens: SessionTokens | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ProfileFields:
    """Writable profile fields."""

    fullname: str | None = None
    email: str | None = None
    profile_photo_url: str | None = None

    def as_record(self) -> dict[str, str | None]:
        return {
            "fullname": self.fullname,
            "email": self.email,
            "profile_photo_url": self.profile_photo_url,
        }


@dataclass(frozen=True)
class Profile:
    """Durable user-facing record keyed by the session uid."""

    uid: str
    fullname: str | None = None
    email: str | None = None
    profile_photo_url: str | None = None

    @property
    def display_name(self) -> str | None:
        return self.fullname or self.email

    @classmethod
    def from_record(cls, uid: str, record: dict[str, object]) -> "Profile":
        """Build a profile from a stored record, ignoring unknown columns."""
        values = {key: record.get(key) for key in PROFILE_FIELDS}
        return cls(
            uid=uid,
            fullname=_optional_str(values["fullname"]),
            email=_optional_str(values["email"]),
            profile_photo_url=_optional_str(values["profile_photo_url"]),
        )

    @classmethod
    def synthesize(cls, session: Session) -> "Profile":
        """Build the in-memory profile used when no record is stored."""
        return cls(uid=session.uid, email=session.email)


@dataclass(frozen=True)
class Found:
    """Profile loaded from the store."""

    profile: Profile


@dataclass(frozen=True)
class Synthesized:
    """Profile built from session fields because no record exists."""

    profile: Profile


ProfileLookup = Found | Synthesized


@dataclass(frozen=True)
class LocalImage:
    """Handle to an image picked on the device."""

    path: Path
    mime_type: str = "image/jpeg"


class UploadStatus(StrEnum):
    """Lifecycle of a single upload attempt."""

    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class UploadTask:
    """One image upload attempt for an owner."""

    image: LocalImage
    owner_key: str
    status: UploadStatus = UploadStatus.IDLE
    url: str | None = None


@dataclass(frozen=True)
class PendingRegistration:
    """Raw registration form fields."""

    name: str
    email: str
    password: str
    confirm_password: str
    image: LocalImage | None = None

    @property
    def validation_error(self) -> str | None:
        required = (self.name, self.email, self.password, self.confirm_password)
        if any(not value.strip() for value in required):
            return "Please fill in all fields."
        if self.password != self.confirm_password:
            return "Passwords don't match."
        return None


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
