"""Registration flow: image upload, account creation and profile write."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from study_buddy.domain.errors import StudyBuddyError, ValidationError
from study_buddy.domain.models import (
    LocalImage,
    PendingRegistration,
    Profile,
    ProfileFields,
)
from study_buddy.services.media import MediaUploadPipeline, registration_owner_key
from study_buddy.services.profiles import ProfileRepository
from study_buddy.services.sessions import SessionManager

_logger = logging.getLogger(__name__)


class RegistrationStep(StrEnum):
    """Steps of one registration attempt."""

    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING_IMAGE = "uploading_image"
    CREATING_ACCOUNT = "creating_account"
    WRITING_PROFILE = "writing_profile"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class RegistrationState:
    """Current step, with the failure reason once the attempt has failed."""

    step: RegistrationStep
    reason: StudyBuddyError | None = None


@dataclass
class _UnwrittenProfile:
    uid: str
    fields: ProfileFields


@dataclass
class RegistrationOrchestrator:
    """Runs the registration steps strictly in sequence.

    Image upload happens before account creation so a failed upload never
    leaves an orphaned account. If the profile write fails after the account
    exists, the account is kept: profile reads fall back to a synthesized
    profile, and `retry_profile_write` re-attempts only the write.
    """

    session_manager: SessionManager
    profiles: ProfileRepository
    media: MediaUploadPipeline
    history: list[RegistrationState] = field(
        default_factory=lambda: [RegistrationState(RegistrationStep.IDLE)]
    )
    _uploaded: tuple[LocalImage, str, str] | None = field(default=None, repr=False)
    _unwritten: _UnwrittenProfile | None = field(default=None, repr=False)
    _running: bool = field(default=False, repr=False)

    @property
    def state(self) -> RegistrationState:
        return self.history[-1]

    @property
    def can_retry_profile_write(self) -> bool:
        return self._unwritten is not None

    @property
    def in_progress(self) -> bool:
        return self._running

    async def register(self, pending: PendingRegistration) -> Profile:
        """Run one registration attempt and return the written profile."""
        if self._running:
            raise RuntimeError("A registration attempt is already running")
        self._running = True
        self.history = [RegistrationState(RegistrationStep.IDLE)]
        self._enter(RegistrationStep.VALIDATING)
        try:
            message = pending.validation_error
            if message is not None:
                raise ValidationError(message)
            photo_url = await self._upload_photo(pending)
            self._enter(RegistrationStep.CREATING_ACCOUNT)
            session = await self.session_manager.create_account(
                pending.email, pending.password
            )
            unwritten = _UnwrittenProfile(
                uid=session.uid,
                fields=ProfileFields(
                    fullname=pending.name,
                    email=pending.email,
                    profile_photo_url=photo_url or self.profiles.placeholder_photo_url,
                ),
            )
            self._unwritten = unwritten
            return await self._write_profile(unwritten)
        except StudyBuddyError as exc:
            self._fail(exc)
            raise
        finally:
            self._running = False

    async def retry_profile_write(self) -> Profile:
        """Re-attempt the profile write for an account that already exists."""
        unwritten = self._unwritten
        if unwritten is None:
            raise RuntimeError("No profile write is pending")
        if self._running:
            raise RuntimeError("A registration attempt is already running")
        self._running = True
        try:
            return await self._write_profile(unwritten)
        except StudyBuddyError as exc:
            self._fail(exc)
            raise
        finally:
            self._running = False

    async def _upload_photo(self, pending: PendingRegistration) -> str | None:
        if pending.image is None:
            return None
        owner_key = registration_owner_key(pending.email)
        if self._uploaded is not None:
            uploaded_image, uploaded_key, url = self._uploaded
            if (uploaded_image, uploaded_key) == (pending.image, owner_key):
                return url
        self._enter(RegistrationStep.UPLOADING_IMAGE)
        url = await self.media.upload(pending.image, owner_key)
        self._uploaded = (pending.image, owner_key, url)
        return url

    async def _write_profile(self, unwritten: _UnwrittenProfile) -> Profile:
        self._enter(RegistrationStep.WRITING_PROFILE)
        await self.profiles.create(unwritten.uid, unwritten.fields)
        self._unwritten = None
        self._uploaded = None
        self._enter(RegistrationStep.DONE)
        return Profile(uid=unwritten.uid, **unwritten.fields.as_record())

    def _enter(self, step: RegistrationStep) -> None:
        _logger.info("Registration step: %s", step)
        self.history.append(RegistrationState(step))

    def _fail(self, reason: StudyBuddyError) -> None:
        _logger.warning(
            "Registration failed at %s: %s", self.state.step, type(reason).__name__
        )
        self.history.append(RegistrationState(RegistrationStep.FAILED, reason))
