"""Registration screen."""

import dataclasses
from dataclasses import dataclass

from study_buddy.domain.errors import StudyBuddyError
from study_buddy.domain.models import PendingRegistration, Profile
from study_buddy.services.media import registration_owner_key
from study_buddy.services.registration import RegistrationOrchestrator
from study_buddy.views.navigation import Navigator, Route


@dataclass
class RegisterView:
    """Registration form with an optional profile picture.

    Form fields survive failed attempts so the user only fixes what failed.
    While an attempt is running, further picks and submits are ignored.
    """

    orchestrator: RegistrationOrchestrator
    navigator: Navigator
    form: PendingRegistration = dataclasses.field(
        default_factory=lambda: PendingRegistration("", "", "", "")
    )
    error: str | None = None
    submitting: bool = False

    @property
    def busy(self) -> bool:
        owner_key = registration_owner_key(self.form.email)
        return (
            self.submitting
            or self.orchestrator.in_progress
            or self.orchestrator.media.is_uploading(owner_key)
        )

    @property
    def preview_url(self) -> str:
        if self.form.image is not None:
            return self.form.image.path.as_uri()
        return self.orchestrator.profiles.placeholder_photo_url

    def update(self, **fields: str) -> None:
        """Set one or more of name, email, password and confirm_password."""
        self.form = dataclasses.replace(self.form, **fields)

    async def pick_image(self) -> None:
        if self.busy:
            return
        image = await self.orchestrator.media.pick_image()
        if image is not None:
            self.form = dataclasses.replace(self.form, image=image)

    def skip_image(self) -> None:
        self.form = dataclasses.replace(self.form, image=None)

    async def submit(self) -> Profile | None:
        """Register and go to sign-in; failures are shown inline."""
        if self.busy:
            return None
        self.submitting = True
        try:
            profile = await self.orchestrator.register(self.form)
        except StudyBuddyError as exc:
            self.error = exc.message
            return None
        finally:
            self.submitting = False
        return self._done(profile)

    async def retry_profile_write(self) -> Profile | None:
        if self.busy:
            return None
        self.submitting = True
        try:
            profile = await self.orchestrator.retry_profile_write()
        except StudyBuddyError as exc:
            self.error = exc.message
            return None
        finally:
            self.submitting = False
        return self._done(profile)

    def open_sign_in(self) -> None:
        self.navigator.push(Route.SIGN_IN)

    def _done(self, profile: Profile) -> Profile:
        self.error = None
        self.navigator.replace(Route.SIGN_IN)
        return profile
