"""Profile screen with profile picture changes."""

import dataclasses
import logging

from study_buddy.domain.errors import StudyBuddyError
from study_buddy.services.media import MediaUploadPipeline
from study_buddy.services.profiles import ProfileRepository
from study_buddy.services.sessions import SessionManager
from study_buddy.views.navigation import Navigator
from study_buddy.views.session_gate import SessionGatedView

_logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "User Name"


class ProfileView(SessionGatedView):
    """Shows the user's profile and lets them replace their picture."""

    def __init__(
        self,
        session_manager: SessionManager,
        profiles: ProfileRepository,
        navigator: Navigator,
        media: MediaUploadPipeline,
    ) -> None:
        super().__init__(session_manager, profiles, navigator)
        self.media = media
        self.uploading = False

    @property
    def display_name(self) -> str:
        if self.profile is None or not self.profile.fullname:
            return DEFAULT_DISPLAY_NAME
        return self.profile.fullname

    @property
    def photo_url(self) -> str:
        if self.profile is None or not self.profile.profile_photo_url:
            return self.profiles.placeholder_photo_url
        return self.profile.profile_photo_url

    async def change_photo(self) -> bool:
        """Pick, upload and save a new picture.

        Returns False when the request was rejected, cancelled or failed.
        Only one change runs at a time per screen.
        """
        profile = self.profile
        if profile is None:
            return False
        if self.uploading or self.media.is_uploading(profile.uid):
            _logger.info("Rejected picture change while an upload is in flight")
            return False
        self.uploading = True
        self.error = None
        try:
            image = await self.media.pick_image()
            if image is None:
                return False
            url = await self.media.upload(image, profile.uid)
            await self.profiles.update_field(profile.uid, "profile_photo_url", url)
        except StudyBuddyError as exc:
            self.error = exc.message
            return False
        finally:
            self.uploading = False
        if self.profile is not None and self.profile.uid == profile.uid:
            self.profile = dataclasses.replace(self.profile, profile_photo_url=url)
        return True
