"""Profile picture picking and uploading."""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Protocol

from study_buddy.domain.models import LocalImage, UploadStatus, UploadTask

_logger = logging.getLogger(__name__)


class ImagePicker(Protocol):
    """Interface for the on-device image picker."""

    async def pick(self) -> LocalImage | None:
        """Return the picked image, or None if the user cancelled."""


class ImageUploader(Protocol):
    """Interface for the object-storage upload endpoint."""

    async def upload(self, image: LocalImage, destination: str) -> str:
        """Upload the image to a named slot and return its hosted URL."""


def registration_owner_key(email: str) -> str:
    """Owner key for uploads made before the account has a uid.

    Distinct emails always map to distinct keys.
    """
    digest = hashlib.sha256(email.strip().lower().encode("utf-8")).hexdigest()
    return f"signup_{digest}"


@dataclass
class MediaUploadPipeline:
    """Turns picked images into hosted URLs.

    The pipeline never writes to the profile store; callers persist the
    returned URL so upload and persistence can be retried separately.
    """

    picker: ImagePicker
    uploader: ImageUploader
    _tasks: dict[str, UploadTask] = field(default_factory=dict, repr=False)

    async def pick_image(self) -> LocalImage | None:
        """Ask the picker for an image; None means the user cancelled."""
        image = await self.picker.pick()
        if image is None:
            _logger.info("Image pick cancelled")
        return image

    async def upload(self, image: LocalImage, owner_key: str) -> str:
        """Upload to the owner's canonical slot and return the hosted URL."""
        task = UploadTask(image=image, owner_key=owner_key)
        self._tasks[owner_key] = task
        task.status = UploadStatus.UPLOADING
        try:
            url = await self.uploader.upload(image, owner_key)
        except Exception:
            task.status = UploadStatus.FAILED
            _logger.warning("Upload failed: owner=%s", owner_key)
            raise
        task.status = UploadStatus.SUCCEEDED
        task.url = url
        _logger.info("Upload succeeded: owner=%s", owner_key)
        return url

    def task(self, owner_key: str) -> UploadTask | None:
        """Return the latest upload attempt for an owner."""
        return self._tasks.get(owner_key)

    def status(self, owner_key: str) -> UploadStatus:
        task = self._tasks.get(owner_key)
        return task.status if task else UploadStatus.IDLE

    def is_uploading(self, owner_key: str) -> bool:
        return self.status(owner_key) is UploadStatus.UPLOADING
