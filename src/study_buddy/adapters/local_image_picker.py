"""Image picker that asks for a path on the local filesystem."""

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from study_buddy.domain.models import LocalImage
from study_buddy.services.media import ImagePicker

_logger = logging.getLogger(__name__)


@dataclass
class PromptImagePicker(ImagePicker):
    """Resolves an image path from a prompt; a blank answer cancels."""

    prompt: Callable[[str], str] = input
    message: str = "Path to profile picture (leave blank to cancel): "
    allowed_types: frozenset[str] = field(
        default_factory=lambda: frozenset({"image/jpeg", "image/png", "image/webp"})
    )

    async def pick(self) -> LocalImage | None:
        """Return the chosen image, or None when cancelled or unusable."""
        answer = self.prompt(self.message).strip()
        if not answer:
            return None
        path = Path(answer).expanduser().resolve()
        if not path.is_file():
            _logger.warning("Picked image does not exist: %s", path)
            return None
        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type not in self.allowed_types:
            _logger.warning("Picked file is not a supported image: %s", path)
            return None
        return LocalImage(path=path, mime_type=mime_type)
