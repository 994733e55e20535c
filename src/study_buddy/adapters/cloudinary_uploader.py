"""Cloudinary unsigned image upload client."""

import logging
from dataclasses import dataclass

import httpx
from pydantic import BaseModel, Field

from study_buddy.domain.errors import UploadFailed
from study_buddy.domain.models import LocalImage
from study_buddy.services.media import ImageUploader

_logger = logging.getLogger(__name__)


class CloudinaryUploadResponse(BaseModel):
    """Fields we rely on from a Cloudinary upload response."""

    secure_url: str = Field(min_length=1)


@dataclass
class HttpxCloudinaryUploader(ImageUploader):
    """Uploads images with an unsigned preset using httpx."""

    cloud_name: str
    upload_preset: str
    folder: str
    http_client: httpx.AsyncClient
    base_url: str = "https://api.cloudinary.com/v1_1"
    timeout: float = 30.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        cloud_name: str,
        upload_preset: str,
        folder: str,
        base_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 30.0,
    ) -> "HttpxCloudinaryUploader":
        """Create an uploader with a managed httpx session."""
        return cls(
            cloud_name=cloud_name,
            upload_preset=upload_preset,
            folder=folder,
            http_client=httpx.AsyncClient(),
            base_url=base_url,
            timeout=timeout,
        )

    async def upload(self, image: LocalImage, destination: str) -> str:
        """Upload an image as `<destination>.jpg` and return its secure URL."""
        try:
            content = image.path.read_bytes()
        except OSError as exc:
            raise UploadFailed("Could not read the selected picture.") from exc

        url = f"{self.base_url}/{self.cloud_name}/image/upload"
        try:
            response = await self.http_client.post(
                url,
                data={"upload_preset": self.upload_preset, "folder": self.folder},
                files={"file": (f"{destination}.jpg", content, image.mime_type)},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise UploadFailed() from exc

        if not response.is_success:
            _logger.warning("Cloudinary upload rejected: status=%s", response.status_code)
            raise UploadFailed()
        try:
            payload = CloudinaryUploadResponse.model_validate(response.json())
        except ValueError as exc:
            _logger.warning("Cloudinary response missing secure_url")
            raise UploadFailed() from exc
        return payload.secure_url

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
