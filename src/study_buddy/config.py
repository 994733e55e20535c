"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PLACEHOLDER_PHOTO_URL = (
    "https://www.pngkey.com/png/full/"
    "73-730477_first-name-profile-image-placeholder-png.png"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    cloudinary_cloud_name: str
    cloudinary_upload_preset: str
    cloudinary_folder: str = "ProfilePictures"
    cloudinary_base_url: str = "https://api.cloudinary.com/v1_1"
    placeholder_photo_url: str = PLACEHOLDER_PHOTO_URL
    profiles_table: str = "users"
    session_store_path: Path = Path.home() / ".study_buddy" / "session.json"
    network_timeout_seconds: float = 15.0
    profile_write_attempts: int = 3
    profile_write_backoff_seconds: float = 0.5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
