"""Dependency container wiring for the client core."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import acreate_client

from study_buddy.adapters.cloudinary_uploader import HttpxCloudinaryUploader
from study_buddy.adapters.file_session_store import FileSessionStore
from study_buddy.adapters.local_image_picker import PromptImagePicker
from study_buddy.adapters.supabase_identity_provider import SupabaseIdentityProvider
from study_buddy.adapters.supabase_profile_store import SupabaseProfileStore
from study_buddy.app_logging import configure_logging
from study_buddy.config import Settings
from study_buddy.services.media import ImagePicker, MediaUploadPipeline
from study_buddy.services.profiles import ProfileRepository
from study_buddy.services.registration import RegistrationOrchestrator
from study_buddy.services.sessions import SessionManager
from study_buddy.views.dashboard import DashboardView
from study_buddy.views.navigation import Navigator
from study_buddy.views.profile import ProfileView
from study_buddy.views.register import RegisterView
from study_buddy.views.sign_in import SignInView


@dataclass
class AppContainer:
    """Holds the process-wide session manager and its dependents."""

    settings: Settings
    session_manager: SessionManager
    profile_repository: ProfileRepository
    media_pipeline: MediaUploadPipeline
    registration_orchestrator: RegistrationOrchestrator
    close_resources: Callable[[], Awaitable[None]]

    def dashboard_view(self, navigator: Navigator) -> DashboardView:
        return DashboardView(self.session_manager, self.profile_repository, navigator)

    def profile_view(self, navigator: Navigator) -> ProfileView:
        return ProfileView(
            self.session_manager,
            self.profile_repository,
            navigator,
            self.media_pipeline,
        )

    def sign_in_view(self, navigator: Navigator) -> SignInView:
        return SignInView(self.session_manager, navigator)

    def register_view(self, navigator: Navigator) -> RegisterView:
        return RegisterView(self.registration_orchestrator, navigator)


async def build_container(
    settings: Settings | None = None, image_picker: ImagePicker | None = None
) -> AppContainer:
    """Create the default container and restore any persisted session."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    timeout = resolved_settings.network_timeout_seconds
    supabase_client = await acreate_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    session_manager = SessionManager(
        provider=SupabaseIdentityProvider(supabase_client, timeout=timeout),
        store=FileSessionStore(resolved_settings.session_store_path),
    )
    profile_repository = ProfileRepository(
        store=SupabaseProfileStore(
            supabase_client,
            table=resolved_settings.profiles_table,
            timeout=timeout,
        ),
        placeholder_photo_url=resolved_settings.placeholder_photo_url,
        write_attempts=resolved_settings.profile_write_attempts,
        write_backoff_seconds=resolved_settings.profile_write_backoff_seconds,
    )
    uploader = HttpxCloudinaryUploader.create(
        cloud_name=resolved_settings.cloudinary_cloud_name,
        upload_preset=resolved_settings.cloudinary_upload_preset,
        folder=resolved_settings.cloudinary_folder,
        base_url=resolved_settings.cloudinary_base_url,
        timeout=timeout,
    )
    media_pipeline = MediaUploadPipeline(
        picker=image_picker or PromptImagePicker(),
        uploader=uploader,
    )
    registration_orchestrator = RegistrationOrchestrator(
        session_manager=session_manager,
        profiles=profile_repository,
        media=media_pipeline,
    )
    await session_manager.restore()

    async def close_resources() -> None:
        await uploader.close()

    return AppContainer(
        settings=resolved_settings,
        session_manager=session_manager,
        profile_repository=profile_repository,
        media_pipeline=media_pipeline,
        registration_orchestrator=registration_orchestrator,
        close_resources=close_resources,
    )
