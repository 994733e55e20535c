"""Behavior shared by every screen that requires a signed-in user."""

import asyncio
import logging

from study_buddy.domain.errors import RemoteUnavailable
from study_buddy.domain.models import Profile, Session
from study_buddy.services.profiles import ProfileRepository
from study_buddy.services.sessions import SessionManager, Subscription
from study_buddy.views.navigation import Navigator, Route

_logger = logging.getLogger(__name__)


class SessionGatedView:
    """Keeps a screen's profile in sync with the session.

    Mount from a running event loop: profile loads are scheduled as tasks.
    A session change cancels any load still running for the previous one.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        profiles: ProfileRepository,
        navigator: Navigator,
    ) -> None:
        self.session_manager = session_manager
        self.profiles = profiles
        self.navigator = navigator
        self.profile: Profile | None = None
        self.loading = True
        self.error: str | None = None
        self._subscription: Subscription | None = None
        self._load_task: asyncio.Task[None] | None = None
        self._redirected = False

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    def mount(self) -> None:
        if self._subscription is None:
            self._subscription = self.session_manager.subscribe(self._on_session)

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._cancel_load()

    async def wait_until_loaded(self) -> None:
        """Wait for the profile load in progress, if any."""
        if self._load_task is not None:
            await asyncio.gather(self._load_task, return_exceptions=True)

    async def logout(self) -> None:
        await self.session_manager.sign_out()
        self.navigator.replace(Route.LANDING)

    def _on_session(self, session: Session | None) -> None:
        self._cancel_load()
        if session is None:
            self.profile = None
            self.loading = False
            if not self._redirected:
                self._redirected = True
                self.navigator.replace(Route.SIGN_IN)
            return
        self._redirected = False
        self.loading = True
        self.error = None
        self._load_task = asyncio.get_running_loop().create_task(
            self._load_profile(session)
        )

    async def _load_profile(self, session: Session) -> None:
        try:
            profile = await self.profiles.fetch_or_default(session)
        except RemoteUnavailable as exc:
            _logger.warning("Error fetching profile: uid=%s", session.uid)
            self.error = exc.message
        else:
            if session == self.session_manager.current:
                self.profile = profile
        finally:
            if asyncio.current_task() is self._load_task:
                self.loading = False

    def _cancel_load(self) -> None:
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        self._load_task = None
