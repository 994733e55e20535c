"""Sign-in screen."""

from dataclasses import dataclass

from study_buddy.domain.errors import StudyBuddyError
from study_buddy.services.sessions import SessionManager
from study_buddy.views.navigation import Navigator, Route


@dataclass
class SignInView:
    """Email/password sign-in form."""

    session_manager: SessionManager
    navigator: Navigator
    error: str | None = None

    async def submit(self, email: str, password: str) -> bool:
        """Sign in and open the dashboard; failures are shown inline."""
        try:
            await self.session_manager.sign_in(email, password)
        except StudyBuddyError as exc:
            self.error = exc.message
            return False
        self.error = None
        self.navigator.replace(Route.DASHBOARD)
        return True

    def open_register(self) -> None:
        self.navigator.push(Route.REGISTER)
