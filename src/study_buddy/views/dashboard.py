"""Dashboard screen."""

from study_buddy.views.session_gate import SessionGatedView


class DashboardView(SessionGatedView):
    """Landing screen for signed-in users."""

    @property
    def greeting(self) -> str | None:
        if self.profile is None:
            return None
        return f"Welcome, {self.profile.display_name}!"
