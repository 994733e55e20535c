"""Navigation routes and the navigator interface screens talk to."""

from enum import StrEnum
from typing import Protocol


class Route(StrEnum):
    """Screen entry points."""

    LANDING = "/"
    SIGN_IN = "/sign-in"
    REGISTER = "/register"
    DASHBOARD = "/dashboard"
    PROFILE = "/profile"


class Navigator(Protocol):
    """Interface for the navigation stack."""

    def replace(self, route: Route) -> None:
        """Replace the current screen with the route."""

    def push(self, route: Route) -> None:
        """Open the route on top of the current screen."""
