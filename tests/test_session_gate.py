"""Tests for session-gated screens."""

import asyncio

from study_buddy.domain.errors import RemoteUnavailable
from study_buddy.services.profiles import ProfileRepository
from study_buddy.services.sessions import SessionManager
from study_buddy.views.dashboard import DashboardView
from study_buddy.views.navigation import Route
from tests.conftest import FakeIdentityProvider, InMemoryProfileStore, RecordingNavigator


def test_unauthenticated_mount_redirects_to_sign_in(
    session_manager: SessionManager,
    profile_repository: ProfileRepository,
    navigator: RecordingNavigator,
) -> None:
    async def scenario() -> DashboardView:
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        return view

    view = asyncio.run(scenario())

    assert navigator.replaced == [Route.SIGN_IN]
    assert view.profile is None
    assert view.loading is False


def test_sign_in_without_profile_record_shows_email(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
    navigator: RecordingNavigator,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1", uid="uid-ada")

    async def scenario() -> DashboardView:
        await session_manager.sign_in("ada@x.com", "secret1")
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        await view.wait_until_loaded()
        return view

    view = asyncio.run(scenario())

    assert view.profile is not None
    assert view.profile.fullname is None
    assert view.greeting == "Welcome, ada@x.com!"
    assert navigator.replaced == []


def test_greeting_prefers_fullname(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
    profile_store: InMemoryProfileStore,
    navigator: RecordingNavigator,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1", uid="uid-ada")
    profile_store.records["uid-ada"] = {"fullname": "Ada", "email": "ada@x.com"}

    async def scenario() -> DashboardView:
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        await session_manager.sign_in("ada@x.com", "secret1")
        await view.wait_until_loaded()
        return view

    view = asyncio.run(scenario())

    assert view.greeting == "Welcome, Ada!"


def test_sign_out_redirects_every_mounted_view_once(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1")
    navigators = [RecordingNavigator() for _ in range(3)]

    async def scenario() -> None:
        await session_manager.sign_in("ada@x.com", "secret1")
        views = [
            DashboardView(session_manager, profile_repository, nav)
            for nav in navigators
        ]
        for view in views:
            view.mount()
        for view in views:
            await view.wait_until_loaded()
        await session_manager.sign_out()
        await session_manager.sign_out()

    asyncio.run(scenario())

    for nav in navigators:
        assert nav.replaced == [Route.SIGN_IN]


def test_unmounted_view_stops_receiving_changes(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
    navigator: RecordingNavigator,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1")

    async def scenario() -> DashboardView:
        await session_manager.sign_in("ada@x.com", "secret1")
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        await view.wait_until_loaded()
        view.unmount()
        await session_manager.sign_out()
        return view

    view = asyncio.run(scenario())

    assert navigator.replaced == []
    assert view.mounted is False


def test_stale_profile_load_is_discarded(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
    profile_store: InMemoryProfileStore,
    navigator: RecordingNavigator,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1", uid="uid-ada")
    identity_provider.add_account("bob@x.com", "secret2", uid="uid-bob")
    profile_store.records["uid-ada"] = {"fullname": "Ada"}
    profile_store.records["uid-bob"] = {"fullname": "Bob"}

    async def scenario() -> DashboardView:
        profile_store.gate = asyncio.Event()
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        await session_manager.sign_in("ada@x.com", "secret1")
        await asyncio.sleep(0)
        await session_manager.sign_out()
        await session_manager.sign_in("bob@x.com", "secret2")
        profile_store.gate.set()
        await view.wait_until_loaded()
        return view

    view = asyncio.run(scenario())

    assert view.profile is not None
    assert view.profile.uid == "uid-bob"
    assert view.loading is False


def test_profile_load_failure_sets_error(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
    profile_store: InMemoryProfileStore,
    navigator: RecordingNavigator,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1")
    profile_store.failures.append(RemoteUnavailable())

    async def scenario() -> DashboardView:
        await session_manager.sign_in("ada@x.com", "secret1")
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        await view.wait_until_loaded()
        return view

    view = asyncio.run(scenario())

    assert view.profile is None
    assert view.error == RemoteUnavailable().message
    assert view.loading is False


def test_logout_signs_out_then_opens_landing(
    session_manager: SessionManager,
    identity_provider: FakeIdentityProvider,
    profile_repository: ProfileRepository,
    navigator: RecordingNavigator,
) -> None:
    identity_provider.add_account("ada@x.com", "secret1")

    async def scenario() -> None:
        await session_manager.sign_in("ada@x.com", "secret1")
        view = DashboardView(session_manager, profile_repository, navigator)
        view.mount()
        await view.wait_until_loaded()
        await view.logout()

    asyncio.run(scenario())

    assert session_manager.current is None
    assert navigator.replaced == [Route.SIGN_IN, Route.LANDING]
