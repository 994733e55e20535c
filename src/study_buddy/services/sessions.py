"""Session ownership and auth-state subscriptions."""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from study_buddy.domain.errors import (
    AccountCreationError,
    InvalidCredentials,
    ProviderAuthError,
    RemoteUnavailable,
)
from study_buddy.domain.models import Session, SessionTokens
from study_buddy.services.error_messages import translate

_logger = logging.getLogger(__name__)

SessionListener = Callable[[Session | None], None]


class IdentityProvider(Protocol):
    """Interface for the remote identity provider."""

    async def create_account(self, email: str, password: str) -> Session:
        """Create an account and return its session."""

    async def sign_in(self, email: str, password: str) -> Session:
        """Verify credentials and return a session."""

    async def sign_out(self) -> None:
        """Revoke the provider-side session."""

    async def restore(self, tokens: SessionTokens) -> Session:
        """Rebuild a session from persisted tokens."""


class SessionStore(Protocol):
    """Local key-value storage for the persisted session token."""

    def load(self) -> SessionTokens | None:
        """Return the persisted tokens, if any."""

    def save(self, tokens: SessionTokens) -> None:
        """Persist tokens for the next cold start."""

    def clear(self) -> None:
        """Forget persisted tokens."""


@dataclass(eq=False)
class Subscription:
    """Handle returned by `SessionManager.subscribe`."""

    listener: SessionListener
    _release: Callable[["Subscription"], None] = field(repr=False)
    active: bool = True

    def unsubscribe(self) -> None:
        """Stop delivering session changes to the listener."""
        if not self.active:
            return
        self.active = False
        self._release(self)


class SessionManager:
    """Owns the live session and notifies subscribers of every change.

    Delivery is level-triggered: a new subscriber is called immediately with
    the current session. Changes published while listeners are still being
    notified are queued and delivered afterwards, in order.
    """

    def __init__(
        self, provider: IdentityProvider, store: SessionStore | None = None
    ) -> None:
        self._provider = provider
        self._store = store
        self._current: Session | None = None
        self._subscriptions: list[Subscription] = []
        self._pending: deque[Session | None] = deque()
        self._delivering = False

    @property
    def current(self) -> Session | None:
        return self._current

    def subscribe(self, listener: SessionListener) -> Subscription:
        """Register a listener and call it with the current session."""
        subscription = Subscription(listener=listener, _release=self._release)
        self._subscriptions.append(subscription)
        self._notify(subscription, self._current)
        return subscription

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password and publish the new session."""
        try:
            session = await self._provider.sign_in(email, password)
        except ProviderAuthError as exc:
            _logger.info("Sign-in rejected: code=%s", exc.code)
            raise InvalidCredentials() from exc
        self._persist(session)
        self._publish(session)
        return session

    async def create_account(self, email: str, password: str) -> Session:
        """Create an account; the new session becomes the active one."""
        try:
            session = await self._provider.create_account(email, password)
        except ProviderAuthError as exc:
            _logger.info("Account creation rejected: code=%s", exc.code)
            raise AccountCreationError(exc.code, translate(exc.code)) from exc
        self._persist(session)
        self._publish(session)
        return session

    async def sign_out(self) -> None:
        """Clear the session locally and at the provider."""
        try:
            await self._provider.sign_out()
        except (RemoteUnavailable, ProviderAuthError):
            _logger.warning("Remote sign-out failed; clearing local session")
        if self._store is not None:
            self._store.clear()
        self._publish(None)

    async def restore(self) -> Session | None:
        """Restore a persisted session on cold start."""
        if self._store is None:
            return None
        tokens = self._store.load()
        if tokens is None:
            return None
        try:
            session = await self._provider.restore(tokens)
        except ProviderAuthError as exc:
            _logger.info("Persisted session rejected: code=%s", exc.code)
            self._store.clear()
            self._publish(None)
            return None
        except RemoteUnavailable:
            _logger.warning("Could not reach identity provider to restore session")
            return None
        self._persist(session)
        self._publish(session)
        return session

    def _persist(self, session: Session) -> None:
        if self._store is not None and session.tokens is not None:
            self._store.save(session.tokens)

    def _publish(self, session: Session | None) -> None:
        self._pending.append(session)
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                next_session = self._pending.popleft()
                if next_session == self._current:
                    continue
                self._current = next_session
                _logger.info(
                    "Session changed: uid=%s",
                    next_session.uid if next_session else None,
                )
                for subscription in list(self._subscriptions):
                    if subscription.active:
                        self._notify(subscription, next_session)
        finally:
            self._delivering = False

    def _notify(self, subscription: Subscription, session: Session | None) -> None:
        try:
            subscription.listener(session)
        except Exception:
            _logger.exception("Session listener failed")

    def _release(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
