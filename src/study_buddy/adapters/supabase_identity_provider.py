"""Supabase Auth identity provider."""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass

import httpx
from supabase import AsyncClient, AuthError, AuthRetryableError, AuthWeakPasswordError

from study_buddy.domain.errors import AuthErrorCode, ProviderAuthError, RemoteUnavailable
from study_buddy.domain.models import Session, SessionTokens
from study_buddy.services.sessions import IdentityProvider

_SUPABASE_CODES: dict[str, AuthErrorCode] = {
    "email_address_invalid": AuthErrorCode.INVALID_EMAIL,
    "validation_failed": AuthErrorCode.INVALID_EMAIL,
    "user_not_found": AuthErrorCode.USER_NOT_FOUND,
    "invalid_credentials": AuthErrorCode.WRONG_PASSWORD,
    "email_exists": AuthErrorCode.EMAIL_IN_USE,
    "user_already_exists": AuthErrorCode.EMAIL_IN_USE,
    "weak_password": AuthErrorCode.WEAK_PASSWORD,
}


def normalize_auth_error(exc: AuthError) -> str | None:
    """Map a Supabase Auth error to a normalized rejection code."""
    if isinstance(exc, AuthWeakPasswordError):
        return AuthErrorCode.WEAK_PASSWORD
    code = getattr(exc, "code", None)
    if code is None:
        return None
    return _SUPABASE_CODES.get(str(code), str(code))


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Supabase Auth."""

    client: AsyncClient
    timeout: float = 15.0

    async def create_account(self, email: str, password: str) -> Session:
        """Sign up a new email/password account."""
        response = await self._call(
            self.client.auth.sign_up({"email": email, "password": password}),
            "Creating account",
        )
        return _to_session(response)

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password."""
        response = await self._call(
            self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            ),
            "Signing in",
        )
        return _to_session(response)

    async def sign_out(self) -> None:
        """Sign out of Supabase Auth."""
        await self._call(self.client.auth.sign_out(), "Signing out")

    async def restore(self, tokens: SessionTokens) -> Session:
        """Restore a session from persisted tokens."""
        response = await self._call(
            self.client.auth.set_session(tokens.access_token, tokens.refresh_token),
            "Restoring session",
        )
        return _to_session(response)

    async def _call(self, call: Awaitable, operation: str):  # type: ignore[no-untyped-def]
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except TimeoutError as exc:
            raise RemoteUnavailable(f"{operation} timed out. Please try again.") from exc
        except (AuthRetryableError, httpx.HTTPError) as exc:
            raise RemoteUnavailable() from exc
        except AuthError as exc:
            raise ProviderAuthError(normalize_auth_error(exc)) from exc


def _to_session(response) -> Session:  # type: ignore[no-untyped-def]
    user = getattr(response, "user", None)
    if user is None:
        raise ProviderAuthError(None)
    auth_session = getattr(response, "session", None)
    tokens = None
    if auth_session is not None:
        tokens = SessionTokens(
            access_token=auth_session.access_token,
            refresh_token=auth_session.refresh_token,
        )
    return Session(uid=str(user.id), email=user.email, tokens=tokens)
