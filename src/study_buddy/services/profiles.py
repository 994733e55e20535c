"""Profile reads and writes keyed by session identity."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from study_buddy.domain.errors import RemoteUnavailable
from study_buddy.domain.models import (
    PROFILE_FIELDS,
    Found,
    Profile,
    ProfileFields,
    ProfileLookup,
    Session,
    Synthesized,
)

_logger = logging.getLogger(__name__)


class ProfileStore(Protocol):
    """Keyed document store holding one profile record per uid."""

    async def get(self, uid: str) -> dict[str, object] | None:
        """Return the stored record, or None when absent."""

    async def set(self, uid: str, fields: dict[str, object]) -> None:
        """Write the full record, replacing any previous one."""

    async def merge(self, uid: str, fields: dict[str, object]) -> None:
        """Update only the named fields of the record."""


@dataclass
class ProfileRepository:
    """Fetch-or-default reads and retried writes for profiles."""

    store: ProfileStore
    placeholder_photo_url: str
    write_attempts: int = 3
    write_backoff_seconds: float = 0.5

    async def lookup(self, session: Session) -> ProfileLookup:
        """Load the profile for a session, tagging whether it was stored."""
        record = await self.store.get(session.uid)
        if record is None:
            _logger.info("No profile stored for uid=%s; synthesizing", session.uid)
            return Synthesized(Profile.synthesize(session))
        return Found(Profile.from_record(session.uid, record))

    async def fetch_or_default(self, session: Session) -> Profile:
        """Return the stored profile or one synthesized from the session."""
        result = await self.lookup(session)
        return result.profile

    async def create(self, uid: str, fields: ProfileFields) -> None:
        """Write a new profile record; repeated calls overwrite."""
        await self._write(self.store.set, uid, fields.as_record())

    async def update_field(self, uid: str, key: str, value: object) -> None:
        """Update one field, leaving the rest of the record untouched."""
        if key not in PROFILE_FIELDS:
            raise ValueError(f"Unknown profile field: {key}")
        await self._write(self.store.merge, uid, {key: value})

    async def _write(
        self,
        operation: Callable[[str, dict[str, object]], Awaitable[None]],
        uid: str,
        fields: dict[str, object],
    ) -> None:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.write_attempts),
            wait=wait_exponential(multiplier=self.write_backoff_seconds, max=8),
            retry=retry_if_exception_type(RemoteUnavailable),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    _logger.warning(
                        "Retrying profile write: uid=%s attempt=%s",
                        uid,
                        attempt.retry_state.attempt_number,
                    )
                await operation(uid, fields)
