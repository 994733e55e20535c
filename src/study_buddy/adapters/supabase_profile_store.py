"""Supabase-backed profile store."""

from dataclasses import dataclass

from supabase import AsyncClient

from study_buddy.adapters.supabase_calls import bounded
from study_buddy.domain.models import PROFILE_FIELDS
from study_buddy.services.profiles import ProfileStore

_COLUMNS = ", ".join(("id", *PROFILE_FIELDS))


@dataclass
class SupabaseProfileStore(ProfileStore):
    """Profile records in a Supabase table keyed by the auth uid."""

    client: AsyncClient
    table: str = "users"
    timeout: float = 15.0

    async def get(self, uid: str) -> dict[str, object] | None:
        """Return the profile row for a uid, if present."""
        response = await bounded(
            self.client.table(self.table)
            .select(_COLUMNS)
            .eq("id", uid)
            .limit(1)
            .execute(),
            self.timeout,
            "Loading profile",
        )
        if response.data:
            return dict(response.data[0])
        return None

    async def set(self, uid: str, fields: dict[str, object]) -> None:
        """Upsert every profile column; columns not given are cleared."""
        row = {key: fields.get(key) for key in PROFILE_FIELDS}
        await bounded(
            self.client.table(self.table).upsert({"id": uid, **row}).execute(),
            self.timeout,
            "Saving profile",
        )

    async def merge(self, uid: str, fields: dict[str, object]) -> None:
        """Upsert only the given columns so other columns keep their values."""
        await bounded(
            self.client.table(self.table).upsert({"id": uid, **fields}).execute(),
            self.timeout,
            "Updating profile",
        )
