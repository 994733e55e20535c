"""Bounded Supabase calls with transport errors mapped to the domain."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import httpx
from postgrest.exceptions import APIError

from study_buddy.domain.errors import RemoteUnavailable

T = TypeVar("T")


async def bounded(call: Awaitable[T], timeout: float, operation: str) -> T:
    """Await a Supabase call, raising RemoteUnavailable on timeout or I/O errors."""
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except TimeoutError as exc:
        raise RemoteUnavailable(f"{operation} timed out. Please try again.") from exc
    except (APIError, httpx.HTTPError) as exc:
        raise RemoteUnavailable() from exc
