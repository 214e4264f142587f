"""Helpers shared by the service modules."""

from __future__ import annotations

import asyncio
import secrets
import time


def generate_id() -> str:
    """Return a new unique record id (epoch milliseconds plus a random suffix)."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


async def simulate_latency(seconds: float) -> None:
    """Await the configured artificial latency, if any."""
    if seconds > 0:
        await asyncio.sleep(seconds)
