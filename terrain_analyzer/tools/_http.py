"""Shared httpx client handling for the tools."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None = None) -> AsyncIterator[httpx.AsyncClient]:
    """Use the caller's client, or open a short-lived one for this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned
