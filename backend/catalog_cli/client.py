"""HTTP client helpers for the catalog CLI."""
from __future__ import annotations

import httpx


def create_client(base_url: str, *, timeout: float = 30.0, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Instantiate an HTTPX client; cookies persist so a login carries over."""

    return httpx.Client(base_url=base_url, timeout=timeout, transport=transport)
