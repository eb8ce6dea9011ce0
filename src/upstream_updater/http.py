"""HTTP client construction for upstream requests."""

from __future__ import annotations

import httpx

from upstream_updater.config.models import UpdaterSettings


def create_client(
    settings: UpdaterSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    settings = settings or UpdaterSettings()
    return httpx.AsyncClient(
        timeout=settings.timeouts.to_httpx(),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
        transport=transport,
    )
