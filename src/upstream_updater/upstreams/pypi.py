"""PyPI package upstream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import httpx

from upstream_updater.upstreams.base import Upstream
from upstream_updater.versioning.model import Version
from upstream_updater.versioning.schema import Schema


@dataclass
class PyPIUpstream(Upstream):
    name: ClassVar[str] = "pypi"

    package: str
    upstream_priority: float = 0.0
    index_url: str = "https://pypi.org/"

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        payload = await self._get_json(client, f"{self.index_url}pypi/{self.package}/json")
        info = payload.get("info") if isinstance(payload, dict) else None
        latest = info.get("version") if isinstance(info, dict) else None
        if not latest:
            return None
        if not isinstance(latest, str):
            raise self._payload_error("'info.version' is not a string")
        return self._accept(latest, schema)

    def release_url(self, version: Version) -> str:
        return f"{self.index_url}project/{self.package}/{version.raw}/"
