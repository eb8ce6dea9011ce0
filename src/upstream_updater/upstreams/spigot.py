"""SpigotMC resource upstream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import httpx

from upstream_updater.upstreams.base import Upstream
from upstream_updater.versioning.model import Version
from upstream_updater.versioning.schema import Schema


@dataclass
class SpigotUpstream(Upstream):
    name: ClassVar[str] = "spigot"

    project_id: str
    upstream_priority: float = 0.0
    api_url: str = "https://api.spigotmc.org/legacy/update.php"

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        response = await self._get(client, self.api_url, params={"resource": self.project_id})
        self._require_success(response)
        return self._accept(response.text, schema)

    def release_url(self, version: Version) -> str:  # noqa: ARG002
        return f"https://www.spigotmc.org/resources/{self.project_id}/history"
