"""Gitea/Forgejo releases upstream, Codeberg by default."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import httpx

from upstream_updater.upstreams.base import Upstream
from upstream_updater.versioning.model import Version
from upstream_updater.versioning.schema import Schema


@dataclass
class CodebergUpstream(Upstream):
    """Latest release of a Gitea-compatible forge.

    ``release_path`` may contain ``{user}``, ``{repo}`` and ``{version}``;
    it is appended to ``web_url`` to build release links.
    """

    name: ClassVar[str] = "codeberg"

    user: str
    repo: str
    upstream_priority: float = 1.0
    api_url: str = "https://codeberg.org/api/v1/"
    web_url: str = "https://codeberg.org/"
    release_path: str = "{user}/{repo}/releases/tag/{version}"

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        url = f"{self.api_url}repos/{self.user}/{self.repo}/releases/latest"
        payload = await self._get_json(client, url)
        tag = payload.get("tag_name") if isinstance(payload, dict) else None
        if not isinstance(tag, str):
            raise self._payload_error("release is missing 'tag_name'")
        return self._accept(tag, schema)

    def release_url(self, version: Version) -> str:
        path = (
            self.release_path.replace("{user}", self.user)
            .replace("{repo}", self.repo)
            .replace("{version}", version.raw)
        )
        return f"{self.web_url}{path}"
