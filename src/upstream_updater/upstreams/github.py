"""GitHub releases upstream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import httpx

from upstream_updater.upstreams.base import Upstream
from upstream_updater.versioning.model import Version
from upstream_updater.versioning.schema import Schema


@dataclass
class GitHubUpstream(Upstream):
    """Newest entry of ``/repos/{user}/{repo}/releases``, pre-releases included."""

    name: ClassVar[str] = "github"

    user: str
    repo: str
    upstream_priority: float = 0.0
    api_url: str = "https://api.github.com/"
    web_url: str = "https://github.com/"

    @property
    def project(self) -> str:
        return f"{self.user}/{self.repo}"

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        payload = await self._get_json(client, f"{self.api_url}repos/{self.project}/releases")
        if not isinstance(payload, list):
            raise self._payload_error("expected a list of releases")
        if not payload:
            self.logger.debug("upstream.fetch.no_releases", project=self.project)
            return None

        tag = payload[0].get("tag_name") if isinstance(payload[0], dict) else None
        if not isinstance(tag, str):
            raise self._payload_error("release is missing 'tag_name'")
        return self._accept(tag, schema)

    def release_url(self, version: Version) -> str:
        return f"{self.web_url}{self.project}/releases/tag/{version.raw}"
