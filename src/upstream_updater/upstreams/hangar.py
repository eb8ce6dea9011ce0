"""Hangar (PaperMC) upstream with one request per release channel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import httpx

from upstream_updater.errors import ClassifierTypeMismatch
from upstream_updater.upstreams.base import Upstream
from upstream_updater.versioning.arbitration import prioritize_channel_versions
from upstream_updater.versioning.model import Version
from upstream_updater.versioning.schema import ClassifierSpec, Schema

_MISSING_CHANNEL = {400, 404}


@dataclass
class HangarUpstream(Upstream):
    """Queries the latest version of every channel declared by the schema.

    Each non-ignored classifier spec names a channel (its ``channel`` field,
    falling back to its ``name``). The channel versions are arbitrated by
    classifier priority, so the most stable channel with a release wins.
    """

    name: ClassVar[str] = "hangar"

    project_id: str
    upstream_priority: float = 0.0
    api_url: str = "https://hangar.papermc.io/api/v1/"
    web_url: str = "https://hangar.papermc.io/"

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        channels = [spec for spec in schema.classifiers if not spec.ignore]
        if not channels:
            raise ClassifierTypeMismatch(
                "Hangar needs at least one non-ignored classifier to name a channel"
            )

        url = f"{self.api_url}projects/{self.project_id}/latest"
        found: list[tuple[str, ClassifierSpec]] = []
        for spec in channels:
            response = await self._get(client, url, params={"channel": spec.channel_name})
            if response.status_code in _MISSING_CHANNEL:
                self.logger.debug("upstream.channel.missing", channel=spec.channel_name)
                continue
            self._require_success(response)
            value = response.text.strip()
            if value:
                found.append((value, spec))

        chosen = prioritize_channel_versions(found)
        if chosen is None:
            return None
        return self._accept(chosen, schema)

    def release_url(self, version: Version) -> str:
        return f"{self.web_url}{self.project_id}/versions/{version.raw}"
