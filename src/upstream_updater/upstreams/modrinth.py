"""Modrinth project upstream."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar

import httpx

from upstream_updater.upstreams.base import Upstream
from upstream_updater.versioning.model import Version
from upstream_updater.versioning.schema import Schema


class ModrinthProjectType(StrEnum):
    MOD = "mod"
    RESOURCEPACK = "resourcepack"
    DATAPACK = "datapack"
    SHADER = "shader"
    MODPACK = "modpack"
    PLUGIN = "plugin"


@dataclass
class ModrinthUpstream(Upstream):
    name: ClassVar[str] = "modrinth"

    project_id: str
    project_type: ModrinthProjectType = ModrinthProjectType.MOD
    upstream_priority: float = 0.0
    api_url: str = "https://api.modrinth.com/v2/"

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        payload = await self._get_json(client, f"{self.api_url}project/{self.project_id}/version")
        if not isinstance(payload, list):
            raise self._payload_error("expected a list of versions")
        if not payload:
            return None

        number = payload[0].get("version_number") if isinstance(payload[0], dict) else None
        if not isinstance(number, str):
            raise self._payload_error("version is missing 'version_number'")
        return self._accept(number, schema)

    def release_url(self, version: Version) -> str:
        return (
            f"https://modrinth.com/{ModrinthProjectType(self.project_type).value}"
            f"/{self.project_id}/version/{version.raw}"
        )
