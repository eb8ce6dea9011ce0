"""Common contract for remote release sources."""

from __future__ import annotations

from typing import Any, ClassVar

import httpx

from upstream_updater.errors import UnsuccessfulVersionRequest, VersionTypeMismatch
from upstream_updater.runtime_logging import RuntimeLogger, get_runtime_logger
from upstream_updater.versioning.arbitration import Candidate
from upstream_updater.versioning.model import Update, Version
from upstream_updater.versioning.parser import parse_version
from upstream_updater.versioning.schema import Schema

JSON_ACCEPT = {"Accept": "application/json"}


class Upstream:
    """A remote that publishes version information through an HTTP API.

    Subclasses implement :meth:`fetch` and :meth:`release_url`. ``fetch``
    returns None when the upstream has no candidate (nothing published, or
    the newest release carries an ignored classifier) and raises
    :class:`UnsuccessfulVersionRequest` when the request itself fails.
    """

    name: ClassVar[str] = "upstream"
    upstream_priority: float = 0.0

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        raise NotImplementedError

    def release_url(self, version: Version) -> str:
        raise NotImplementedError

    @property
    def logger(self) -> RuntimeLogger:
        return get_runtime_logger().bind(upstream=self.name)

    def to_version(self, raw: str, schema: Schema) -> Version:
        return parse_version(raw, schema)

    def update(self, version: Version) -> Update:
        if not isinstance(version, Version):
            raise VersionTypeMismatch(
                f"Version type {type(version).__name__} cannot be turned into an update"
            )
        return Update(value=version.raw, url=self.release_url(version), upstream=self.name)

    def candidate(self, version: Version) -> Candidate:
        return Candidate(
            version=version,
            url=self.release_url(version),
            upstream_priority=self.upstream_priority,
            upstream=self.name,
        )

    def _accept(self, raw: str, schema: Schema) -> Version | None:
        value = raw.strip()
        if not value:
            self.logger.debug("upstream.fetch.empty")
            return None
        version = self.to_version(value, schema)
        if version.ignored:
            self.logger.debug("upstream.fetch.ignored", version=value)
            return None
        self.logger.debug("upstream.fetch.version", version=value)
        return version

    async def _get(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        self.logger.debug("upstream.request", url=url)
        try:
            response = await client.get(url, headers=headers, params=params)
        except httpx.HTTPError as exc:
            raise UnsuccessfulVersionRequest(
                f"Could not correctly commence version request, {exc}",
                upstream=self.name,
            ) from exc
        return response

    def _require_success(self, response: httpx.Response) -> httpx.Response:
        if not response.is_success:
            raise UnsuccessfulVersionRequest(
                f"Could not correctly commence version request, returned {response.status_code}",
                upstream=self.name,
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, client: httpx.AsyncClient, url: str) -> Any:
        response = self._require_success(await self._get(client, url, headers=JSON_ACCEPT))
        try:
            return response.json()
        except ValueError as exc:
            raise UnsuccessfulVersionRequest(
                f"Could not correctly commence version request, {exc}",
                upstream=self.name,
                status_code=response.status_code,
            ) from exc

    def _payload_error(self, detail: str) -> UnsuccessfulVersionRequest:
        return UnsuccessfulVersionRequest(
            f"Could not correctly commence version request, {detail}",
            upstream=self.name,
        )
