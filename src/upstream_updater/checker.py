"""Fetch upstream versions, compare them with the running version and notify."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import httpx

from upstream_updater.config.models import UpdaterSettings
from upstream_updater.errors import UnsuccessfulVersionFetch, UnsuccessfulVersionRequest
from upstream_updater.http import create_client
from upstream_updater.notifications import Notifier
from upstream_updater.runtime_logging import RuntimeLogger, get_runtime_logger
from upstream_updater.scheduler import PeriodicTask, ThreadedPeriodicTask
from upstream_updater.upstreams import Upstream
from upstream_updater.versioning.arbitration import Candidate, select_best_update
from upstream_updater.versioning.model import Update, Version, compare_versions
from upstream_updater.versioning.parser import parse_version
from upstream_updater.versioning.schema import Schema


class UpdateChecker:
    """Checks one or more upstreams for a version newer than the running one.

    ``check`` targets a single upstream and raises
    :class:`UnsuccessfulVersionFetch` when its request fails. ``check_many``
    fetches all upstreams concurrently, skips the ones that fail, and
    arbitrates the remaining candidates. Comparison errors always propagate.

    A ``client`` passed in is reused and left open; otherwise each check
    opens and closes its own client built from ``settings``.
    """

    def __init__(
        self,
        schema: Schema,
        *,
        settings: UpdaterSettings | None = None,
        client: httpx.AsyncClient | None = None,
        notifier: Notifier | None = None,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self.schema = schema
        self.settings = settings or UpdaterSettings()
        self._client = client
        self._logger = logger
        self.notifier = notifier or Notifier(self.settings.notification, logger=logger)

    @property
    def logger(self) -> RuntimeLogger:
        return self._logger or get_runtime_logger()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with create_client(self.settings) as client:
            yield client

    def current(self, current_version: str | Version) -> Version:
        if isinstance(current_version, Version):
            return current_version
        return parse_version(current_version, self.schema)

    async def check(self, current_version: str | Version, upstream: Upstream) -> Update | None:
        current = (
            current_version
            if isinstance(current_version, Version)
            else upstream.to_version(current_version, self.schema)
        )
        self.logger.debug("check.start", current=current.raw, upstream=upstream.name)

        async with self._session() as client:
            try:
                version = await upstream.fetch(client, self.schema)
            except UnsuccessfulVersionRequest as exc:
                self.logger.error("check.fetch_failed", upstream=upstream.name, error=str(exc))
                raise UnsuccessfulVersionFetch(
                    f"Could not fetch version from upstream {upstream.name}"
                ) from exc

        if version is None:
            self.logger.info("check.no_candidate", upstream=upstream.name)
            return None
        if compare_versions(current, version) >= 0:
            self.logger.debug("check.up_to_date", current=current.raw, latest=version.raw)
            return None

        update = upstream.update(version)
        self.notifier.send(update)
        return update

    async def check_many(
        self,
        current_version: str | Version,
        upstreams: Sequence[Upstream],
    ) -> Update | None:
        current = self.current(current_version)
        self.logger.debug(
            "check_many.start",
            current=current.raw,
            upstreams=[upstream.name for upstream in upstreams],
        )

        async with self._session() as client:
            results = await asyncio.gather(
                *(upstream.fetch(client, self.schema) for upstream in upstreams),
                return_exceptions=True,
            )

        candidates: list[Candidate] = []
        for upstream, result in zip(upstreams, results):
            if isinstance(result, UnsuccessfulVersionRequest):
                self.logger.warning(
                    "check_many.upstream_failed",
                    upstream=upstream.name,
                    status_code=result.status_code,
                    error=str(result),
                )
                continue
            if isinstance(result, BaseException):
                raise result
            if result is None:
                continue
            candidates.append(upstream.candidate(result))

        update = select_best_update(current, candidates)
        if update is None:
            self.logger.debug("check_many.up_to_date", current=current.raw, candidates=len(candidates))
            return None

        self.notifier.send(update)
        return update

    def check_sync(self, current_version: str | Version, upstream: Upstream) -> Update | None:
        return asyncio.run(self.check(current_version, upstream))

    def check_many_sync(
        self,
        current_version: str | Version,
        upstreams: Sequence[Upstream],
    ) -> Update | None:
        return asyncio.run(self.check_many(current_version, upstreams))

    def start_periodic(
        self,
        current_version: str | Version,
        upstreams: Sequence[Upstream],
        *,
        threaded: bool = False,
        iterations: int | None = None,
    ) -> PeriodicTask | ThreadedPeriodicTask:
        """Schedule ``check_many`` every ``settings.periodic``.

        The asyncio variant must be started from a running event loop; the
        threaded one works anywhere but must not share an injected client.
        """
        if self.settings.periodic is None:
            raise ValueError("settings.periodic is not configured")

        async def tick() -> None:
            await self.check_many(current_version, upstreams)

        factory = ThreadedPeriodicTask if threaded else PeriodicTask
        task = factory(tick, self.settings.periodic, iterations=iterations, logger=self._logger)
        task.start()
        return task
