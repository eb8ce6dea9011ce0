from __future__ import annotations

import json
import tempfile
import unittest
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import ClassVar

import httpx

from upstream_updater.checker import UpdateChecker
from upstream_updater.config.models import NotificationSettings, UpdaterSettings
from upstream_updater.errors import UnsuccessfulVersionFetch, UnsuccessfulVersionRequest, VersionSizeMismatch
from upstream_updater.runtime_logging import RuntimeLogger, configure_runtime_logging
from upstream_updater.upstreams import GitHubUpstream, Upstream
from upstream_updater.versioning import ClassifierSpec, Update, Version, build_schema
from upstream_updater.versioning.schema import Schema

SCHEMA = build_schema(["v"], ".", [ClassifierSpec(name="rc", divider="-", priority=5)])


@dataclass
class StaticUpstream(Upstream):
    name: ClassVar[str] = "static"

    raw: str | None
    upstream_priority: float = 0.0
    base_url: str = "https://example.org/releases"
    error: Exception | None = None

    async def fetch(self, client: httpx.AsyncClient, schema: Schema) -> Version | None:
        if self.error is not None:
            raise self.error
        if self.raw is None:
            return None
        return self._accept(self.raw, schema)

    def release_url(self, version: Version) -> str:
        return f"{self.base_url}/{version.raw}"


def _failing(status_code: int = 502) -> StaticUpstream:
    return StaticUpstream(
        raw=None,
        error=UnsuccessfulVersionRequest("bad gateway", upstream="static", status_code=status_code),
    )


def _read_events(path: Path) -> list[dict[str, object]]:
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class UpdateCheckerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        configure_runtime_logging(level="off")
        self._tmp = tempfile.TemporaryDirectory()
        self.log_path = Path(self._tmp.name) / "runtime.jsonl"
        self.logger = RuntimeLogger(level="debug", sink_path=self.log_path)
        self.received: list[Update] = []

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def asyncSetUp(self) -> None:
        self.client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    def _checker(self, settings: UpdaterSettings | None = None) -> UpdateChecker:
        checker = UpdateChecker(SCHEMA, settings=settings, client=self.client, logger=self.logger)
        checker.notifier.subscribe(self.received.append)
        return checker

    async def test_check_reports_newer_version(self) -> None:
        checker = self._checker()

        update = await checker.check("v1.2.0", StaticUpstream(raw="v1.3.0-rc.1"))

        self.assertEqual(
            update,
            Update("v1.3.0-rc.1", "https://example.org/releases/v1.3.0-rc.1", "static"),
        )
        self.assertEqual(self.received, [update])
        notice = next(item for item in _read_events(self.log_path) if item["event"] == "update.available")
        self.assertEqual(
            notice["message"],
            "New update has been found. Version v1.3.0-rc.1 can be downloaded from "
            "https://example.org/releases/v1.3.0-rc.1",
        )
        self.assertEqual(notice["level"], "warning")

    async def test_check_up_to_date(self) -> None:
        checker = self._checker()

        self.assertIsNone(await checker.check("v1.3.0", StaticUpstream(raw="1.3.0")))
        self.assertIsNone(await checker.check("v1.3.0", StaticUpstream(raw="v1.2.9")))
        self.assertIsNone(await checker.check("v1.3.0", StaticUpstream(raw=None)))
        self.assertEqual(self.received, [])

    async def test_check_accepts_parsed_current_version(self) -> None:
        checker = self._checker()
        update = await checker.check(SCHEMA.parse("v1.0.0"), StaticUpstream(raw="v1.0.1"))

        assert update is not None
        self.assertEqual(update.value, "v1.0.1")

    async def test_check_wraps_request_failures(self) -> None:
        checker = self._checker()

        with self.assertRaises(UnsuccessfulVersionFetch) as ctx:
            await checker.check("v1.0.0", _failing())

        self.assertIsInstance(ctx.exception.__cause__, UnsuccessfulVersionRequest)
        self.assertTrue(any(item["event"] == "check.fetch_failed" for item in _read_events(self.log_path)))

    async def test_check_propagates_comparison_errors(self) -> None:
        with self.assertRaises(VersionSizeMismatch):
            await self._checker().check("v1.0.0", StaticUpstream(raw="v2.0"))

    async def test_notification_can_be_silenced(self) -> None:
        settings = UpdaterSettings(notification=NotificationSettings(notify=False))
        checker = self._checker(settings)

        update = await checker.check("v1.0.0", StaticUpstream(raw="v1.1.0"))

        self.assertIsNotNone(update)
        self.assertEqual(len(self.received), 1)
        self.assertFalse(any(item["event"] == "update.available" for item in _read_events(self.log_path)))

    async def test_check_many_picks_the_newest(self) -> None:
        upstreams = [
            StaticUpstream(raw="v1.1.0", base_url="https://a.example"),
            StaticUpstream(raw="v1.3.0", base_url="https://b.example"),
            StaticUpstream(raw="v1.2.0", base_url="https://c.example"),
        ]

        update = await self._checker().check_many("v1.0.0", upstreams)

        assert update is not None
        self.assertEqual(update.url, "https://b.example/v1.3.0")
        self.assertEqual(len(self.received), 1)

    async def test_check_many_breaks_ties_by_upstream_priority(self) -> None:
        upstreams = [
            StaticUpstream(raw="v2.0.0", base_url="https://a.example"),
            StaticUpstream(raw="2.0.0", base_url="https://b.example", upstream_priority=1.0),
        ]

        update = await self._checker().check_many("v1.0.0", upstreams)

        assert update is not None
        self.assertEqual(update.url, "https://b.example/2.0.0")

    async def test_check_many_skips_failed_upstreams(self) -> None:
        upstreams = [_failing(503), StaticUpstream(raw="v1.1.0")]

        update = await self._checker().check_many("v1.0.0", upstreams)

        assert update is not None
        self.assertEqual(update.value, "v1.1.0")
        failed = [item for item in _read_events(self.log_path) if item["event"] == "check_many.upstream_failed"]
        self.assertEqual(len(failed), 1)
        self.assertEqual(failed[0]["status_code"], 503)

    async def test_check_many_all_failed(self) -> None:
        self.assertIsNone(await self._checker().check_many("v1.0.0", [_failing(), _failing()]))

    async def test_check_many_nothing_newer(self) -> None:
        upstreams = [StaticUpstream(raw="v1.0.0"), StaticUpstream(raw="v0.9.0")]
        self.assertIsNone(await self._checker().check_many("v1.0.0", upstreams))
        self.assertEqual(self.received, [])

    async def test_check_many_propagates_comparison_errors(self) -> None:
        with self.assertRaises(VersionSizeMismatch):
            await self._checker().check_many("v1.0.0", [StaticUpstream(raw="v1.1")])

    async def test_check_many_against_github(self) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"tag_name": "v1.3.0-rc.1"}])

        async with httpx.AsyncClient(transport=httpx.MockTransport(respond)) as client:
            checker = UpdateChecker(SCHEMA, client=client, logger=self.logger)
            update = await checker.check_many("v1.2.0", [GitHubUpstream(user="octo", repo="tool")])

        self.assertEqual(
            update,
            Update(
                "v1.3.0-rc.1",
                "https://github.com/octo/tool/releases/tag/v1.3.0-rc.1",
                "github",
            ),
        )

    async def test_periodic_checks(self) -> None:
        settings = UpdaterSettings(periodic=timedelta(milliseconds=10))
        checker = self._checker(settings)

        task = checker.start_periodic("v1.0.0", [StaticUpstream(raw="v1.1.0")], iterations=2)
        await task.wait()

        self.assertEqual(task.ticks, 2)
        self.assertEqual([update.value for update in self.received], ["v1.1.0", "v1.1.0"])

    async def test_periodic_requires_a_period(self) -> None:
        with self.assertRaises(ValueError):
            self._checker().start_periodic("v1.0.0", [StaticUpstream(raw="v1.1.0")])


class UpdateCheckerSyncTests(unittest.TestCase):
    def setUp(self) -> None:
        configure_runtime_logging(level="off")

    def test_check_sync(self) -> None:
        checker = UpdateChecker(SCHEMA)
        update = checker.check_sync("v1.0.0", StaticUpstream(raw="v1.0.1"))

        assert update is not None
        self.assertEqual(update.value, "v1.0.1")

    def test_check_many_sync(self) -> None:
        checker = UpdateChecker(SCHEMA)
        self.assertIsNone(checker.check_many_sync("v1.0.1", [StaticUpstream(raw="v1.0.1")]))

    def test_threaded_periodic_checks(self) -> None:
        received: list[Update] = []
        checker = UpdateChecker(SCHEMA, settings=UpdaterSettings(periodic=timedelta(milliseconds=10)))
        checker.notifier.subscribe(received.append)

        task = checker.start_periodic(
            "v1.0.0", [StaticUpstream(raw="v1.2.0")], threaded=True, iterations=2
        )
        task.wait(timeout=5)

        self.assertEqual(task.ticks, 2)
        self.assertEqual(len(received), 2)


if __name__ == "__main__":
    unittest.main()
