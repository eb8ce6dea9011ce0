from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from upstream_updater.cli import main
from upstream_updater.errors import VersionSizeMismatch
from upstream_updater.runtime_logging import configure_runtime_logging
from upstream_updater.versioning import Update

PROJECT_TOML = """
current_version = "v1.2.0"

[schema]
prefixes = ["v"]

[[schema.classifiers]]
name = "rc"
priority = "highest"

[[upstreams]]
kind = "github"
user = "octo"
repo = "tool"

[updater]
log_level = "off"

[updater.notification]
message = "Version {version} is out: {url}"
"""

UPDATE = Update("v1.3.0-rc.1", "https://github.com/octo/tool/releases/tag/v1.3.0-rc.1", "github")


class CliE2ETests(unittest.TestCase):
    def setUp(self) -> None:
        configure_runtime_logging(level="off")
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name) / "updater.toml"
        self.project.write_text(PROJECT_TOML, encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_help(self) -> None:
        result = self.runner.invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Commands:", result.output)
        self.assertIn("check", result.output)
        self.assertIn("watch", result.output)

    def test_about(self) -> None:
        result = self.runner.invoke(main, ["about"])
        self.assertEqual(result.exit_code, 0)
        payload = json.loads(result.output)
        self.assertEqual(payload["name"], "upstream-updater")
        self.assertIn("version", payload)

    def test_config_path(self) -> None:
        result = self.runner.invoke(main, ["config-path"])
        self.assertEqual(result.exit_code, 0)
        self.assertTrue(result.output.strip().endswith("updater.toml"))

    def test_parse_with_default_schema(self) -> None:
        result = self.runner.invoke(main, ["parse", "v1.0.0-beta.2"])

        self.assertEqual(result.exit_code, 0)
        payload = json.loads(result.output)
        self.assertEqual(payload["components"], ["1", "0", "0"])
        self.assertEqual(payload["classifier"]["value"], "-beta.2")
        self.assertEqual(payload["classifier"]["components"], ["2"])
        self.assertEqual(payload["classifier"]["priority"], 4.0)

    def test_parse_with_project_schema(self) -> None:
        result = self.runner.invoke(main, ["parse", "v1.0.0-beta.2", "-c", str(self.project)])

        self.assertEqual(result.exit_code, 0)
        payload = json.loads(result.output)
        self.assertIsNone(payload["classifier"])
        self.assertEqual(payload["components"], ["1", "0", "0-beta", "2"])

    def test_compare(self) -> None:
        cases = [("1.3.0", "v1.2.0", ">"), ("v1.2.0", "1.2.0", "="), ("1.0.0-rc.1", "1.0.0", "<")]
        for left, right, expected in cases:
            result = self.runner.invoke(main, ["compare", left, right])
            self.assertEqual(result.exit_code, 0)
            self.assertEqual(result.output.strip(), expected)

    def test_compare_size_mismatch(self) -> None:
        result = self.runner.invoke(main, ["compare", "1.0", "1.0.0"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Size of version components are not equal", result.output)

    def test_check_reports_update(self) -> None:
        check_many = AsyncMock(return_value=UPDATE)
        with patch("upstream_updater.cli.UpdateChecker.check_many", check_many):
            result = self.runner.invoke(main, ["check", str(self.project)])

        self.assertEqual(result.exit_code, 0)
        self.assertIn(f"Version v1.3.0-rc.1 is out: {UPDATE.url}", result.output)
        current, upstreams = check_many.await_args.args
        self.assertEqual(current, "v1.2.0")
        self.assertEqual(len(upstreams), 1)

    def test_check_up_to_date_with_override(self) -> None:
        check_many = AsyncMock(return_value=None)
        with patch("upstream_updater.cli.UpdateChecker.check_many", check_many):
            result = self.runner.invoke(main, ["check", str(self.project), "--current", "v2.0.0"])

        self.assertEqual(result.exit_code, 0)
        self.assertIn("v2.0.0 is up to date.", result.output)

    def test_check_failure_is_reported(self) -> None:
        check_many = AsyncMock(side_effect=VersionSizeMismatch(("1", "2"), ("1", "2", "0")))
        with patch("upstream_updater.cli.UpdateChecker.check_many", check_many):
            result = self.runner.invoke(main, ["check", str(self.project)])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Size of version components", result.output)

    def test_check_missing_file(self) -> None:
        result = self.runner.invoke(main, ["check", str(Path(self._tmp.name) / "absent.toml")])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("File not found", result.output)

    def test_check_without_current_version(self) -> None:
        self.project.write_text(PROJECT_TOML.replace('current_version = "v1.2.0"', ""), encoding="utf-8")

        result = self.runner.invoke(main, ["check", str(self.project)])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("No current version", result.output)

    def test_check_without_upstreams(self) -> None:
        self.project.write_text('current_version = "v1.0.0"\n', encoding="utf-8")

        result = self.runner.invoke(main, ["check", str(self.project)])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("no upstreams configured", result.output)

    def test_watch_runs_bounded_checks(self) -> None:
        check_many = AsyncMock(side_effect=[None, UPDATE])
        with patch("upstream_updater.cli.UpdateChecker.check_many", check_many):
            result = self.runner.invoke(
                main, ["watch", str(self.project), "--interval", "0.01", "--count", "2"]
            )

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(check_many.await_count, 2)
        self.assertIn("Watching 1 upstream(s) every 0.01s.", result.output)
        self.assertIn("Version v1.3.0-rc.1 is out", result.output)

    def test_watch_needs_an_interval(self) -> None:
        result = self.runner.invoke(main, ["watch", str(self.project)])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("No positive interval", result.output)


if __name__ == "__main__":
    unittest.main()
