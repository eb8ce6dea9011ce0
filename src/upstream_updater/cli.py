"""CLI entrypoint for upstream-updater."""

from __future__ import annotations

import asyncio
import json
from datetime import timedelta
from pathlib import Path

import click

from upstream_updater.checker import UpdateChecker
from upstream_updater.config.loader import LoadedProject, load_project
from upstream_updater.errors import ConfigError, UpdaterError
from upstream_updater.notifications import render_notification
from upstream_updater.paths import default_project_path
from upstream_updater.runtime_logging import RuntimeLogger, configure_runtime_logging
from upstream_updater.scheduler import PeriodicTask
from upstream_updater.version import __version__
from upstream_updater.versioning.model import Version, compare_versions
from upstream_updater.versioning.parser import parse_version
from upstream_updater.versioning.schema import DEFAULT_SCHEMA, Schema

_CONFIG_PATH = click.Path(dir_okay=False, path_type=Path)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def main() -> None:
    """upstream-updater: check release sources for newer versions."""


@main.command()
@click.argument("config", type=_CONFIG_PATH, required=False)
@click.option("--current", "current_version", help="Running version (overrides the project file)")
@click.option("--log-level", help="off, error, warning, info or debug")
def check(config: Path | None, current_version: str | None, log_level: str | None) -> None:
    """Check every configured upstream once."""
    project = _load(config)
    current = _current_version(project, current_version)
    _configure_logging(project, log_level)

    checker = UpdateChecker(project.schema, settings=project.settings)
    try:
        update = asyncio.run(checker.check_many(current, project.upstreams))
    except UpdaterError as exc:
        raise click.ClickException(str(exc))

    if update is None:
        click.echo(f"{current} is up to date.")
        return
    click.echo(render_notification(project.settings.notification.message, update))


@main.command()
@click.argument("config", type=_CONFIG_PATH, required=False)
@click.option("--current", "current_version", help="Running version (overrides the project file)")
@click.option("--interval", type=float, help="Seconds between checks (overrides the project file)")
@click.option("--count", type=int, default=0, show_default=True, help="Stop after N checks; 0 runs forever")
@click.option("--log-level", help="off, error, warning, info or debug")
def watch(
    config: Path | None,
    current_version: str | None,
    interval: float | None,
    count: int,
    log_level: str | None,
) -> None:
    """Check the configured upstreams periodically until interrupted."""
    project = _load(config)
    current = _current_version(project, current_version)
    logger = _configure_logging(project, log_level)

    period = timedelta(seconds=interval) if interval is not None else project.settings.periodic
    if period is None or period.total_seconds() <= 0:
        raise click.ClickException("No positive interval: pass --interval or set updater.periodic")

    checker = UpdateChecker(project.schema, settings=project.settings)

    async def tick() -> None:
        try:
            update = await checker.check_many(current, project.upstreams)
        except UpdaterError as exc:
            logger.exception("watch.tick.failed", exc)
            click.echo(f"Check failed: {exc}", err=True)
            return
        if update is not None:
            click.echo(render_notification(project.settings.notification.message, update))

    async def run() -> None:
        task = PeriodicTask(tick, period, iterations=count or None, logger=logger)
        task.start()
        try:
            await task.wait()
        finally:
            await task.stop()

    click.echo(f"Watching {len(project.upstreams)} upstream(s) every {period.total_seconds():g}s.")
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        click.echo("Stopped.")


@main.command()
@click.argument("raw")
@click.option("--config", "-c", type=_CONFIG_PATH, help="Project file whose schema to use")
def parse(raw: str, config: Path | None) -> None:
    """Show how RAW is decomposed by the schema."""
    version = parse_version(raw, _schema(config))
    click.echo(json.dumps(_describe(version), indent=2))


@main.command()
@click.argument("left")
@click.argument("right")
@click.option("--config", "-c", type=_CONFIG_PATH, help="Project file whose schema to use")
def compare(left: str, right: str, config: Path | None) -> None:
    """Print <, = or > for LEFT against RIGHT."""
    schema = _schema(config)
    try:
        order = compare_versions(parse_version(left, schema), parse_version(right, schema))
    except UpdaterError as exc:
        raise click.ClickException(str(exc))
    click.echo({-1: "<", 0: "=", 1: ">"}[order])


@main.command("config-path")
def config_path_command() -> None:
    """Print the default project file path."""
    click.echo(str(default_project_path()))


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "upstream-updater",
        "version": __version__,
        "description": "Check upstream release sources for newer versions",
    }
    click.echo(json.dumps(payload, indent=2))


def _load(config: Path | None) -> LoadedProject:
    path = config or default_project_path()
    if not path.exists():
        raise click.ClickException(f"File not found: {path}")
    try:
        project = load_project(path)
    except ConfigError as exc:
        raise click.ClickException(str(exc))
    if not project.upstreams:
        raise click.ClickException(f"{path.name}: no upstreams configured")
    return project


def _schema(config: Path | None) -> Schema:
    if config is None:
        return DEFAULT_SCHEMA
    try:
        return load_project(config).schema
    except ConfigError as exc:
        raise click.ClickException(str(exc))


def _current_version(project: LoadedProject, override: str | None) -> str:
    current = override or project.current_version
    if not current:
        raise click.ClickException("No current version: pass --current or set current_version")
    return current


def _configure_logging(project: LoadedProject, level: str | None) -> RuntimeLogger:
    return configure_runtime_logging(
        level=level or project.settings.log_level,
        log_file=project.settings.log_file,
    )


def _describe(version: Version) -> dict[str, object]:
    classifier = version.classifier
    return {
        "raw": version.raw,
        "components": list(version.components),
        "classifier": None
        if classifier is None
        else {
            "value": classifier.value,
            "priority": classifier.priority,
            "components": list(classifier.components),
            "ignored": classifier.ignored,
        },
    }


if __name__ == "__main__":
    main()
