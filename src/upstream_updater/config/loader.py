"""Load project files that describe a schema, its upstreams and check settings."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from upstream_updater.config.models import ProjectFile, UpdaterSettings
from upstream_updater.errors import ConfigError, InvalidSchema
from upstream_updater.upstreams import Upstream
from upstream_updater.versioning.schema import Schema


@dataclass(slots=True)
class LoadedProject:
    schema: Schema
    upstreams: list[Upstream]
    settings: UpdaterSettings
    current_version: str | None = None
    source: Path | None = None


def load_project(path: Path) -> LoadedProject:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"{path.name}: {exc.strerror or exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path.name}: {exc}") from exc
    return project_from_mapping(payload, source=path)


def project_from_mapping(payload: dict[str, Any], *, source: Path | None = None) -> LoadedProject:
    label = source.name if source is not None else "project"
    try:
        project = ProjectFile.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(item) for item in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"{label}: {problems}") from exc

    try:
        schema = project.version_schema.to_schema()
    except InvalidSchema as exc:
        raise ConfigError(f"{label}: schema: {exc}") from exc

    return LoadedProject(
        schema=schema,
        upstreams=[item.build() for item in project.upstreams],
        settings=project.updater,
        current_version=project.current_version,
        source=source,
    )
