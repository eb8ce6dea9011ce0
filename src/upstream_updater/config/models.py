"""Settings schema for update checks and project files."""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from upstream_updater.upstreams import (
    CodebergUpstream,
    GitHubUpstream,
    HangarUpstream,
    ModrinthProjectType,
    ModrinthUpstream,
    PyPIUpstream,
    SpigotUpstream,
    Upstream,
)
from upstream_updater.version import __version__
from upstream_updater.versioning.schema import (
    DEFAULT_CLASSIFIERS,
    ClassifierSpec,
    Schema,
    build_schema,
    coerce_priority,
)

DEFAULT_NOTIFICATION = "New update has been found. Version {version} can be downloaded from {url}"


class TimeoutSettings(BaseModel):
    connect: float = Field(default=30.0, gt=0)
    read: float = Field(default=30.0, gt=0)
    write: float = Field(default=30.0, gt=0)
    pool: float = Field(default=30.0, gt=0)

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(connect=self.connect, read=self.read, write=self.write, pool=self.pool)


class NotificationSettings(BaseModel):
    notify: bool = Field(default=True, description="Log a notification when an update is found")
    message: str = Field(default=DEFAULT_NOTIFICATION, description="Supports {version} and {url}")
    title: str = Field(default="Update available")
    desktop: bool = Field(default=False, description="Also raise a desktop notification")
    sound: bool = Field(default=False)


class UpdaterSettings(BaseModel):
    periodic: timedelta | None = Field(default=None, description="Delay between periodic checks")
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    notification: NotificationSettings = Field(default_factory=NotificationSettings)
    user_agent: str = Field(default=f"upstream-updater/{__version__}")
    log_level: str | None = Field(default=None)
    log_file: str | None = Field(default=None)

    @field_validator("periodic")
    @classmethod
    def validate_periodic(cls, value: timedelta | None) -> timedelta | None:
        if value is not None and value.total_seconds() <= 0:
            raise ValueError("'periodic' must be a positive duration")
        return value


class SchemaSettings(BaseModel):
    prefixes: list[str] = Field(default_factory=lambda: ["v"])
    divider: str = Field(default=".")
    classifiers: list[ClassifierSpec] = Field(default_factory=lambda: list(DEFAULT_CLASSIFIERS))

    def to_schema(self) -> Schema:
        return build_schema(self.prefixes, self.divider, self.classifiers)


class _UpstreamSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    priority: float = Field(default=0.0)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: object) -> object:
        return coerce_priority(value)

    def build(self) -> Upstream:
        raise NotImplementedError


class GitHubSettings(_UpstreamSettings):
    kind: Literal["github"]
    user: str
    repo: str
    api_url: str = "https://api.github.com/"
    web_url: str = "https://github.com/"

    def build(self) -> Upstream:
        return GitHubUpstream(
            user=self.user,
            repo=self.repo,
            upstream_priority=self.priority,
            api_url=self.api_url,
            web_url=self.web_url,
        )


class CodebergSettings(_UpstreamSettings):
    kind: Literal["codeberg"]
    user: str
    repo: str
    priority: float = Field(default=1.0)
    api_url: str = "https://codeberg.org/api/v1/"
    web_url: str = "https://codeberg.org/"

    def build(self) -> Upstream:
        return CodebergUpstream(
            user=self.user,
            repo=self.repo,
            upstream_priority=self.priority,
            api_url=self.api_url,
            web_url=self.web_url,
        )


class SpigotSettings(_UpstreamSettings):
    kind: Literal["spigot"]
    project_id: str

    def build(self) -> Upstream:
        return SpigotUpstream(project_id=self.project_id, upstream_priority=self.priority)


class HangarSettings(_UpstreamSettings):
    kind: Literal["hangar"]
    project_id: str

    def build(self) -> Upstream:
        return HangarUpstream(project_id=self.project_id, upstream_priority=self.priority)


class ModrinthSettings(_UpstreamSettings):
    kind: Literal["modrinth"]
    project_id: str
    project_type: ModrinthProjectType = ModrinthProjectType.MOD

    def build(self) -> Upstream:
        return ModrinthUpstream(
            project_id=self.project_id,
            project_type=self.project_type,
            upstream_priority=self.priority,
        )


class PyPISettings(_UpstreamSettings):
    kind: Literal["pypi"]
    package: str
    index_url: str = "https://pypi.org/"

    def build(self) -> Upstream:
        return PyPIUpstream(
            package=self.package,
            upstream_priority=self.priority,
            index_url=self.index_url,
        )


UpstreamSettings = Annotated[
    GitHubSettings | CodebergSettings | SpigotSettings | HangarSettings | ModrinthSettings | PyPISettings,
    Field(discriminator="kind"),
]


class ProjectFile(BaseModel):
    """Top-level layout of an ``updater.toml`` project file."""

    model_config = ConfigDict(populate_by_name=True)

    current_version: str | None = Field(default=None)
    version_schema: SchemaSettings = Field(default_factory=SchemaSettings, alias="schema")
    upstreams: list[UpstreamSettings] = Field(default_factory=list)
    updater: UpdaterSettings = Field(default_factory=UpdaterSettings)
