"""Check upstream release sources for versions newer than the running one."""

from upstream_updater.checker import UpdateChecker
from upstream_updater.config import NotificationSettings, UpdaterSettings, load_project
from upstream_updater.errors import (
    ClassifierSizeMismatch,
    ClassifierTypeMismatch,
    ConfigError,
    InvalidSchema,
    UnsuccessfulVersionFetch,
    UnsuccessfulVersionRequest,
    UpdaterError,
    VersionSizeMismatch,
    VersionTypeMismatch,
)
from upstream_updater.notifications import Notifier, render_notification
from upstream_updater.scheduler import PeriodicTask, ThreadedPeriodicTask
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
from upstream_updater.versioning import (
    DEFAULT_SCHEMA,
    Candidate,
    Classifier,
    ClassifierSpec,
    Priority,
    Schema,
    SchemaBuilder,
    Update,
    Version,
    build_schema,
    compare_classifiers,
    compare_versions,
    parse_version,
    prioritize_channel_versions,
    select_best_update,
)

__all__ = [
    "DEFAULT_SCHEMA",
    "Candidate",
    "Classifier",
    "ClassifierSizeMismatch",
    "ClassifierSpec",
    "ClassifierTypeMismatch",
    "CodebergUpstream",
    "ConfigError",
    "GitHubUpstream",
    "HangarUpstream",
    "InvalidSchema",
    "ModrinthProjectType",
    "ModrinthUpstream",
    "NotificationSettings",
    "Notifier",
    "PeriodicTask",
    "Priority",
    "PyPIUpstream",
    "Schema",
    "SchemaBuilder",
    "SpigotUpstream",
    "ThreadedPeriodicTask",
    "UnsuccessfulVersionFetch",
    "UnsuccessfulVersionRequest",
    "Update",
    "UpdateChecker",
    "UpdaterError",
    "UpdaterSettings",
    "Upstream",
    "Version",
    "VersionSizeMismatch",
    "VersionTypeMismatch",
    "__version__",
    "build_schema",
    "compare_classifiers",
    "compare_versions",
    "load_project",
    "parse_version",
    "prioritize_channel_versions",
    "render_notification",
    "select_best_update",
]
