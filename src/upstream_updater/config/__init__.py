"""Configuration models and project file loading."""

from upstream_updater.config.loader import LoadedProject, load_project, project_from_mapping
from upstream_updater.config.models import (
    DEFAULT_NOTIFICATION,
    NotificationSettings,
    ProjectFile,
    TimeoutSettings,
    UpdaterSettings,
)

__all__ = [
    "DEFAULT_NOTIFICATION",
    "LoadedProject",
    "NotificationSettings",
    "ProjectFile",
    "TimeoutSettings",
    "UpdaterSettings",
    "load_project",
    "project_from_mapping",
]
