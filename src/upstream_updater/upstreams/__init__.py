"""Release sources that report the newest published version."""

from upstream_updater.upstreams.base import Upstream
from upstream_updater.upstreams.codeberg import CodebergUpstream
from upstream_updater.upstreams.github import GitHubUpstream
from upstream_updater.upstreams.hangar import HangarUpstream
from upstream_updater.upstreams.modrinth import ModrinthProjectType, ModrinthUpstream
from upstream_updater.upstreams.pypi import PyPIUpstream
from upstream_updater.upstreams.spigot import SpigotUpstream

__all__ = [
    "CodebergUpstream",
    "GitHubUpstream",
    "HangarUpstream",
    "ModrinthProjectType",
    "ModrinthUpstream",
    "PyPIUpstream",
    "SpigotUpstream",
    "Upstream",
]
