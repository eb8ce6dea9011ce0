"""Exception hierarchy for schema, comparison and fetch failures."""

from __future__ import annotations


class UpdaterError(Exception):
    """Base class for every error raised by upstream_updater."""


class InvalidSchema(UpdaterError, ValueError):
    """A schema is missing prefixes or classifiers, or has malformed fields."""


class VersionSizeMismatch(UpdaterError):
    def __init__(self, left: tuple[str, ...], right: tuple[str, ...]) -> None:
        self.left = left
        self.right = right
        super().__init__(
            "Size of version components are not equal: "
            f"{len(left)} ({'.'.join(left)}) vs {len(right)} ({'.'.join(right)})"
        )


class ClassifierSizeMismatch(UpdaterError):
    def __init__(self, left: tuple[str, ...], right: tuple[str, ...]) -> None:
        self.left = left
        self.right = right
        super().__init__(
            f"Size of classifier components are not equal: {len(left)} vs {len(right)}"
        )


class VersionTypeMismatch(UpdaterError, TypeError):
    """A version comparison or update was attempted with a foreign type."""


class ClassifierTypeMismatch(UpdaterError, TypeError):
    """A classifier comparison was attempted with a foreign type, or an
    upstream needs classifier information the schema does not carry."""


class UnsuccessfulVersionRequest(UpdaterError):
    """The HTTP call to an upstream failed or returned an unreadable payload."""

    def __init__(self, message: str, *, upstream: str, status_code: int | None = None) -> None:
        self.upstream = upstream
        self.status_code = status_code
        super().__init__(f"{upstream}: {message}")


class UnsuccessfulVersionFetch(UpdaterError):
    """A check could not obtain any version from its upstream."""


class ConfigError(UpdaterError):
    """A project file could not be read or validated."""
