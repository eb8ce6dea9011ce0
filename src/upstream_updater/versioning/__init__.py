"""Version model, comparison engine and upstream arbitration."""

from upstream_updater.versioning.arbitration import (
    Candidate,
    prioritize_channel_versions,
    select_best_update,
)
from upstream_updater.versioning.model import (
    Classifier,
    Update,
    Version,
    compare_classifiers,
    compare_versions,
)
from upstream_updater.versioning.parser import parse_version
from upstream_updater.versioning.schema import (
    DEFAULT_SCHEMA,
    ClassifierSpec,
    Priority,
    Schema,
    SchemaBuilder,
    build_schema,
)

__all__ = [
    "DEFAULT_SCHEMA",
    "Candidate",
    "Classifier",
    "ClassifierSpec",
    "Priority",
    "Schema",
    "SchemaBuilder",
    "Update",
    "Version",
    "build_schema",
    "compare_classifiers",
    "compare_versions",
    "parse_version",
    "prioritize_channel_versions",
    "select_best_update",
]
