"""Parsing rules that decompose a version string into components and a classifier."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from upstream_updater.errors import InvalidSchema

if TYPE_CHECKING:
    from upstream_updater.versioning.model import Version


class Priority(IntEnum):
    """Named ranks for classifier and upstream priorities.

    Any int or float is accepted wherever a priority is expected; these names
    only cover the common steps.
    """

    NONE = 0
    MINIMAL = 1
    LOW = 2
    MIDDLE = 3
    HIGH = 4
    HIGHEST = 5


def coerce_priority(value: Any) -> Any:
    """Resolve priority names such as ``"high"`` to their numeric rank."""
    if isinstance(value, str):
        key = value.strip().upper()
        if key in Priority.__members__:
            return float(Priority[key])
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return value


class ClassifierSpec(BaseModel):
    """One pre-release or variant marker, e.g. ``-beta`` in ``1.0.0-beta.2``."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Literal tag, e.g. 'beta'")
    divider: str = Field(default="-", description="Joins the tag to the version")
    component_divider: str = Field(default=".", description="Splits the tag's own components")
    priority: float = Field(default=0.0, description="Higher is more stable / preferred")
    ignore: bool = Field(default=False, description="Versions with this tag are never candidates")
    channel: str | None = Field(default=None, description="Release channel for channel-aware upstreams")

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: Any) -> Any:
        return coerce_priority(value)

    @property
    def marker(self) -> str:
        return f"{self.divider}{self.name}"

    @property
    def channel_name(self) -> str:
        return self.channel or self.name


class Schema(BaseModel):
    """How to read the version strings of one piece of software."""

    model_config = ConfigDict(frozen=True)

    prefixes: tuple[str, ...]
    divider: str = Field(default=".", min_length=1)
    classifiers: tuple[ClassifierSpec, ...]

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidSchema(_describe(exc)) from exc

    @field_validator("prefixes", mode="before")
    @classmethod
    def validate_prefixes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (set, frozenset)):
            return tuple(sorted(value))
        return value

    @model_validator(mode="after")
    def validate_required(self) -> "Schema":
        if not self.prefixes:
            raise ValueError("'prefixes' cannot be empty")
        if any(not prefix for prefix in self.prefixes):
            raise ValueError("'prefixes' cannot contain an empty string")
        if not self.classifiers:
            raise ValueError("'classifiers' cannot be empty")
        return self

    def strip_prefix(self, raw: str) -> str:
        """Remove the longest prefix that ``raw`` starts with.

        Equal-length matches resolve in declaration order. Prefix text
        elsewhere in ``raw`` is left alone, so ``1.1.0-dev.1`` keeps its
        ``v``. Without a leading match ``raw`` is returned unchanged.
        """
        matches = [prefix for prefix in self.prefixes if raw.startswith(prefix)]
        if not matches:
            return raw
        longest = max(matches, key=len)
        return raw[len(longest):]

    def match_classifier(self, body: str) -> ClassifierSpec | None:
        """Return the classifier spec whose marker occurs in ``body``.

        Specs are scanned in declaration order and the first hit wins, unless
        a later hit's marker contains the current one (``-b`` vs ``-beta``),
        in which case the longer marker wins.
        """
        match: ClassifierSpec | None = None
        for spec in self.classifiers:
            marker = spec.marker
            if marker not in body:
                continue
            if match is None or (len(marker) > len(match.marker) and match.marker in marker):
                match = spec
        return match

    def parse(self, raw: str) -> "Version":
        from upstream_updater.versioning.parser import parse_version

        return parse_version(raw, self)


def build_schema(
    prefixes: str | Iterable[str],
    divider: str = ".",
    classifiers: Iterable[ClassifierSpec | dict[str, Any]] = (),
) -> Schema:
    """Validate and build a :class:`Schema`, raising :class:`InvalidSchema` on failure."""
    try:
        return Schema.model_validate(
            {
                "prefixes": prefixes if isinstance(prefixes, str) else tuple(prefixes),
                "divider": divider,
                "classifiers": tuple(classifiers),
            }
        )
    except ValidationError as exc:
        raise InvalidSchema(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "schema"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


class SchemaBuilder:
    """Incremental schema construction.

    >>> schema = (
    ...     SchemaBuilder()
    ...     .add_prefix("v")
    ...     .classifier("alpha", priority=Priority.LOW)
    ...     .classifier("beta", priority=Priority.HIGH)
    ...     .classifier("rc", priority=Priority.HIGHEST)
    ...     .build()
    ... )
    """

    def __init__(self) -> None:
        self.prefixes: list[str] = []
        self.divider = "."
        self.classifiers: list[ClassifierSpec] = []

    def add_prefix(self, prefix: str) -> "SchemaBuilder":
        self.prefixes.append(prefix)
        return self

    def set_divider(self, divider: str) -> "SchemaBuilder":
        self.divider = divider
        return self

    def classifier(
        self,
        name: str,
        *,
        divider: str = "-",
        priority: float | str = Priority.NONE,
        component_divider: str = ".",
        ignore: bool = False,
        channel: str | None = None,
    ) -> "SchemaBuilder":
        try:
            spec = ClassifierSpec(
                name=name,
                divider=divider,
                priority=priority,
                component_divider=component_divider,
                ignore=ignore,
                channel=channel,
            )
        except ValidationError as exc:
            raise InvalidSchema(_describe(exc)) from exc
        self.classifiers.append(spec)
        return self

    def add_classifier(self, spec: ClassifierSpec) -> "SchemaBuilder":
        self.classifiers.append(spec)
        return self

    def build(self) -> Schema:
        return build_schema(self.prefixes, self.divider, self.classifiers)


DEFAULT_CLASSIFIERS: Sequence[ClassifierSpec] = (
    ClassifierSpec(name="alpha", priority=Priority.LOW),
    ClassifierSpec(name="beta", priority=Priority.HIGH),
    ClassifierSpec(name="rc", priority=Priority.HIGHEST),
)

DEFAULT_SCHEMA = Schema(prefixes=("v",), divider=".", classifiers=tuple(DEFAULT_CLASSIFIERS))
