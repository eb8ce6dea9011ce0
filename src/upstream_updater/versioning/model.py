"""Immutable version values and their total order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from upstream_updater.errors import (
    ClassifierSizeMismatch,
    ClassifierTypeMismatch,
    VersionSizeMismatch,
    VersionTypeMismatch,
)


def _sign(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


@dataclass(frozen=True, slots=True)
class Classifier:
    value: str
    priority: float
    components: tuple[str, ...] = ()
    ignored: bool = field(default=False, compare=False)

    def __lt__(self, other: "Classifier") -> bool:
        return compare_classifiers(self, other) < 0

    def __le__(self, other: "Classifier") -> bool:
        return compare_classifiers(self, other) <= 0

    def __gt__(self, other: "Classifier") -> bool:
        return compare_classifiers(self, other) > 0

    def __ge__(self, other: "Classifier") -> bool:
        return compare_classifiers(self, other) >= 0


@dataclass(frozen=True, slots=True)
class Version:
    """A parsed version.

    Equality is structural over ``components`` and ``classifier``; ``raw`` is
    kept for display and release links only, so ``v1.2.0`` and ``1.2.0``
    parse to equal values under a schema that strips ``v``.

    Ordering goes through :func:`compare_versions` and can tie where ``==``
    does not: ``1.0.0-beta`` and ``1.0.0-beta.2`` satisfy both ``<=`` and
    ``>=`` yet are not equal. Use ``compare_versions(a, b) == 0`` to test for
    an ordering tie.
    """

    raw: str = field(compare=False)
    components: tuple[str, ...]
    classifier: Classifier | None = None

    @property
    def ignored(self) -> bool:
        return self.classifier is not None and self.classifier.ignored

    def __str__(self) -> str:
        return self.raw

    def __lt__(self, other: "Version") -> bool:
        return compare_versions(self, other) < 0

    def __le__(self, other: "Version") -> bool:
        return compare_versions(self, other) <= 0

    def __gt__(self, other: "Version") -> bool:
        return compare_versions(self, other) > 0

    def __ge__(self, other: "Version") -> bool:
        return compare_versions(self, other) >= 0


@dataclass(frozen=True, slots=True)
class Update:
    value: str
    url: str
    upstream: str | None = None


def compare_classifiers(left: Classifier, right: Classifier) -> int:
    """Order two classifiers: -1, 0 or 1.

    Sub-components are compared pairwise as strings when both sides have
    them. Priority decides when either side has none, and breaks the tie
    when all sub-components are equal.
    """
    if not isinstance(left, Classifier) or not isinstance(right, Classifier):
        offender = right if isinstance(left, Classifier) else left
        raise ClassifierTypeMismatch(
            f"Classifier type {type(offender).__name__} cannot be compared with Classifier"
        )

    if left.components and right.components:
        if len(left.components) != len(right.components):
            raise ClassifierSizeMismatch(left.components, right.components)
        for mine, theirs in zip(left.components, right.components):
            if mine != theirs:
                return _sign(mine, theirs)

    return _sign(left.priority, right.priority)


def compare_versions(left: Version, right: Version) -> int:
    """Order two versions: -1, 0 or 1.

    Components are compared as strings, so ``"10" < "9"``; schemas that need
    numeric order should publish zero-padded components. A version without a
    classifier outranks the same components carrying one.
    """
    if not isinstance(left, Version) or not isinstance(right, Version):
        offender = right if isinstance(left, Version) else left
        raise VersionTypeMismatch(
            f"Version type {type(offender).__name__} cannot be compared with Version"
        )

    if len(left.components) != len(right.components):
        raise VersionSizeMismatch(left.components, right.components)

    for mine, theirs in zip(left.components, right.components):
        if mine != theirs:
            return _sign(mine, theirs)

    if left.classifier is None and right.classifier is None:
        return 0
    if left.classifier is None:
        return 1
    if right.classifier is None:
        return -1
    return compare_classifiers(left.classifier, right.classifier)
