"""Pick one authoritative version out of several fetched candidates."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from upstream_updater.versioning.model import Update, Version, compare_versions
from upstream_updater.versioning.schema import ClassifierSpec


class Candidate(NamedTuple):
    version: Version
    url: str
    upstream_priority: float = 0.0
    upstream: str | None = None


def prioritize_channel_versions(candidates: Iterable[tuple[str, ClassifierSpec]]) -> str | None:
    """Choose between per-channel versions of one upstream.

    The first candidate is kept unless a later one's channel has a strictly
    higher priority; ties keep the earliest. Returns None for no candidates.
    """
    chosen: tuple[str, ClassifierSpec] | None = None
    for raw, spec in candidates:
        if chosen is None or spec.priority > chosen[1].priority:
            chosen = (raw, spec)
    return chosen[0] if chosen is not None else None


def select_best_update(
    current: Version,
    fetched: Iterable[Candidate | tuple[Version, str, float]],
) -> Update | None:
    """Return the update for the newest candidate that outranks ``current``.

    Candidates that do not compare greater than ``current``, or whose
    classifier is ignored, are dropped. Equal versions resolve to the higher
    upstream priority, then to the earliest seen. Comparison errors propagate.
    """
    best: Candidate | None = None
    for item in fetched:
        candidate = item if isinstance(item, Candidate) else Candidate(*item)
        if candidate.version.ignored:
            continue
        if compare_versions(candidate.version, current) <= 0:
            continue
        if best is None:
            best = candidate
            continue
        order = compare_versions(candidate.version, best.version)
        if order > 0 or (order == 0 and candidate.upstream_priority > best.upstream_priority):
            best = candidate

    if best is None:
        return None
    return Update(value=best.version.raw, url=best.url, upstream=best.upstream)
