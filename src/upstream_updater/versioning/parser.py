"""Turn raw version strings into :class:`Version` values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from upstream_updater.versioning.model import Classifier, Version

if TYPE_CHECKING:
    from upstream_updater.versioning.schema import Schema


def split_classifier_components(tail: str, component_divider: str) -> tuple[str, ...]:
    if component_divider and tail.startswith(component_divider):
        tail = tail[len(component_divider):]
    if not tail:
        return ()
    if not component_divider:
        return (tail,)
    return tuple(tail.split(component_divider))


def parse_version(raw: str, schema: Schema) -> Version:
    body = schema.strip_prefix(raw)
    spec = schema.match_classifier(body)
    if spec is None:
        return Version(raw=raw, components=tuple(body.split(schema.divider)))

    head, marker, tail = body.partition(spec.marker)
    classifier = Classifier(
        value=marker + tail,
        priority=spec.priority,
        components=split_classifier_components(tail, spec.component_divider),
        ignored=spec.ignore,
    )
    return Version(
        raw=raw,
        components=tuple(head.split(schema.divider)),
        classifier=classifier,
    )
