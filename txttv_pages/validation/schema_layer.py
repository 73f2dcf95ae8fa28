"""Layer 2: structural, size, and naming conformance."""

from __future__ import annotations

import typing as typ

from txttv_pages._constants import FRAGMENT_BODY_ELEMENT, FRAGMENT_ROOT_ELEMENT
from txttv_pages.escaping import CDATA_CLOSE, CDATA_OPEN

from ._payload import raw_body
from .models import Layer, Violation
from .xml_layer import parse_fragment

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from txttv_pages.config import RunConfig
    from txttv_pages.generator.models import Fragment


def check_schema(fragment: Fragment, config: RunConfig) -> list[Violation]:
    """Check element structure, byte size, and filename of ``fragment``.

    Structural rules are skipped when the fragment does not parse; layer 1
    already reports that.
    """
    violations: list[Violation] = []

    def report(rule: str, message: str) -> None:
        violations.append(
            Violation(
                layer=Layer.SCHEMA,
                rule=rule,
                message=message,
                page_id=fragment.page_id,
            )
        )

    root = parse_fragment(fragment)
    if root is not None:
        if root.tag != FRAGMENT_ROOT_ELEMENT:
            report(
                "single-root",
                f"Root element is <{root.tag}>, expected <{FRAGMENT_ROOT_ELEMENT}>.",
            )
        children = [child for child in root if isinstance(child.tag, str)]
        bodies = [child for child in children if child.tag == FRAGMENT_BODY_ELEMENT]
        if len(bodies) != 1 or len(children) != 1:
            names = ", ".join(f"<{child.tag}>" for child in children) or "none"
            report(
                "single-body",
                f"Expected exactly one <{FRAGMENT_BODY_ELEMENT}> child, found: {names}.",
            )
        if bodies and len(bodies[0]) > 0:
            report(
                "body-cdata",
                f"<{FRAGMENT_BODY_ELEMENT}> must hold only CDATA text, "
                "found nested markup.",
            )
        body = raw_body(fragment.text)
        if body is not None:
            stripped = body.strip()
            if not (stripped.startswith(CDATA_OPEN) and stripped.endswith(CDATA_CLOSE)):
                report(
                    "body-cdata",
                    f"<{FRAGMENT_BODY_ELEMENT}> content is not wrapped in CDATA.",
                )

    limit = config.limits.max_fragment_bytes
    if fragment.size > limit:
        report(
            "size-ceiling",
            f"Fragment is {fragment.size} bytes; maximum is {limit} bytes.",
        )

    match = config.output.filename_pattern.match(fragment.filename)
    if match is None:
        expected = config.output.filename_for(fragment.page_id)
        report(
            "filename-pattern",
            f"Filename '{fragment.filename}' does not match the naming pattern "
            f"(expected '{expected}').",
        )
    elif int(match.group("page_id")) != fragment.page_id:
        report(
            "filename-pattern",
            f"Filename '{fragment.filename}' names page {match.group('page_id')}, "
            f"not {fragment.page_id}.",
        )
    return violations


def check_fragment_count(
    fragments: cabc.Sequence[Fragment], config: RunConfig
) -> list[Violation]:
    """Check the run does not exceed the platform's fragment count ceiling."""
    limit = config.limits.max_fragment_count
    if len(fragments) <= limit:
        return []
    return [
        Violation(
            layer=Layer.SCHEMA,
            rule="fragment-count",
            message=f"Run produced {len(fragments)} fragments; maximum is {limit}.",
        )
    ]


__all__ = ["check_fragment_count", "check_schema"]
