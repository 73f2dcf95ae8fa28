"""Layer 3: pattern-based screening for script injection.

This is a screen over generated output, not a sanitizer. It flags inline
event-handler attributes, dynamic code evaluation, ``javascript:`` URLs, and
CDATA terminators that are not part of the assembler's split-escape
sequence. Page text is HTML-escaped before it reaches the template, but the
patterns still match escaped markup such as ``&lt;img onerror=...&gt;``, so
suspicious content is held back even when it would render inertly.
"""

from __future__ import annotations

import re
import typing as typ

from txttv_pages.escaping import CDATA_CLOSE, CDATA_OPEN

from ._payload import line_column, logical_payload, raw_body
from .models import Layer, Violation

if typ.TYPE_CHECKING:
    from txttv_pages.config import RunConfig
    from txttv_pages.generator.models import Fragment

SECURITY_PATTERNS: tuple[tuple[str, re.Pattern[str], str], ...] = (
    (
        "event-handler",
        re.compile(r"(?<=\s)on[a-z]+\s*=", re.IGNORECASE),
        "Inline event-handler attribute",
    ),
    ("eval-call", re.compile(r"\beval\s*\("), "Dynamic code evaluation"),
    (
        "function-constructor",
        re.compile(r"\bFunction\s*\("),
        "Function constructor call",
    ),
    (
        "javascript-url",
        re.compile(r"\bjavascript\s*:", re.IGNORECASE),
        "javascript: URL",
    ),
)


def check_security(
    fragment: Fragment, config: RunConfig | None = None
) -> list[Violation]:
    """Scan ``fragment``'s embedded document for injection patterns.

    ``config`` is accepted so every layer shares one call signature.
    """
    payload = logical_payload(fragment)
    violations: list[Violation] = []
    for rule, pattern, label in SECURITY_PATTERNS:
        for match in pattern.finditer(payload):
            violations.append(
                Violation(
                    layer=Layer.SECURITY,
                    rule=rule,
                    message=f"{label} '{match.group(0).strip()}' in embedded document.",
                    page_id=fragment.page_id,
                    location=line_column(payload, match.start()),
                )
            )
    violations.extend(_check_cdata_terminators(fragment))
    return violations


def _check_cdata_terminators(fragment: Fragment) -> list[Violation]:
    """Report ``]]>`` sequences that are not the split-escape ``]]]]><![CDATA[>``."""
    body = raw_body(fragment.text)
    if body is None:
        return []
    inner = body.strip()
    if not (inner.startswith(CDATA_OPEN) and inner.endswith(CDATA_CLOSE)):
        return []
    inner = inner[len(CDATA_OPEN) : -len(CDATA_CLOSE)]
    violations: list[Violation] = []
    for match in re.finditer(re.escape(CDATA_CLOSE), inner):
        index = match.start()
        split_escape = inner[index - 2 : index] == "]]" and inner.startswith(
            f"{CDATA_OPEN}>", match.end()
        )
        if not split_escape:
            violations.append(
                Violation(
                    layer=Layer.SECURITY,
                    rule="cdata-terminator",
                    message="Literal ']]>' inside the CDATA payload.",
                    page_id=fragment.page_id,
                    location=line_column(inner, index),
                )
            )
    return violations


__all__ = ["SECURITY_PATTERNS", "check_security"]
