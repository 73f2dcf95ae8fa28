"""Helpers for locating the embedded payload inside fragment text."""

from __future__ import annotations

import re
import typing as typ

from txttv_pages._constants import FRAGMENT_BODY_ELEMENT
from txttv_pages.escaping import unwrap_cdata

if typ.TYPE_CHECKING:
    from txttv_pages.generator.models import Fragment

BODY_PATTERN = re.compile(
    rf"<{re.escape(FRAGMENT_BODY_ELEMENT)}\s*>(.*)</{re.escape(FRAGMENT_BODY_ELEMENT)}\s*>",
    re.DOTALL,
)


def raw_body(text: str) -> str | None:
    """Return the raw markup between the body element's tags, if present."""
    match = BODY_PATTERN.search(text)
    return match.group(1) if match else None


def logical_payload(fragment: Fragment) -> str:
    """Return the de-escaped document carried by ``fragment``.

    Falls back to the fragment's source document when the body element cannot
    be located or its CDATA sections are malformed; layers 1 and 2 report
    those problems.
    """
    body = raw_body(fragment.text)
    if body is None:
        return fragment.document.html
    try:
        return unwrap_cdata(body.strip())
    except ValueError:
        return fragment.document.html


def line_column(text: str, offset: int) -> str:
    """Return a 1-based ``line:column`` string for ``offset`` in ``text``."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return f"{line}:{column}"


__all__ = ["BODY_PATTERN", "line_column", "logical_payload", "raw_body"]
