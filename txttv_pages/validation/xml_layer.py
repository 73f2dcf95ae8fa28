"""Layer 1: XML well-formedness."""

from __future__ import annotations

import typing as typ

from lxml import etree

from .models import Layer, Violation

if typ.TYPE_CHECKING:
    from txttv_pages.config import RunConfig
    from txttv_pages.generator.models import Fragment


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)


def parse_fragment(fragment: Fragment) -> etree._Element | None:
    """Return the parsed root element, or ``None`` if the fragment is malformed."""
    try:
        return etree.fromstring(fragment.data, _parser())
    except etree.XMLSyntaxError:
        return None


def check_well_formed(
    fragment: Fragment, config: RunConfig | None = None
) -> list[Violation]:
    """Parse ``fragment`` and report the parser's error, if any.

    ``config`` is accepted so every layer shares one call signature.
    """
    try:
        etree.fromstring(fragment.data, _parser())
    except etree.XMLSyntaxError as exc:
        line, column = exc.position
        return [
            Violation(
                layer=Layer.XML,
                rule="xml-syntax",
                message=str(exc.msg),
                page_id=fragment.page_id,
                location=f"{line}:{column}",
            )
        ]
    return []


__all__ = ["check_well_formed", "parse_fragment"]
