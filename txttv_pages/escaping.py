"""Escape text for embedding in CDATA sections and HTML contexts.

Fragments carry a complete HTML document inside a single XML element, so the
document passes through two context transitions: page text into HTML, then
HTML into a CDATA section. Each helper here handles exactly one transition
and must be applied exactly once; none of them is safe to re-apply to its own
output.

Examples
--------
>>> escape_for_cdata("a]]>b")
'a]]]]><![CDATA[>b'
>>> unwrap_cdata(wrap_cdata("a]]>b"))
'a]]>b'
>>> escape_for_html_attribute('"x" <y>')
'&quot;x&quot; &lt;y&gt;'
"""

from __future__ import annotations

from html import escape

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
CDATA_SPLIT = "]]]]><![CDATA[>"


def escape_for_cdata(text: str) -> str:
    """Split every ``]]>`` in ``text`` across two adjacent CDATA sections.

    The first section ends after ``]]`` and the second begins with ``>``, so
    concatenating the logical contents of every section reproduces ``text``
    byte for byte.

    Parameters
    ----------
    text : str
        Raw text destined for the inside of a ``<![CDATA[ ... ]]>`` wrapper.

    Returns
    -------
    str
        Text containing no ``]]>`` sequence other than section boundaries.
    """
    return text.replace(CDATA_CLOSE, CDATA_SPLIT)


def wrap_cdata(text: str) -> str:
    """Return ``text`` escaped and wrapped in a CDATA section."""
    return f"{CDATA_OPEN}{escape_for_cdata(text)}{CDATA_CLOSE}"


def unwrap_cdata(markup: str) -> str:
    """Concatenate the logical contents of every CDATA section in ``markup``.

    Text outside CDATA sections is kept verbatim, mirroring how an XML parser
    reports adjacent text and CDATA nodes as one string.

    Parameters
    ----------
    markup : str
        Raw XML text holding zero or more CDATA sections.

    Returns
    -------
    str
        The de-escaped text.

    Raises
    ------
    ValueError
        If a CDATA section is opened but never closed.
    """
    parts: list[str] = []
    position = 0
    while True:
        start = markup.find(CDATA_OPEN, position)
        if start == -1:
            parts.append(markup[position:])
            break
        parts.append(markup[position:start])
        content_start = start + len(CDATA_OPEN)
        end = markup.find(CDATA_CLOSE, content_start)
        if end == -1:
            msg = f"Unterminated CDATA section starting at offset {start}."
            raise ValueError(msg)
        parts.append(markup[content_start:end])
        position = end + len(CDATA_CLOSE)
    return "".join(parts)


def escape_for_html_attribute(text: str) -> str:
    """Neutralize ampersands, quotes, and angle brackets for attribute values."""
    return escape(text, quote=True)


def escape_for_html_text(text: str) -> str:
    """Neutralize ampersands and angle brackets for HTML text nodes."""
    return escape(text, quote=False)


__all__ = [
    "CDATA_CLOSE",
    "CDATA_OPEN",
    "CDATA_SPLIT",
    "escape_for_cdata",
    "escape_for_html_attribute",
    "escape_for_html_text",
    "unwrap_cdata",
    "wrap_cdata",
]
