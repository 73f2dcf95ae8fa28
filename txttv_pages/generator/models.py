"""Shared dataclasses used by the fragment generation pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(frozen=True, slots=True)
class ResolvedDocument:
    """A complete, self-contained HTML document for one page.

    Attributes
    ----------
    page_id : int
        Identifier of the page the document renders.
    html : str
        Template output with every placeholder substituted.
    prev_page : int or None
        Previous page linked from the document, ``None`` at the lower bound.
    next_page : int or None
        Next page linked from the document, ``None`` at the upper bound.
    index_page : int
        Well-known index page linked from every document.
    """

    page_id: int
    html: str
    prev_page: int | None
    next_page: int | None
    index_page: int


@dc.dataclass(frozen=True, slots=True)
class Fragment:
    """The publishable XML document wrapping a resolved page.

    Attributes
    ----------
    page_id : int
        Identifier of the embedded page.
    filename : str
        Output filename derived from the identifier.
    text : str
        Serialized XML document.
    data : bytes
        UTF-8 encoding of ``text``; exactly what gets written.
    document : ResolvedDocument
        The embedded HTML document before CDATA escaping.
    """

    page_id: int
    filename: str
    text: str
    data: bytes
    document: ResolvedDocument

    @property
    def size(self) -> int:
        """Return the fragment size in bytes."""
        return len(self.data)


@dc.dataclass(frozen=True, slots=True)
class PageOutcome:
    """Result of resolving and assembling one page.

    Exactly one of ``fragment`` and ``error`` is set. ``error_kind`` is
    ``"input"`` for content and resolution failures and ``"assembly"`` for
    encoding failures.
    """

    page_id: int
    fragment: Fragment | None = None
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        """Return whether the page produced a fragment."""
        return self.fragment is not None


__all__ = ["Fragment", "PageOutcome", "ResolvedDocument"]
