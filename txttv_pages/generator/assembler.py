"""Wrap resolved HTML documents into gateway policy fragments."""

from __future__ import annotations

import typing as typ

from txttv_pages._constants import FRAGMENT_BODY_ELEMENT, FRAGMENT_ROOT_ELEMENT
from txttv_pages.errors import AssemblyError
from txttv_pages.escaping import wrap_cdata

from .models import Fragment

if typ.TYPE_CHECKING:
    from txttv_pages.config import OutputConfig

    from .models import ResolvedDocument


class FragmentAssembler:
    """Build the single-root XML fragment carrying one page as CDATA."""

    def __init__(self, output: OutputConfig) -> None:
        self.output = output

    def assemble(self, doc: ResolvedDocument) -> Fragment:
        """Return the fragment for ``doc``.

        The fragment has one ``<fragment>`` root holding one ``<set-body>``
        element whose only content is the CDATA-escaped document. The UTF-8
        encoding is produced here so size checks never re-encode.

        Raises
        ------
        AssemblyError
            If the document cannot be encoded as UTF-8.
        """
        text = (
            f"<{FRAGMENT_ROOT_ELEMENT}>\n"
            f"    <{FRAGMENT_BODY_ELEMENT}>{wrap_cdata(doc.html)}"
            f"</{FRAGMENT_BODY_ELEMENT}>\n"
            f"</{FRAGMENT_ROOT_ELEMENT}>\n"
        )
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            msg = f"Fragment for page {doc.page_id} cannot be encoded as UTF-8: {exc}"
            raise AssemblyError(msg) from exc
        return Fragment(
            page_id=doc.page_id,
            filename=self.output.filename_for(doc.page_id),
            text=text,
            data=data,
            document=doc,
        )


__all__ = ["FragmentAssembler"]
