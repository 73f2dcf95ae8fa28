"""Read per-page content units from the content directory.

Each page identifier maps to one UTF-8 text file named ``<page_id>.txt``. A
file may open with a YAML front matter block carrying optional ``title`` and
``category`` metadata::

    ---
    title: Headlines
    category: news
    ---
    Body text rendered verbatim on the page.

Examples
--------
>>> from pathlib import Path
>>> page = load_page_content(Path("content"), 100)  # doctest: +SKIP
>>> page.page_id  # doctest: +SKIP
100
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import CONTENT_SUFFIX
from .errors import ContentError

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
CONTENT_NAME_PATTERN = re.compile(rf"^(\d{{3}}){re.escape(CONTENT_SUFFIX)}$")


@dc.dataclass(frozen=True, slots=True)
class PageContent:
    """One page's raw body text and optional metadata.

    Attributes
    ----------
    page_id : int
        Page identifier the content belongs to.
    body : str
        Raw body text; escaped by the resolver, never here.
    title : str or None
        Optional page title from front matter.
    category : str or None
        Optional category label from front matter.
    source : Path or None
        File the content was read from, when loaded from disk.
    """

    page_id: int
    body: str
    title: str | None = None
    category: str | None = None
    source: Path | None = None


def content_path(content_dir: Path, page_id: int) -> Path:
    """Return the content file path for ``page_id``."""
    return content_dir / f"{page_id}{CONTENT_SUFFIX}"


def discover_page_ids(content_dir: Path) -> list[int]:
    """Return the identifiers that have a content file, in ascending order."""
    if not content_dir.is_dir():
        return []
    ids: list[int] = []
    for entry in content_dir.iterdir():
        match = CONTENT_NAME_PATTERN.match(entry.name)
        if match and entry.is_file():
            ids.append(int(match.group(1)))
    return sorted(ids)


def load_page_content(content_dir: Path, page_id: int, *, max_bytes: int) -> PageContent:
    """Load and check the content unit for ``page_id``.

    Parameters
    ----------
    content_dir : Path
        Directory holding ``<page_id>.txt`` files.
    page_id : int
        Identifier of the page to load.
    max_bytes : int
        Maximum size of the content file in bytes.

    Returns
    -------
    PageContent
        The parsed content unit.

    Raises
    ------
    ContentError
        If the file is missing, unreadable, oversized, or not UTF-8, or has an
        empty body.
    """
    path = content_path(content_dir, page_id)
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        msg = f"Content file '{path}' for page {page_id} not found."
        raise ContentError(msg) from exc
    except OSError as exc:
        msg = f"Content file '{path}' for page {page_id} is unreadable: {exc}"
        raise ContentError(msg) from exc

    if len(raw) > max_bytes:
        msg = (
            f"Content file '{path}' is {len(raw)} bytes, "
            f"exceeding the {max_bytes}-byte content limit."
        )
        raise ContentError(msg)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Content file '{path}' is not valid UTF-8: {exc}"
        raise ContentError(msg) from exc

    return parse_page_content(page_id, text, source=path)


def parse_page_content(
    page_id: int, text: str, *, source: Path | None = None
) -> PageContent:
    """Split optional front matter from ``text`` and build a PageContent."""
    metadata: dict[str, typ.Any] = {}
    body = text.removeprefix("\ufeff")
    match = FRONT_MATTER_PATTERN.match(body)
    if match:
        parsed = _parse_front_matter(match.group(1))
        if parsed is not None:
            metadata = parsed
            body = body[match.end() :]
    body = body.rstrip("\r\n")
    if not body.strip():
        msg = f"Content for page {page_id} has an empty body."
        raise ContentError(msg)
    return PageContent(
        page_id=page_id,
        body=body,
        title=_optional_text(metadata.get("title")),
        category=_optional_text(metadata.get("category")),
        source=source,
    )


def _parse_front_matter(block: str) -> dict[str, typ.Any] | None:
    """Return the block as metadata, or ``None`` when it is not a YAML mapping.

    Teletext pages often open with ``---`` rule lines, so a delimited block
    that does not load as a mapping is page text rather than front matter.
    """
    loader = YAML(typ="safe")
    try:
        loaded = loader.load(block)
    except YAMLError:
        return None
    if not isinstance(loaded, dict):
        return None
    return dict(loaded)


def _optional_text(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "PageContent",
    "content_path",
    "discover_page_ids",
    "load_page_content",
    "parse_page_content",
]
