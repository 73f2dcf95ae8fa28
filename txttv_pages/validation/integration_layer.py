"""Layer 4: navigation completeness and cross-page integrity.

Per-page checks confirm each document shows its identifier and links to its
neighbours and the index page. Run-level checks need every page result
buffered first: shared stylesheet text must be identical across documents,
and the sets of configured pages, content files, and fragments must line up
one-to-one.
"""

from __future__ import annotations

import collections
import typing as typ

from bs4 import BeautifulSoup

from ._payload import logical_payload
from .models import Layer, Violation

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from txttv_pages.config import RunConfig
    from txttv_pages.generator.models import Fragment


def _soup(fragment: Fragment) -> BeautifulSoup:
    return BeautifulSoup(logical_payload(fragment), "html.parser")


def _link_targets(soup: BeautifulSoup) -> set[str]:
    return {str(anchor["href"]) for anchor in soup.find_all("a", href=True)}


def _stylesheet_text(soup: BeautifulSoup) -> str:
    return "".join(style.get_text() for style in soup.find_all("style"))


def check_page_integration(fragment: Fragment, config: RunConfig) -> list[Violation]:
    """Check identifier presence and navigation links in one fragment."""
    page_id = fragment.page_id
    pages = config.pages
    soup = _soup(fragment)
    hrefs = _link_targets(soup)
    violations: list[Violation] = []

    def report(rule: str, message: str) -> None:
        violations.append(
            Violation(layer=Layer.INTEGRATION, rule=rule, message=message, page_id=page_id)
        )

    for hidden in soup(["script", "style"]):
        hidden.decompose()
    if str(page_id) not in soup.get_text():
        report("page-id-missing", f"Rendered text does not show page number {page_id}.")

    expected = {
        "prev-link-missing": page_id - 1 if page_id > pages.first else None,
        "next-link-missing": page_id + 1 if page_id < pages.last else None,
        "index-link-missing": pages.index,
    }
    for rule, target in expected.items():
        if target is None:
            continue
        href = pages.href_for(target)
        if href not in hrefs:
            report(rule, f"No link to page {target} ('{href}').")

    for outside in (pages.first - 1, pages.last + 1):
        href = pages.href_for(outside)
        if href in hrefs:
            report(
                "boundary-link",
                f"Link to page {outside} ('{href}') points outside "
                f"{pages.first}..{pages.last}.",
            )
    return violations


def check_run_integration(
    fragments: cabc.Sequence[Fragment],
    config: RunConfig,
    content_ids: cabc.Iterable[int],
) -> list[Violation]:
    """Check stylesheet consistency and page/content/fragment set equality.

    Parameters
    ----------
    fragments : Sequence[Fragment]
        Every fragment assembled during the run, in page order.
    config : RunConfig
        Run configuration supplying the expected page set.
    content_ids : Iterable[int]
        Identifiers that have a content file on disk.

    Returns
    -------
    list[Violation]
        Run-level violations; per-page ones carry the page they concern.
    """
    violations: list[Violation] = []

    def report(rule: str, message: str, page_id: int | None = None) -> None:
        violations.append(
            Violation(layer=Layer.INTEGRATION, rule=rule, message=message, page_id=page_id)
        )

    reference: tuple[int, str] | None = None
    for fragment in fragments:
        stylesheet = _stylesheet_text(_soup(fragment))
        if reference is None:
            reference = (fragment.page_id, stylesheet)
        elif stylesheet != reference[1]:
            report(
                "stylesheet-drift",
                f"Inline stylesheet differs from page {reference[0]}'s.",
                fragment.page_id,
            )

    expected = set(config.page_ids)
    content = set(content_ids)
    counts = collections.Counter(fragment.page_id for fragment in fragments)
    produced = set(counts)

    for page_id in sorted(expected - produced):
        report("missing-fragment", f"Page {page_id} has no fragment.", page_id)
    for page_id in sorted(produced - expected):
        report(
            "unexpected-fragment",
            f"Fragment for page {page_id} is outside the configured page set.",
            page_id,
        )
    for page_id in sorted(content - expected):
        report(
            "orphan-content",
            f"Content for page {page_id} is outside the configured page set.",
            page_id,
        )
    for page_id in sorted(produced - content):
        report(
            "fragment-without-content",
            f"Fragment for page {page_id} has no content file.",
            page_id,
        )
    for page_id, count in sorted(counts.items()):
        if count > 1:
            report(
                "duplicate-fragment",
                f"Page {page_id} produced {count} fragments.",
                page_id,
            )
    return violations


__all__ = ["check_page_integration", "check_run_integration"]
