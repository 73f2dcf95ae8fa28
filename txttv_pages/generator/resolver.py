"""Resolve the shared page template into one HTML document per page.

The template is a Jinja document whose variables are drawn from a closed
placeholder vocabulary (see :data:`txttv_pages._constants.PLACEHOLDERS`).
:class:`PageTemplate` loads it once per run together with the shared
stylesheet and script; :class:`TemplateResolver` then renders it for each
page, escaping page text for its HTML context and inlining the trusted shared
assets verbatim so every document is self-contained.

Example
-------
>>> from txttv_pages.config import load_run_config
>>> from txttv_pages.content import PageContent
>>> config = load_run_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> template = PageTemplate.from_config(config.template)  # doctest: +SKIP
>>> resolver = TemplateResolver(template, config.pages)  # doctest: +SKIP
>>> resolver.resolve(PageContent(page_id=101, body="Hello")).next_page  # doctest: +SKIP
102
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

import jinja2
from jinja2 import Environment, FileSystemLoader, StrictUndefined, meta
from markupsafe import Markup

from txttv_pages._constants import PLACEHOLDERS, REQUIRED_PLACEHOLDERS
from txttv_pages.errors import ResolutionError, TemplateError
from txttv_pages.escaping import escape_for_html_attribute, escape_for_html_text

from .models import ResolvedDocument

if typ.TYPE_CHECKING:
    from txttv_pages.config import PageSetConfig, TemplateConfig
    from txttv_pages.content import PageContent

STRUCTURAL_MARKERS: dict[str, re.Pattern[str]] = {
    "doctype": re.compile(r"<!doctype\s+html\b", re.IGNORECASE),
    "<head>": re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE),
    "</head>": re.compile(r"</head\s*>", re.IGNORECASE),
    "<body>": re.compile(r"<body(?:\s[^>]*)?>", re.IGNORECASE),
    "</body>": re.compile(r"</body\s*>", re.IGNORECASE),
    "</html>": re.compile(r"</html\s*>", re.IGNORECASE),
}


class PageTemplate:
    """The shared page template with its stylesheet and script blocks."""

    def __init__(
        self,
        template: jinja2.Template,
        *,
        placeholders: frozenset[str],
        stylesheet: str,
        script: str,
    ) -> None:
        """Wrap an already compiled template.

        Parameters
        ----------
        template : jinja2.Template
            Compiled page template.
        placeholders : frozenset[str]
            Variables referenced by the template.
        stylesheet : str
            Shared CSS inlined into every page.
        script : str
            Shared JavaScript inlined into every page.
        """
        self.template = template
        self.placeholders = placeholders
        self.stylesheet = stylesheet
        self.script = script

    @classmethod
    def from_config(cls, config: TemplateConfig) -> PageTemplate:
        """Load the template and assets named in ``config``."""
        return cls.load(config.path, stylesheet=config.stylesheet, script=config.script)

    @classmethod
    def load(cls, path: Path, *, stylesheet: Path, script: Path) -> PageTemplate:
        """Read, parse, and compile the template at ``path``.

        Raises
        ------
        TemplateError
            If any file is unreadable, the template does not parse, or it
            references a variable outside the placeholder vocabulary.
        """
        env = Environment(
            loader=FileSystemLoader(str(path.parent)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        try:
            source, _, _ = env.loader.get_source(env, path.name)  # type: ignore[union-attr]
            placeholders = frozenset(meta.find_undeclared_variables(env.parse(source)))
            template = env.get_template(path.name)
        except jinja2.TemplateNotFound as exc:
            msg = f"Page template '{path}' not found."
            raise TemplateError(msg) from exc
        except jinja2.TemplateSyntaxError as exc:
            msg = (
                f"Page template '{path}' has a syntax error on line "
                f"{exc.lineno}: {exc.message}"
            )
            raise TemplateError(msg) from exc

        unknown = placeholders - PLACEHOLDERS
        if unknown:
            msg = (
                f"Page template '{path}' uses unknown placeholder(s): "
                f"{', '.join(sorted(unknown))}."
            )
            raise TemplateError(msg)

        return cls(
            template,
            placeholders=placeholders,
            stylesheet=_read_asset(stylesheet, "stylesheet"),
            script=_read_asset(script, "script"),
        )

    def missing_placeholders(self) -> list[str]:
        """Return required placeholders the template does not reference."""
        return sorted(REQUIRED_PLACEHOLDERS - self.placeholders)

    def render(self, context: typ.Mapping[str, typ.Any]) -> str:
        """Render the template with ``context``."""
        return self.template.render(**context)


class TemplateResolver:
    """Render the page template for individual content units."""

    def __init__(self, template: PageTemplate, pages: PageSetConfig) -> None:
        self.template = template
        self.pages = pages

    def resolve(self, page: PageContent) -> ResolvedDocument:
        """Return the complete HTML document for ``page``.

        Parameters
        ----------
        page : PageContent
            Content unit to render.

        Returns
        -------
        ResolvedDocument
            Rendered document with navigation targets recorded.

        Raises
        ------
        ResolutionError
            If the template lacks a required placeholder, the identifier is
            outside the configured set, the body is empty, or the rendered
            document does not carry exactly one of each structural marker.
        """
        missing = self.template.missing_placeholders()
        if missing:
            msg = f"Template is missing required placeholder(s): {', '.join(missing)}."
            raise ResolutionError(msg)
        if not self.pages.contains(page.page_id):
            msg = (
                f"Page {page.page_id} is outside the configured range "
                f"{self.pages.first}..{self.pages.last}."
            )
            raise ResolutionError(msg)
        if not page.body.strip():
            msg = f"Page {page.page_id} has an empty body."
            raise ResolutionError(msg)

        prev_page = page.page_id - 1 if page.page_id > self.pages.first else None
        next_page = page.page_id + 1 if page.page_id < self.pages.last else None
        context = {
            "page_id": page.page_id,
            "title": _text(page.title or f"Page {page.page_id}"),
            "category": _text(page.category) if page.category else None,
            "content": _text(page.body),
            "prev_href": self._href(prev_page),
            "next_href": self._href(next_page),
            "index_href": self._href(self.pages.index),
            "first_page": self.pages.first,
            "last_page": self.pages.last,
            "stylesheet": Markup(self.template.stylesheet),
            "script": Markup(self.template.script),
        }
        try:
            html = self.template.render(context)
        except jinja2.TemplateError as exc:
            msg = f"Template failed to render page {page.page_id}: {exc}"
            raise ResolutionError(msg) from exc

        assets = (self.template.stylesheet, self.template.script)
        _check_structure(_strip_assets(html, assets), page.page_id)
        return ResolvedDocument(
            page_id=page.page_id,
            html=html,
            prev_page=prev_page,
            next_page=next_page,
            index_page=self.pages.index,
        )

    def _href(self, page_id: int | None) -> Markup | None:
        if page_id is None:
            return None
        return Markup(escape_for_html_attribute(self.pages.href_for(page_id)))


def _text(value: str) -> Markup:
    return Markup(escape_for_html_text(value))


def _read_asset(path: Path, label: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Shared {label} '{path}' is unreadable: {exc}"
        raise TemplateError(msg) from exc


def _strip_assets(html: str, assets: tuple[str, ...]) -> str:
    """Remove the inlined shared assets so only template markup is counted."""
    for asset in assets:
        if asset:
            html = html.replace(asset, "")
    return html


def _check_structure(html: str, page_id: int) -> None:
    problems = []
    for marker, pattern in STRUCTURAL_MARKERS.items():
        count = len(pattern.findall(html))
        if count != 1:
            problems.append(f"{marker} x{count}")
    if problems:
        msg = (
            f"Resolved document for page {page_id} needs exactly one of each "
            f"structural marker; found {', '.join(problems)}."
        )
        raise ResolutionError(msg)


__all__ = ["STRUCTURAL_MARKERS", "PageTemplate", "TemplateResolver"]
