"""Typed dataclasses describing a fragment conversion run."""

from __future__ import annotations

import dataclasses as dc
import re
from pathlib import Path

PAGE_ID_TOKEN = "{page_id}"


class RunConfigError(ValueError):
    """Raised when the run configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class PageSetConfig:
    """The configured page range and where its content lives."""

    first: int
    last: int
    index: int
    content_dir: Path
    link_template: str

    @property
    def page_ids(self) -> list[int]:
        """Return every configured identifier in ascending order."""
        return list(range(self.first, self.last + 1))

    def contains(self, page_id: int) -> bool:
        """Return whether ``page_id`` belongs to the configured set."""
        return self.first <= page_id <= self.last

    def href_for(self, page_id: int) -> str:
        """Return the navigation href for ``page_id`` (not yet escaped)."""
        return self.link_template.replace(PAGE_ID_TOKEN, str(page_id))


@dc.dataclass(slots=True)
class TemplateConfig:
    """Locations of the page template and its shared assets."""

    path: Path
    stylesheet: Path
    script: Path


@dc.dataclass(slots=True)
class OutputConfig:
    """Where validated fragments are published and how they are named."""

    dir: Path
    filename_template: str

    def filename_for(self, page_id: int) -> str:
        """Return the fragment filename for ``page_id``."""
        return self.filename_template.replace(PAGE_ID_TOKEN, str(page_id))

    @property
    def filename_pattern(self) -> re.Pattern[str]:
        """Return a regex matching filenames produced by ``filename_for``."""
        head, _, tail = self.filename_template.partition(PAGE_ID_TOKEN)
        return re.compile(rf"^{re.escape(head)}(?P<page_id>\d{{3}}){re.escape(tail)}$")


@dc.dataclass(slots=True)
class LimitsConfig:
    """Size and count ceilings enforced before publishing."""

    max_fragment_bytes: int
    max_fragment_count: int
    max_content_bytes: int


@dc.dataclass(slots=True)
class RunConfig:
    """A fully resolved run configuration sourced from YAML."""

    pages: PageSetConfig
    template: TemplateConfig
    output: OutputConfig
    limits: LimitsConfig
    workers: int = 1

    @property
    def page_ids(self) -> list[int]:
        """Return the configured identifiers in ascending order."""
        return self.pages.page_ids


__all__ = [
    "PAGE_ID_TOKEN",
    "LimitsConfig",
    "OutputConfig",
    "PageSetConfig",
    "RunConfig",
    "RunConfigError",
    "TemplateConfig",
]
