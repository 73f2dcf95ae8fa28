"""Shared fixtures for building throwaway TxtTV sites under ``tmp_path``."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from txttv_pages.config import RunConfig, load_run_config

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class SiteFactory(typ.Protocol):
    def __call__(
        self,
        pages: cabc.Mapping[int, str],
        *,
        first: int = ...,
        last: int = ...,
        extra: str = ...,
    ) -> Path: ...


def default_pages(first: int = 100, last: int = 102) -> dict[int, str]:
    """Return simple, valid content for every page in ``first..last``."""
    return {
        page_id: f"---\ntitle: Page {page_id}\n---\nHeadlines for page {page_id}."
        for page_id in range(first, last + 1)
    }


@pytest.fixture
def write_site(tmp_path: Path) -> SiteFactory:
    """Return a factory that writes content files and a ``pages.yaml``."""

    def _write(
        pages: cabc.Mapping[int, str],
        *,
        first: int = 100,
        last: int = 102,
        extra: str = "",
    ) -> Path:
        content_dir = tmp_path / "content"
        content_dir.mkdir(exist_ok=True)
        for page_id, text in pages.items():
            (content_dir / f"{page_id}.txt").write_text(text, encoding="utf-8")
        config_path = tmp_path / "pages.yaml"
        config_path.write_text(
            f"""
pages:
  first: {first}
  last: {last}
  index: {first}
  content_dir: content
output:
  dir: fragments
{extra}
""".strip()
            + "\n",
            encoding="utf-8",
        )
        return config_path

    return _write


@pytest.fixture
def site_pages() -> dict[int, str]:
    """Return editable content for a valid three-page site (100-102)."""
    return default_pages()


@pytest.fixture
def run_config(write_site: SiteFactory) -> RunConfig:
    """Load a valid three-page configuration (100-102)."""
    return load_run_config(write_site(default_pages()))
