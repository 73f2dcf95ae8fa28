"""Unit tests for loading ``pages.yaml`` run configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from txttv_pages._constants import MAX_FRAGMENT_BYTES, MAX_FRAGMENT_COUNT
from txttv_pages.config import RunConfigError, load_run_config
from txttv_pages.config.helpers import PACKAGE_TEMPLATES_DIR


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "pages.yaml"
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_apply_to_empty_sections(tmp_path: Path) -> None:
    path = _write(tmp_path, "pages: {}")
    base = path.resolve().parent
    config = load_run_config(path)
    assert config.page_ids == list(range(100, 111))
    assert config.pages.index == 100
    assert config.pages.content_dir == base / "content"
    assert config.output.dir == base / "fragments"
    assert config.limits.max_fragment_bytes == MAX_FRAGMENT_BYTES
    assert config.limits.max_fragment_count == MAX_FRAGMENT_COUNT
    assert config.template.path == PACKAGE_TEMPLATES_DIR / "page.jinja"
    assert config.workers == 1


def test_relative_paths_resolve_against_config_dir(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
pages:
  content_dir: ../content
template:
  stylesheet: assets/site.css
output:
  dir: /srv/fragments
""",
    )
    base = path.resolve().parent
    config = load_run_config(path)
    assert config.pages.content_dir == base / "../content"
    assert config.template.stylesheet == base / "assets/site.css"
    assert config.output.dir == Path("/srv/fragments")


def test_filename_and_link_templates(tmp_path: Path) -> None:
    config = load_run_config(
        _write(
            tmp_path,
            """
pages:
  link_template: "/txttv/{page_id}"
output:
  filename_template: "txttv-{page_id}.xml"
""",
        )
    )
    assert config.pages.href_for(104) == "/txttv/104"
    assert config.output.filename_for(104) == "txttv-104.xml"
    pattern = config.output.filename_pattern
    assert pattern.match("txttv-104.xml")
    assert not pattern.match("txttv-104xxml")
    assert not pattern.match("page-104.xml")


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_run_config(tmp_path / "missing.yaml")


def test_non_mapping_document_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(RunConfigError, match="mapping"):
        load_run_config(_write(tmp_path, "- just\n- a list"))


@pytest.mark.parametrize(
    ("snippet", "message"),
    [
        ("pages:\n  first: 99", "between 100 and 999"),
        ("pages:\n  last: 1000", "between 100 and 999"),
        ("pages:\n  first: 105\n  last: 101", "must not exceed"),
        ("pages:\n  index: 120", "must lie within"),
        ("pages:\n  first: abc", "must be an integer"),
        ("limits:\n  max_fragment_bytes: 0", "must be positive"),
        ("output:\n  filename_template: page.xml", "{page_id}"),
        ("pages:\n  link_template: /static", "{page_id}"),
        ("workers: 0", "must be positive"),
        ("pages: [1, 2]", "must be a mapping"),
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, snippet: str, message: str) -> None:
    with pytest.raises(RunConfigError, match=message.replace("{", r"\{").replace("}", r"\}")):
        load_run_config(_write(tmp_path, snippet))
