"""Load run configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from txttv_pages._constants import (
    DEFAULT_FIRST_PAGE,
    DEFAULT_INDEX_PAGE,
    DEFAULT_LAST_PAGE,
    DEFAULT_LINK_TEMPLATE,
    FRAGMENT_FILENAME_TEMPLATE,
    MAX_CONTENT_BYTES,
    MAX_FRAGMENT_BYTES,
    MAX_FRAGMENT_COUNT,
    SCRIPT_FILENAME,
    STYLESHEET_FILENAME,
    TEMPLATE_FILENAME,
)

from .helpers import (
    PACKAGE_TEMPLATES_DIR,
    _page_id,
    _positive_int,
    _require_token,
    _resolve_path,
    _section,
)
from .models import (
    LimitsConfig,
    OutputConfig,
    PageSetConfig,
    RunConfig,
    RunConfigError,
    TemplateConfig,
)


def load_run_config(path: Path) -> RunConfig:
    """Load the YAML configuration describing a fragment conversion run.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/pages.yaml``). Relative paths inside the file resolve
        against the file's directory.

    Returns
    -------
    RunConfig
        Parsed configuration with defaults applied for every omitted value.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    RunConfigError
        If the YAML is not a mapping or any value is out of range.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_run_config(Path("config/pages.yaml"))  # doctest: +SKIP
    >>> config.page_ids[:3]  # doctest: +SKIP
    [100, 101, 102]
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise RunConfigError(msg)
    return build_run_config(loaded, base_dir=path.resolve().parent)


def build_run_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path
) -> RunConfig:
    """Build a :class:`RunConfig` from an already parsed mapping."""
    pages = _build_page_set(_section(raw, "pages"), base_dir)
    template = _build_template_config(_section(raw, "template"), base_dir)
    output = _build_output_config(_section(raw, "output"), base_dir)
    limits = _build_limits(_section(raw, "limits"))
    workers = _positive_int(raw.get("workers", 1), "workers")
    return RunConfig(
        pages=pages,
        template=template,
        output=output,
        limits=limits,
        workers=workers,
    )


def _build_page_set(payload: typ.Mapping[str, typ.Any], base_dir: Path) -> PageSetConfig:
    first = _page_id(payload.get("first", DEFAULT_FIRST_PAGE), "pages.first")
    last = _page_id(payload.get("last", DEFAULT_LAST_PAGE), "pages.last")
    if first > last:
        msg = f"'pages.first' ({first}) must not exceed 'pages.last' ({last})."
        raise RunConfigError(msg)
    index = _page_id(payload.get("index", DEFAULT_INDEX_PAGE), "pages.index")
    if not first <= index <= last:
        msg = f"'pages.index' ({index}) must lie within {first}..{last}."
        raise RunConfigError(msg)
    return PageSetConfig(
        first=first,
        last=last,
        index=index,
        content_dir=_resolve_path(
            base_dir, payload.get("content_dir"), base_dir / "content"
        ),
        link_template=_require_token(
            payload.get("link_template", DEFAULT_LINK_TEMPLATE),
            "pages.link_template",
        ),
    )


def _build_template_config(
    payload: typ.Mapping[str, typ.Any], base_dir: Path
) -> TemplateConfig:
    return TemplateConfig(
        path=_resolve_path(
            base_dir, payload.get("path"), PACKAGE_TEMPLATES_DIR / TEMPLATE_FILENAME
        ),
        stylesheet=_resolve_path(
            base_dir,
            payload.get("stylesheet"),
            PACKAGE_TEMPLATES_DIR / STYLESHEET_FILENAME,
        ),
        script=_resolve_path(
            base_dir, payload.get("script"), PACKAGE_TEMPLATES_DIR / SCRIPT_FILENAME
        ),
    )


def _build_output_config(
    payload: typ.Mapping[str, typ.Any], base_dir: Path
) -> OutputConfig:
    return OutputConfig(
        dir=_resolve_path(base_dir, payload.get("dir"), base_dir / "fragments"),
        filename_template=_require_token(
            payload.get("filename_template", FRAGMENT_FILENAME_TEMPLATE),
            "output.filename_template",
        ),
    )


def _build_limits(payload: typ.Mapping[str, typ.Any]) -> LimitsConfig:
    return LimitsConfig(
        max_fragment_bytes=_positive_int(
            payload.get("max_fragment_bytes", MAX_FRAGMENT_BYTES),
            "limits.max_fragment_bytes",
        ),
        max_fragment_count=_positive_int(
            payload.get("max_fragment_count", MAX_FRAGMENT_COUNT),
            "limits.max_fragment_count",
        ),
        max_content_bytes=_positive_int(
            payload.get("max_content_bytes", MAX_CONTENT_BYTES),
            "limits.max_content_bytes",
        ),
    )


__all__ = ["build_run_config", "load_run_config"]
