"""Utility helpers shared by the run configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from txttv_pages._constants import MAX_PAGE_ID, MIN_PAGE_ID

from .models import PAGE_ID_TOKEN, RunConfigError

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``key`` or an empty mapping."""
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Configuration section '{key}' must be a mapping."
        raise RunConfigError(msg)
    return value


def _resolve_path(base_dir: Path, value: object | None, default: Path) -> Path:
    """Resolve ``value`` against ``base_dir``, falling back to ``default``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    path = Path(str(value)).expanduser()
    if path.is_absolute():
        return path
    return base_dir / path


def _int_option(value: object, name: str) -> int:
    """Return ``value`` as an int, rejecting booleans and non-numeric text."""
    if isinstance(value, bool):
        msg = f"'{name}' must be an integer, got {value!r}."
        raise RunConfigError(msg)
    try:
        return int(typ.cast("typ.SupportsInt", value))
    except (TypeError, ValueError) as exc:
        msg = f"'{name}' must be an integer, got {value!r}."
        raise RunConfigError(msg) from exc


def _positive_int(value: object, name: str) -> int:
    """Return ``value`` as a strictly positive int."""
    number = _int_option(value, name)
    if number <= 0:
        msg = f"'{name}' must be positive, got {number}."
        raise RunConfigError(msg)
    return number


def _page_id(value: object, name: str) -> int:
    """Return ``value`` as an identifier inside the page-identifier domain."""
    page_id = _int_option(value, name)
    if not MIN_PAGE_ID <= page_id <= MAX_PAGE_ID:
        msg = (
            f"'{name}' must lie between {MIN_PAGE_ID} and {MAX_PAGE_ID}, "
            f"got {page_id}."
        )
        raise RunConfigError(msg)
    return page_id


def _require_token(value: object, name: str) -> str:
    """Return ``value`` as a template string containing ``{page_id}``."""
    text = str(value).strip()
    if PAGE_ID_TOKEN not in text:
        msg = f"'{name}' must contain the {PAGE_ID_TOKEN} token, got {text!r}."
        raise RunConfigError(msg)
    return text


__all__ = [
    "PACKAGE_TEMPLATES_DIR",
    "_int_option",
    "_page_id",
    "_positive_int",
    "_require_token",
    "_resolve_path",
    "_section",
]
