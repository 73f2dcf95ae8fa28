"""Publish validated fragments into the output directory as one unit.

Fragments are written into a staging directory beside the output directory,
which is then swapped into place: the previous directory is moved aside, the
staging directory renamed onto the output path, and the previous copy
removed. Readers see either the old set or the new set, never a mix, and
fragments left over from earlier runs disappear with the old directory.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import typing as typ
from pathlib import Path

from txttv_pages.errors import OutputDirectoryError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Fragment

LOGGER = logging.getLogger(__name__)

# Published directories should be world-readable like a normal mkdir
_OUTPUT_DIR_MODE = 0o755


def ensure_writable(output_dir: Path) -> None:
    """Fail fast when ``output_dir`` cannot be replaced by a publish.

    Raises
    ------
    OutputDirectoryError
        If the path exists but is not a directory, or its parent cannot be
        created or written to.
    """
    if output_dir.exists() and not output_dir.is_dir():
        msg = f"Output path '{output_dir}' exists and is not a directory."
        raise OutputDirectoryError(msg)
    parent = output_dir.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
        probe = tempfile.mkdtemp(prefix=f".{output_dir.name}-probe-", dir=parent)
        Path(probe).rmdir()
    except OSError as exc:
        msg = f"Output directory '{output_dir}' is not writable: {exc}"
        raise OutputDirectoryError(msg) from exc


def publish_fragments(
    fragments: cabc.Sequence[Fragment], output_dir: Path
) -> list[Path]:
    """Write every fragment and swap the result into ``output_dir``.

    Parameters
    ----------
    fragments : Sequence[Fragment]
        Validated fragments for the whole run.
    output_dir : Path
        Directory that will hold exactly these fragments afterwards.

    Returns
    -------
    list[Path]
        Paths of the published fragments, in input order.

    Raises
    ------
    OutputDirectoryError
        If staging or the final swap fails; the previous directory is left
        in place in that case.
    """
    parent = output_dir.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
        staging = Path(
            tempfile.mkdtemp(prefix=f".{output_dir.name}-staging-", dir=parent)
        )
    except OSError as exc:
        msg = f"Cannot create a staging directory beside '{output_dir}': {exc}"
        raise OutputDirectoryError(msg) from exc

    try:
        staging.chmod(_OUTPUT_DIR_MODE)
        for fragment in fragments:
            (staging / fragment.filename).write_bytes(fragment.data)
    except OSError as exc:
        shutil.rmtree(staging, ignore_errors=True)
        msg = f"Failed to stage fragments for '{output_dir}': {exc}"
        raise OutputDirectoryError(msg) from exc

    previous = staging.with_name(staging.name.replace("-staging-", "-previous-"))
    had_previous = output_dir.exists()
    try:
        if had_previous:
            output_dir.rename(previous)
        try:
            staging.rename(output_dir)
        except OSError:
            if had_previous:
                previous.rename(output_dir)
            raise
    except OSError as exc:
        shutil.rmtree(staging, ignore_errors=True)
        msg = f"Failed to swap fragments into '{output_dir}': {exc}"
        raise OutputDirectoryError(msg) from exc

    if had_previous:
        shutil.rmtree(previous, ignore_errors=True)
    LOGGER.info("published %d fragment(s) to %s", len(fragments), output_dir)
    return [output_dir / fragment.filename for fragment in fragments]


__all__ = ["ensure_writable", "publish_fragments"]
