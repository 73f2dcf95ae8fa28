"""Cyclopts CLI entrypoint for converting TxtTV pages into gateway fragments.

The ``pages`` console script defined here resolves every configured page
against the shared template, wraps each document in a policy fragment, and
runs the four validation layers. ``pages build`` publishes the fragments only
when the whole run validates; ``pages check`` stops after validation so CI can
gate content changes without touching the output directory.

Examples
--------
Build and publish all fragments for the default configuration:

>>> from txttv_pages.cli import main
>>> main()  # doctest: +SKIP

Validate into a JSON report without publishing:

>>> from txttv_pages.cli import app
>>> app(["check", "--report", "report.json"])  # doctest: +SKIP
"""

from __future__ import annotations

import json
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_run_config
from .generator import FragmentPipeline

if typ.TYPE_CHECKING:
    from .generator import RunResult

DEFAULT_CONFIG = Path("config/pages.yaml")

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _write_report(result: RunResult, path: Path) -> None:
    """Persist the validation report and run state as JSON."""
    payload = {"state": str(result.state), **result.report.to_dict()}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def _execute(
    *, config: Path, output_dir: Path | None, report: Path | None, publish: bool
) -> RunResult:
    run_config = load_run_config(config)
    result = FragmentPipeline(run_config, output_dir=output_dir).run(publish=publish)
    for line in result.report.describe():
        print(line)
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    if report:
        _write_report(result, report)
        print(f"wrote {_format_path(report)}")
    print(f"{result.state}: {len(result.outcomes)} page(s) processed")
    return result


@app.command(help="Convert, validate, and publish every configured page.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to run config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    report: typ.Annotated[
        Path | None,
        Parameter(help="Write the validation report as JSON", env_var="INPUT_REPORT"),
    ] = None,
    verbose: bool = False,
) -> None:
    """Generate fragments and publish them when every layer passes.

    Parameters
    ----------
    config : Path, optional
        Path to the ``pages.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    output_dir : Path or None, optional
        Override for the configured output directory.
    report : Path or None, optional
        Where to write the JSON validation report.
    verbose : bool, optional
        Enable debug logging.

    Returns
    -------
    None
        Prints every violation and written path.

    Raises
    ------
    SystemExit
        With status 1 when the run aborts; nothing is written in that case.
    """
    _configure_logging(verbose)
    result = _execute(config=config, output_dir=output_dir, report=report, publish=True)
    if not result.ok:
        raise SystemExit(1)


@app.command(help="Convert and validate every configured page without publishing.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to run config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    report: typ.Annotated[
        Path | None,
        Parameter(help="Write the validation report as JSON", env_var="INPUT_REPORT"),
    ] = None,
    verbose: bool = False,
) -> None:
    """Run the validation gate only; exits with status 1 on any violation."""
    _configure_logging(verbose)
    result = _execute(config=config, output_dir=None, report=report, publish=False)
    if not result.ok:
        raise SystemExit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
