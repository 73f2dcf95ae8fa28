"""High-level orchestration for converting page content into fragments.

:class:`FragmentPipeline` drives a run through a small state machine::

    IDLE -> RESOLVING -> VALIDATING -> PUBLISHING -> PUBLISHED
                                   \\-> ABORTED

Resolving loads, resolves, and assembles every configured page; failures are
recorded per page and never stop the other pages. Validating runs the four
layers per fragment and the run-level checks over the buffered batch. Only a
fully clean report moves on to publishing, which replaces the output
directory in one swap; any failure aborts with nothing written.

Example
-------
>>> from pathlib import Path
>>> from txttv_pages.config import load_run_config
>>> from txttv_pages.generator import FragmentPipeline
>>> config = load_run_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> result = FragmentPipeline(config).run()  # doctest: +SKIP
>>> result.state  # doctest: +SKIP
<RunState.PUBLISHED: 'published'>
"""

from __future__ import annotations

import concurrent.futures
import dataclasses as dc
import enum
import logging
import typing as typ
from pathlib import Path

from txttv_pages.content import discover_page_ids, load_page_content
from txttv_pages.errors import AssemblyError, ContentError, ResolutionError
from txttv_pages.validation import validate_batch, validate_fragment

from .assembler import FragmentAssembler
from .models import PageOutcome
from .publisher import ensure_writable, publish_fragments
from .resolver import PageTemplate, TemplateResolver

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from txttv_pages.config import RunConfig
    from txttv_pages.validation import PageValidation, ValidationReport

LOGGER = logging.getLogger(__name__)

_T = typ.TypeVar("_T")
_R = typ.TypeVar("_R")


class RunState(enum.StrEnum):
    """Lifecycle of a single conversion run."""

    IDLE = "idle"
    RESOLVING = "resolving"
    VALIDATING = "validating"
    VALIDATED = "validated"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    ABORTED = "aborted"


@dc.dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of :meth:`FragmentPipeline.run`.

    Attributes
    ----------
    state : RunState
        Terminal state: ``PUBLISHED``, ``VALIDATED`` (check only), or
        ``ABORTED``.
    report : ValidationReport
        Per-page and aggregate validation results.
    outcomes : tuple[PageOutcome, ...]
        Resolution and assembly result for every configured page.
    written : tuple[Path, ...]
        Published fragment paths; empty unless ``state`` is ``PUBLISHED``.
    """

    state: RunState
    report: ValidationReport
    outcomes: tuple[PageOutcome, ...]
    written: tuple[Path, ...] = ()

    @property
    def ok(self) -> bool:
        return self.state in {RunState.PUBLISHED, RunState.VALIDATED}


class FragmentPipeline:
    """Convert every configured page into a validated fragment."""

    def __init__(self, config: RunConfig, *, output_dir: Path | None = None) -> None:
        """Initialize the pipeline.

        Parameters
        ----------
        config : RunConfig
            Run configuration describing pages, template assets, and limits.
        output_dir : Path, optional
            Override for the publish directory; defaults to the configured
            output directory.
        """
        self.config = config
        self.output_dir = output_dir or config.output.dir
        self.state = RunState.IDLE

    def run(self, *, publish: bool = True) -> RunResult:
        """Resolve, validate, and (when clean) publish every page.

        Parameters
        ----------
        publish : bool, optional
            When ``False`` the run stops after validation and writes nothing.

        Returns
        -------
        RunResult
            Terminal state, validation report, and written paths.

        Raises
        ------
        OutputDirectoryError
            If publishing is requested and the output directory cannot be
            written; raised before any page is processed.
        TemplateError
            If the page template or its shared assets cannot be loaded.
        """
        if publish:
            ensure_writable(self.output_dir)
        template = PageTemplate.from_config(self.config.template)
        resolver = TemplateResolver(template, self.config.pages)
        assembler = FragmentAssembler(self.config.output)

        self._transition(RunState.RESOLVING)
        outcomes = self._map(
            lambda page_id: self._build_page(page_id, resolver, assembler),
            self.config.page_ids,
        )

        self._transition(RunState.VALIDATING)
        fragments = [outcome.fragment for outcome in outcomes if outcome.fragment]
        page_results: list[PageValidation] = self._map(
            lambda fragment: validate_fragment(fragment, self.config), fragments
        )
        content_ids = discover_page_ids(self.config.pages.content_dir)
        report = validate_batch(outcomes, page_results, self.config, content_ids)

        if not report.ok:
            self._transition(RunState.ABORTED)
            LOGGER.warning(
                "run aborted: %d page error(s), %d violation(s)",
                len(report.page_errors),
                len(report.violations),
            )
            return RunResult(state=self.state, report=report, outcomes=tuple(outcomes))

        if not publish:
            self._transition(RunState.VALIDATED)
            return RunResult(state=self.state, report=report, outcomes=tuple(outcomes))

        self._transition(RunState.PUBLISHING)
        written = publish_fragments(fragments, self.output_dir)
        self._transition(RunState.PUBLISHED)
        return RunResult(
            state=self.state,
            report=report,
            outcomes=tuple(outcomes),
            written=tuple(written),
        )

    def _build_page(
        self, page_id: int, resolver: TemplateResolver, assembler: FragmentAssembler
    ) -> PageOutcome:
        """Load, resolve, and assemble one page, capturing per-page failures."""
        try:
            content = load_page_content(
                self.config.pages.content_dir,
                page_id,
                max_bytes=self.config.limits.max_content_bytes,
            )
            document = resolver.resolve(content)
            fragment = assembler.assemble(document)
        except (ContentError, ResolutionError) as exc:
            LOGGER.warning("page %s: %s", page_id, exc)
            return PageOutcome(page_id=page_id, error=str(exc), error_kind="input")
        except AssemblyError as exc:
            LOGGER.warning("page %s: %s", page_id, exc)
            return PageOutcome(page_id=page_id, error=str(exc), error_kind="assembly")
        LOGGER.debug("page %s: assembled %d bytes", page_id, fragment.size)
        return PageOutcome(page_id=page_id, fragment=fragment)

    def _map(self, func: cabc.Callable[[_T], _R], items: cabc.Sequence[_T]) -> list[_R]:
        """Apply ``func`` to ``items`` in order, on worker threads if configured."""
        if self.config.workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.config.workers
        ) as executor:
            return list(executor.map(func, items))

    def _transition(self, state: RunState) -> None:
        LOGGER.debug("run state %s -> %s", self.state, state)
        self.state = state


__all__ = ["FragmentPipeline", "RunResult", "RunState"]
