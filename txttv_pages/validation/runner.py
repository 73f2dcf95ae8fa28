"""Run the validation layers over a batch of page outcomes."""

from __future__ import annotations

import logging
import typing as typ

from .integration_layer import check_page_integration, check_run_integration
from .models import PageError, PageValidation, ValidationReport, Violation
from .schema_layer import check_fragment_count, check_schema
from .security_layer import check_security
from .xml_layer import check_well_formed

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from txttv_pages.config import RunConfig
    from txttv_pages.generator.models import Fragment, PageOutcome

LOGGER = logging.getLogger(__name__)

FragmentCheck = typ.Callable[["Fragment", "RunConfig"], list[Violation]]

PAGE_CHECKS: tuple[FragmentCheck, ...] = (
    check_well_formed,
    check_schema,
    check_security,
    check_page_integration,
)


def validate_fragment(fragment: Fragment, config: RunConfig) -> PageValidation:
    """Run every per-page check over ``fragment`` and concatenate the results."""
    violations: list[Violation] = []
    for check in PAGE_CHECKS:
        violations.extend(check(fragment, config))
    LOGGER.debug(
        "validated page %s: %d violation(s)", fragment.page_id, len(violations)
    )
    return PageValidation(page_id=fragment.page_id, violations=tuple(violations))


def validate_batch(
    outcomes: cabc.Sequence[PageOutcome],
    pages: cabc.Sequence[PageValidation],
    config: RunConfig,
    content_ids: cabc.Iterable[int],
) -> ValidationReport:
    """Combine per-page results with the run-level checks.

    Parameters
    ----------
    outcomes : Sequence[PageOutcome]
        Every page outcome of the run, in page order.
    pages : Sequence[PageValidation]
        Per-page validation results for the outcomes that produced fragments.
    config : RunConfig
        Run configuration.
    content_ids : Iterable[int]
        Identifiers that have a content file on disk.
    """
    fragments = [outcome.fragment for outcome in outcomes if outcome.fragment]
    page_errors = tuple(
        PageError(
            page_id=outcome.page_id,
            kind=outcome.error_kind or "input",
            message=outcome.error or "",
        )
        for outcome in outcomes
        if outcome.fragment is None
    )
    run_violations = [
        *check_fragment_count(fragments, config),
        *check_run_integration(fragments, config, content_ids),
    ]
    return ValidationReport(
        pages=tuple(pages),
        page_errors=page_errors,
        run_violations=tuple(run_violations),
    )


def validate_run(
    outcomes: cabc.Sequence[PageOutcome],
    config: RunConfig,
    content_ids: cabc.Iterable[int],
) -> ValidationReport:
    """Validate every fragment in ``outcomes`` and then the batch as a whole."""
    pages = [
        validate_fragment(outcome.fragment, config)
        for outcome in outcomes
        if outcome.fragment is not None
    ]
    return validate_batch(outcomes, pages, config, content_ids)


__all__ = ["PAGE_CHECKS", "validate_batch", "validate_fragment", "validate_run"]
