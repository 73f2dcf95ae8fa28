"""Step definitions shared by the TxtTV behaviour scenarios.

Scenarios describe a small site in ``given`` steps; the site is only written
to disk when the ``when`` step runs so later ``given`` steps can still edit
page content or the configured range.
"""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import given, parsers, then, when

from txttv_pages.config import load_run_config
from txttv_pages.generator import FragmentPipeline, RunResult

if typ.TYPE_CHECKING:
    from txttv_pages.config import RunConfig

    from conftest import SiteFactory

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps.

    Returns
    -------
    ScenarioState
        Mutable dictionary used to exchange state between ``given``, ``when``,
        and ``then`` steps.
    """
    return {}


@given(parsers.parse("a TxtTV site with pages {first:d} to {last:d}"))
def given_site(scenario_state: ScenarioState, first: int, last: int) -> None:
    scenario_state["pages"] = {
        page_id: f"Headlines for page {page_id}." for page_id in range(first, last + 1)
    }
    scenario_state["first"] = first
    scenario_state["last"] = last


@given(parsers.parse('page {page_id:d} contains "{text}"'))
def given_page_text(scenario_state: ScenarioState, page_id: int, text: str) -> None:
    scenario_state["pages"][page_id] = text


@given(parsers.parse("the page set is configured to end at page {last:d}"))
def given_last_page(scenario_state: ScenarioState, last: int) -> None:
    scenario_state["last"] = last


@when("I build the fragments")
def when_build(scenario_state: ScenarioState, write_site: SiteFactory) -> None:
    """Write the described site and run the full pipeline against it."""
    config_path = write_site(
        scenario_state["pages"],
        first=scenario_state["first"],
        last=scenario_state["last"],
    )
    config = load_run_config(config_path)
    scenario_state["config"] = config
    scenario_state["result"] = FragmentPipeline(config).run()


@then(parsers.parse('the run state is "{state}"'))
def then_state(scenario_state: ScenarioState, state: str) -> None:
    result = typ.cast("RunResult", scenario_state["result"])
    assert str(result.state) == state, result.report.describe()


@then(parsers.parse("the output directory holds fragments for pages {first:d} to {last:d}"))
def then_output_holds(scenario_state: ScenarioState, first: int, last: int) -> None:
    config = typ.cast("RunConfig", scenario_state["config"])
    names = sorted(path.name for path in config.output.dir.iterdir())
    assert names == [f"page-{page_id}.xml" for page_id in range(first, last + 1)]


@then(parsers.parse('the report lists rule "{rule}" for page {page_id:d}'))
def then_report_lists(scenario_state: ScenarioState, rule: str, page_id: int) -> None:
    result = typ.cast("RunResult", scenario_state["result"])
    found = {(v.rule, v.page_id) for v in result.report.violations}
    assert (rule, page_id) in found, result.report.describe()


@then("no output directory exists")
def then_no_output(scenario_state: ScenarioState) -> None:
    config = typ.cast("RunConfig", scenario_state["config"])
    assert not config.output.dir.exists()
