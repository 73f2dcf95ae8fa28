"""Unit tests for the four validation layers.

Valid fragments come from the real resolver and assembler; broken ones are
built by hand so each rule can be triggered in isolation.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest

from txttv_pages.content import PageContent
from txttv_pages.generator import (
    Fragment,
    FragmentAssembler,
    PageOutcome,
    PageTemplate,
    ResolvedDocument,
    TemplateResolver,
)
from txttv_pages.validation import (
    Layer,
    check_fragment_count,
    check_page_integration,
    check_run_integration,
    check_schema,
    check_security,
    check_well_formed,
    validate_run,
)

if typ.TYPE_CHECKING:
    from txttv_pages.config import RunConfig


def _build(run_config: RunConfig, page_id: int, body: str = "Body") -> Fragment:
    template = PageTemplate.from_config(run_config.template)
    doc = TemplateResolver(template, run_config.pages).resolve(
        PageContent(page_id=page_id, body=body)
    )
    return FragmentAssembler(run_config.output).assemble(doc)


def _raw(text: str, page_id: int = 101, filename: str | None = None) -> Fragment:
    doc = ResolvedDocument(
        page_id=page_id, html="", prev_page=None, next_page=None, index_page=100
    )
    return Fragment(
        page_id=page_id,
        filename=filename or f"page-{page_id}.xml",
        text=text,
        data=text.encode("utf-8"),
        document=doc,
    )


def _rules(violations: list) -> list[str]:
    return [violation.rule for violation in violations]


def test_generated_fragment_passes_every_layer(run_config: RunConfig) -> None:
    fragment = _build(run_config, 101)
    assert check_well_formed(fragment) == []
    assert check_schema(fragment, run_config) == []
    assert check_security(fragment) == []
    assert check_page_integration(fragment, run_config) == []


def test_malformed_xml_reports_parser_location() -> None:
    violations = check_well_formed(_raw("<fragment>\n  <set-body>oops</fragment>"))
    assert _rules(violations) == ["xml-syntax"]
    assert violations[0].layer is Layer.XML
    assert violations[0].location is not None
    assert violations[0].location.startswith("2:")


def test_wrong_root_and_extra_children(run_config: RunConfig) -> None:
    text = (
        "<policy><set-body><![CDATA[x]]></set-body>"
        "<set-header name='a'/></policy>"
    )
    assert _rules(check_schema(_raw(text), run_config)) == ["single-root", "single-body"]


def test_nested_markup_in_body(run_config: RunConfig) -> None:
    text = "<fragment><set-body><p>x</p></set-body></fragment>"
    assert _rules(check_schema(_raw(text), run_config)) == ["body-cdata", "body-cdata"]


def test_size_ceiling_reports_actual_and_maximum(run_config: RunConfig) -> None:
    limits = dc.replace(run_config.limits, max_fragment_bytes=1024)
    config = dc.replace(run_config, limits=limits)
    fragment = _build(config, 101, body="x" * 4096)
    violations = check_schema(fragment, config)
    assert _rules(violations) == ["size-ceiling"]
    assert f"{fragment.size} bytes" in violations[0].message
    assert "maximum is 1024 bytes" in violations[0].message


@pytest.mark.parametrize(
    ("filename", "page_id"),
    [("page-101.html", 101), ("page-102.xml", 101), ("fragment.xml", 101)],
)
def test_filename_pattern(run_config: RunConfig, filename: str, page_id: int) -> None:
    text = "<fragment><set-body><![CDATA[101]]></set-body></fragment>"
    fragment = _raw(text, page_id=page_id, filename=filename)
    assert _rules(check_schema(fragment, run_config)) == ["filename-pattern"]


def test_fragment_count_ceiling(run_config: RunConfig) -> None:
    limits = dc.replace(run_config.limits, max_fragment_count=2)
    config = dc.replace(run_config, limits=limits)
    fragments = [_build(config, page_id) for page_id in (100, 101, 102)]
    violations = check_fragment_count(fragments, config)
    assert _rules(violations) == ["fragment-count"]
    assert "3 fragments; maximum is 2" in violations[0].message


def test_event_handler_in_content_is_flagged(run_config: RunConfig) -> None:
    fragment = _build(run_config, 101, body="<img src=x onerror=alert(1)>")
    violations = check_security(fragment)
    assert _rules(violations) == ["event-handler"]
    assert "onerror=" in violations[0].message
    assert violations[0].page_id == 101


@pytest.mark.parametrize(
    ("body", "rule"),
    [
        ("run eval(payload) now", "eval-call"),
        ("new Function('return 1')()", "function-constructor"),
        ("click javascript:alert(1)", "javascript-url"),
    ],
)
def test_script_patterns_are_flagged(run_config: RunConfig, body: str, rule: str) -> None:
    assert _rules(check_security(_build(run_config, 101, body=body))) == [rule]


def test_harmless_words_are_not_flagged(run_config: RunConfig) -> None:
    body = "Turn on the radio. Evaluation (draft) and functional tests."
    assert check_security(_build(run_config, 101, body=body)) == []


def test_split_escape_sequence_is_accepted(run_config: RunConfig) -> None:
    doc = ResolvedDocument(
        page_id=101,
        html="<script>if (a[b[0]]>1) {}</script> ]]> again",
        prev_page=100,
        next_page=102,
        index_page=100,
    )
    fragment = FragmentAssembler(run_config.output).assemble(doc)
    assert fragment.text.count("]]]]><![CDATA[>") == 2
    assert check_well_formed(fragment) == []
    assert check_security(fragment) == []


def test_literal_terminator_in_payload_is_flagged() -> None:
    text = "<fragment><set-body><![CDATA[a]]>b<![CDATA[c]]></set-body></fragment>"
    violations = check_security(_raw(text))
    assert _rules(violations) == ["cdata-terminator"]


def test_missing_page_id_and_links(run_config: RunConfig) -> None:
    html = "<html><body>nothing</body></html>"
    text = f"<fragment><set-body><![CDATA[{html}]]></set-body></fragment>"
    assert _rules(check_page_integration(_raw(text), run_config)) == [
        "page-id-missing",
        "prev-link-missing",
        "next-link-missing",
        "index-link-missing",
    ]


def test_link_outside_page_set_is_flagged(run_config: RunConfig) -> None:
    html = (
        '<html><body>100 <a href="?page=99">prev</a>'
        '<a href="?page=101">next</a><a href="?page=100">index</a></body></html>'
    )
    text = f"<fragment><set-body><![CDATA[{html}]]></set-body></fragment>"
    assert _rules(check_page_integration(_raw(text, page_id=100), run_config)) == [
        "boundary-link"
    ]


def test_stylesheet_drift_across_pages(run_config: RunConfig) -> None:
    fragments = [_build(run_config, page_id) for page_id in (100, 101, 102)]
    drifted = fragments[2].text.replace("box-sizing: border-box", "box-sizing: content-box")
    fragments[2] = dc.replace(fragments[2], text=drifted, data=drifted.encode("utf-8"))
    violations = check_run_integration(fragments, run_config, [100, 101, 102])
    assert _rules(violations) == ["stylesheet-drift"]
    assert violations[0].page_id == 102


def test_set_equality_between_pages_content_and_fragments(run_config: RunConfig) -> None:
    fragments = [_build(run_config, page_id) for page_id in (100, 101)]
    fragments.append(fragments[1])
    violations = check_run_integration(fragments, run_config, [100, 101, 105])
    assert [(v.rule, v.page_id) for v in violations] == [
        ("missing-fragment", 102),
        ("orphan-content", 105),
        ("duplicate-fragment", 101),
    ]


def test_validate_run_reports_every_layer_without_stopping(run_config: RunConfig) -> None:
    good = _build(run_config, 100)
    bad = _build(run_config, 101, body="<img src=x onerror=alert(1)>")
    outcomes = [
        PageOutcome(page_id=100, fragment=good),
        PageOutcome(page_id=101, fragment=bad),
        PageOutcome(page_id=102, error="Content file missing", error_kind="input"),
    ]
    report = validate_run(outcomes, run_config, [100, 101])
    assert not report.ok
    assert [page.page_id for page in report.pages] == [100, 101]
    assert report.pages[0].passed
    assert not report.pages[1].layer_passed(Layer.SECURITY)
    assert report.pages[1].layer_passed(Layer.SCHEMA)
    assert [error.page_id for error in report.page_errors] == [102]
    assert [(v.rule, v.page_id) for v in report.run_violations] == [
        ("missing-fragment", 102)
    ]
    assert _rules(report.for_layer(Layer.SECURITY)) == ["event-handler"]
    assert _rules(report.for_layer(Layer.INTEGRATION)) == ["missing-fragment"]
    assert report.for_layer(Layer.XML) == []
    assert report.for_page(100) == []
    assert _rules(report.for_page(101)) == ["event-handler"]
    assert _rules(report.for_page(102)) == ["missing-fragment"]
    assert report.to_dict()["ok"] is False
