"""Violation records and the aggregate validation report."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ


class Layer(enum.StrEnum):
    """Validation layers, in the order they run."""

    XML = "xml"
    SCHEMA = "schema"
    SECURITY = "security"
    INTEGRATION = "integration"


@dc.dataclass(frozen=True, slots=True)
class Violation:
    """One rule failure reported by a validation layer.

    Attributes
    ----------
    layer : Layer
        Layer that reported the failure.
    rule : str
        Short rule identifier, e.g. ``"size-ceiling"``.
    message : str
        Human-readable description including the offending value.
    page_id : int or None
        Page the violation belongs to; ``None`` for run-wide checks.
    location : str or None
        ``line:column`` inside the fragment or payload, when known.
    """

    layer: Layer
    rule: str
    message: str
    page_id: int | None = None
    location: str | None = None

    def describe(self) -> str:
        """Return a single-line summary suitable for console output."""
        scope = f"page {self.page_id}" if self.page_id is not None else "run"
        where = f" (at {self.location})" if self.location else ""
        return f"[{self.layer}] {scope} {self.rule}: {self.message}{where}"

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable mapping."""
        return {
            "layer": str(self.layer),
            "rule": self.rule,
            "message": self.message,
            "page_id": self.page_id,
            "location": self.location,
        }


@dc.dataclass(frozen=True, slots=True)
class PageError:
    """A page that failed before validation could run."""

    page_id: int
    kind: str
    message: str

    def describe(self) -> str:
        """Return a single-line summary suitable for console output."""
        return f"[{self.kind}] page {self.page_id}: {self.message}"

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable mapping."""
        return {"page_id": self.page_id, "kind": self.kind, "message": self.message}


@dc.dataclass(frozen=True, slots=True)
class PageValidation:
    """Per-page outcome of the layered checks."""

    page_id: int
    violations: tuple[Violation, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.violations

    def layer_passed(self, layer: Layer) -> bool:
        """Return whether ``layer`` reported nothing for this page."""
        return all(violation.layer != layer for violation in self.violations)


@dc.dataclass(frozen=True, slots=True)
class ValidationReport:
    """Aggregate verdict for a run; gates publishing.

    Attributes
    ----------
    pages : tuple[PageValidation, ...]
        Layered results for every page that produced a fragment.
    page_errors : tuple[PageError, ...]
        Pages that failed during content loading, resolution, or assembly.
    run_violations : tuple[Violation, ...]
        Violations from checks that span the whole page set.
    """

    pages: tuple[PageValidation, ...] = ()
    page_errors: tuple[PageError, ...] = ()
    run_violations: tuple[Violation, ...] = ()

    @property
    def violations(self) -> list[Violation]:
        """Return every violation, per-page results first."""
        collected: list[Violation] = []
        for page in self.pages:
            collected.extend(page.violations)
        collected.extend(self.run_violations)
        return collected

    @property
    def ok(self) -> bool:
        """Return whether the run may be published."""
        return not self.page_errors and not self.violations

    def for_layer(self, layer: Layer) -> list[Violation]:
        """Return the violations reported by ``layer``."""
        return [violation for violation in self.violations if violation.layer == layer]

    def for_page(self, page_id: int) -> list[Violation]:
        """Return the violations attributed to ``page_id``."""
        return [v for v in self.violations if v.page_id == page_id]

    def describe(self) -> list[str]:
        """Return one console line per page error and violation."""
        lines = [error.describe() for error in self.page_errors]
        lines.extend(violation.describe() for violation in self.violations)
        return lines

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable mapping of the whole report."""
        return {
            "ok": self.ok,
            "pages": [
                {
                    "page_id": page.page_id,
                    "passed": page.passed,
                    "violations": [v.to_dict() for v in page.violations],
                }
                for page in self.pages
            ],
            "page_errors": [error.to_dict() for error in self.page_errors],
            "run_violations": [v.to_dict() for v in self.run_violations],
        }


__all__ = ["Layer", "PageError", "PageValidation", "ValidationReport", "Violation"]
