"""Public exports for the fragment generation pipeline."""

from __future__ import annotations

from .assembler import FragmentAssembler
from .models import Fragment, PageOutcome, ResolvedDocument
from .pipeline import FragmentPipeline, RunResult, RunState
from .publisher import ensure_writable, publish_fragments
from .resolver import PageTemplate, TemplateResolver

__all__ = [
    "Fragment",
    "FragmentAssembler",
    "FragmentPipeline",
    "PageOutcome",
    "PageTemplate",
    "ResolvedDocument",
    "RunResult",
    "RunState",
    "TemplateResolver",
    "ensure_writable",
    "publish_fragments",
]
