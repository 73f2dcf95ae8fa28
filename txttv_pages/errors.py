"""Exception hierarchy shared by the fragment pipeline.

Input and assembly errors are fatal to a single page and are collected by the
orchestrator; template and output-directory errors are fatal to the run.
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for errors raised while converting pages to fragments."""


class ContentError(PipelineError):
    """Raised when a page's content file is missing, unreadable, or invalid."""


class TemplateError(PipelineError):
    """Raised when the page template or its shared assets cannot be used."""


class ResolutionError(PipelineError):
    """Raised when a page cannot be resolved against the template."""


class AssemblyError(PipelineError):
    """Raised when a resolved document cannot be wrapped into a fragment."""


class OutputDirectoryError(PipelineError):
    """Raised when the output directory cannot be written."""


__all__ = [
    "AssemblyError",
    "ContentError",
    "OutputDirectoryError",
    "PipelineError",
    "ResolutionError",
    "TemplateError",
]
