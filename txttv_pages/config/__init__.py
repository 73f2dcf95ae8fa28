"""Load and validate run configuration YAML for fragment conversion.

This subpackage parses the project's ``pages.yaml`` file, applies defaults for
the page range, template assets, output location, and ceilings, and produces
typed dataclasses (:class:`RunConfig` and its sections) that the pipeline
consumes. The primary entry point is :func:`load_run_config`.

Examples
--------
>>> from pathlib import Path
>>> from txttv_pages.config import load_run_config
>>> config = load_run_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> config.output.filename_for(101)  # doctest: +SKIP
'page-101.xml'
"""

from .loader import build_run_config, load_run_config
from .models import (
    LimitsConfig,
    OutputConfig,
    PageSetConfig,
    RunConfig,
    RunConfigError,
    TemplateConfig,
)

__all__ = [
    "LimitsConfig",
    "OutputConfig",
    "PageSetConfig",
    "RunConfig",
    "RunConfigError",
    "TemplateConfig",
    "build_run_config",
    "load_run_config",
]
