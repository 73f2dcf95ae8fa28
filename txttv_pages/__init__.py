"""Convert TxtTV page content into validated gateway policy fragments.

This package exposes the CLI entry points used by ``pages build`` and
``pages check`` to render each configured page from the shared template, wrap
it in a CDATA-carrying XML fragment, and publish the set only when all four
validation layers pass.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from txttv_pages import main
>>> main()  # doctest: +SKIP
>>> from txttv_pages import app
>>> app(["check"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
