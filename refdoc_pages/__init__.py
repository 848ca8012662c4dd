"""Utilities for generating component reference documentation pages.

This package turns TypeDoc-style reflection JSON into MDX reference pages:
one page per component, plus the global library, config, DNS adapter and
linkable-helper pages.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from refdoc_pages import main
>>> main()  # doctest: +SKIP
>>> from refdoc_pages import app
>>> app.name  # doctest: +SKIP
('refdocs',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
