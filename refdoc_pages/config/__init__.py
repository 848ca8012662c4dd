"""Load and validate the reference-doc build configuration.

This subpackage parses the project's ``refdocs.yaml`` file and produces
typed dataclasses (:class:`SiteConfig`, :class:`RoutingConfig`, and so on)
that the page builder consumes. The primary entry point is
:func:`load_site_config`, which applies defaults for omitted sections and
raises :class:`SiteConfigError` for values with the wrong shape.

Examples
--------
>>> from pathlib import Path
>>> from refdoc_pages.config import load_site_config
>>> site = load_site_config(Path("config/refdocs.yaml"))  # doctest: +SKIP
>>> site.docs_root  # doctest: +SKIP
PosixPath('src/content/docs/docs')
"""

from .loader import load_site_config
from .models import (
    LinkableCopy,
    RoutingConfig,
    SdkConfig,
    SiteConfig,
    SiteConfigError,
    UnitKind,
)

__all__ = [
    "LinkableCopy",
    "RoutingConfig",
    "SdkConfig",
    "SiteConfig",
    "SiteConfigError",
    "UnitKind",
    "load_site_config",
]
