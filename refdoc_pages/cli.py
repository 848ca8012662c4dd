"""Cyclopts CLI entrypoint for generating component reference documentation.

The ``refdocs`` console script defined here loads the site configuration and
the TypeDoc-style reflection documents it names, compiles every reference
page, and only then writes the MDX files. A compilation error aborts the run
before anything is written.

Examples
--------
Generate every page for the default configuration:

>>> from refdoc_pages.cli import main
>>> main()  # doctest: +SKIP

Regenerate a single component into a scratch directory:

>>> from refdoc_pages.cli import app
>>> app(
...     ["generate", "--unit", "components/aws/bucket", "--output-dir", "dist"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from rich.logging import RichHandler

from .builder import ReferencePage, ReferencePageBuilder
from .cli_reference import load_cli_reference, load_common_errors
from .config import SiteConfig, SiteConfigError, load_site_config
from .reflection import load_reflection
from .writer import ReferencePageWriter

DEFAULT_CONFIG = Path("config/refdocs.yaml")

Target = typ.Literal["all", "components", "cli", "common-errors", "examples"]

app = App(
    name="refdocs",
    config=cyclopts.config.Env(  # type: ignore[unknown-argument]
        "REFDOCS_", command=False
    ),
)


def configure_logging(*, debug: bool = False) -> None:
    """Route log records through a Rich handler at INFO, or DEBUG with ``debug``."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the path as given."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _required_input(value: str | None, key: str) -> str:
    if not value:
        msg = f"'defaults.{key}' is required."
        raise SiteConfigError(msg)
    return value


def _build_pages(
    site_config: SiteConfig, target: Target, only: str | None
) -> list[ReferencePage]:
    """Compile every page family ``target`` selects, without writing anything.

    ``all`` always builds the component pages and adds each optional family
    whose input is configured. Naming a family explicitly requires its input.
    """
    explicit = target != "all"
    pages: list[ReferencePage] = []
    if target in {"all", "components"}:
        units = load_reflection(
            _required_input(site_config.components_reflection, "components_reflection")
        )
        sdk_units = (
            load_reflection(site_config.sdk_reflection)
            if site_config.sdk_reflection
            else []
        )
        pages.extend(
            ReferencePageBuilder(site_config, sdk_units).build(units, only=only)
        )
    builder = ReferencePageBuilder(site_config)
    if target in {"all", "cli"} and (explicit or site_config.cli_doc):
        root = load_cli_reference(_required_input(site_config.cli_doc, "cli_doc"))
        pages.append(builder.cli_page(root))
    if target in {"all", "common-errors"} and (
        explicit or site_config.common_errors_doc
    ):
        errors = load_common_errors(
            _required_input(site_config.common_errors_doc, "common_errors_doc")
        )
        pages.append(builder.common_errors_page(errors))
    if target in {"all", "examples"} and (
        explicit or site_config.examples_reflection
    ):
        examples = load_reflection(
            _required_input(site_config.examples_reflection, "examples_reflection")
        )
        pages.append(builder.examples_page(examples))
    return pages


@app.command(help="Generate MDX reference pages from reflection JSON.")
def generate(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="REFDOCS_CONFIG")
    ] = DEFAULT_CONFIG,
    target: typ.Annotated[
        Target,
        Parameter(help="Page family to generate", env_var="REFDOCS_TARGET"),
    ] = "all",
    unit: typ.Annotated[
        str | None,
        Parameter(help="Only generate the unit with this name", env_var="REFDOCS_UNIT"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the site root", env_var="REFDOCS_OUTPUT_DIR"),
    ] = None,
    debug: typ.Annotated[
        bool, Parameter(help="Log every documented symbol", env_var="REFDOCS_DEBUG")
    ] = False,
) -> None:
    """Generate reference pages for the configured reflection documents.

    Parameters
    ----------
    config : Path, optional
        Path to the ``refdocs.yaml`` configuration file (overridable via
        ``REFDOCS_CONFIG``).
    target : {"all", "components", "cli", "common-errors", "examples"}, optional
        Page family to generate. ``all`` (default) builds the component pages
        plus every optional family whose input is configured.
    unit : str or None, optional
        Name of a single unit to generate, such as ``components/aws/bucket``;
        when ``None`` (default) every unit is generated. Only component
        pages are filtered.
    output_dir : Path or None, optional
        Site root to write below instead of the configured ``output_dir``.
    debug : bool, optional
        Lower the log level to ``DEBUG``.

    Raises
    ------
    SiteConfigError
        If an input the selected families need is not configured.
    ReferenceDocError
        If any page fails to compile; no files are written in that case.
    """
    configure_logging(debug=debug)
    site_config = load_site_config(config)
    pages = _build_pages(site_config, target, unit)

    writer = ReferencePageWriter(
        output_dir or site_config.output_dir, site_config.docs_root
    )
    for path in writer.write(pages):
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``refdocs`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
