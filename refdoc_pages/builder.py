"""Assemble reference pages from compiled documentation units.

:class:`ReferencePageBuilder` routes each unit to a page family using the
configured :class:`~refdoc_pages.config.RoutingConfig`, runs a
:class:`~refdoc_pages.compiler.PageCompiler` per unit, and returns
:class:`ReferencePage` values. Nothing is written here; the CLI builds every
page first and only then hands them to
:class:`~refdoc_pages.writer.ReferencePageWriter`, so a failure in any unit
leaves the output tree untouched.

Example
-------
>>> from refdoc_pages.builder import ReferencePageBuilder
>>> from refdoc_pages.config import SiteConfig
>>> builder = ReferencePageBuilder(SiteConfig())
>>> builder.build([])
[]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from pathlib import Path

from refdoc_pages._constants import COMPONENT_SOURCE_ROOT
from refdoc_pages.cli_reference import cli_sections, common_error_sections
from refdoc_pages.compiler import PageCompiler, SectionFragment
from refdoc_pages.config import UnitKind
from refdoc_pages.errors import MissingRequiredMetadata

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from refdoc_pages.cli_reference import CliCommand, CommonError
    from refdoc_pages.config import SiteConfig
    from refdoc_pages.reflection import DocumentationUnit

logger = logging.getLogger(__name__)

VERSION_SUFFIX = re.compile(r"-(v\d+)$")
SDK_INTRO = (
    "Use the [SDK](/docs/reference/sdk/) in your runtime to interact with your "
    "infrastructure."
)
CLI_SOURCE = "cmd/sst/main.go"
RUN_START = "  async run() {"
RUN_END = "  },"


@dc.dataclass(slots=True)
class ReferencePage:
    """A compiled page ready for templating.

    Attributes
    ----------
    title : str
        Front-matter title.
    description : str
        Front-matter description.
    source : str
        Source file named in the "do not edit" note.
    output_path : Path
        Path of the page relative to the docs root.
    sections : list[SectionFragment]
        Ordered page body.
    wrap_body : bool
        Whether the body sits inside the ``tsdoc`` container.
    """

    title: str
    description: str
    source: str
    output_path: Path
    sections: list[SectionFragment] = dc.field(default_factory=list)
    wrap_body: bool = True


def _page_path(unit: DocumentationUnit) -> Path:
    """Return ``component/<unit path>.mdx`` without the leading unit segment."""
    rest = "/".join(unit.name.split("/")[1:])
    return Path("component") / f"{rest}.mdx"


def _required_source(unit: DocumentationUnit) -> str:
    if not unit.source_path:
        msg = f"Unit '{unit.name}' has no source file."
        raise MissingRequiredMetadata(msg)
    return unit.source_path


def _examples_intro(github: str) -> list[str]:
    return [
        "Below is a collection of example SST apps. These are available in the "
        f"[`examples/`]({github}/tree/dev/examples) directory of the repo.",
        "",
        ":::tip",
        "This doc is best viewed through the site search or through the _AI_.",
        ":::",
        "",
        "The descriptions for these examples are generated using the comments in the "
        "`sst.config.ts` of the app.",
        "",
        "#### Contributing",
        "To contribute an example or to edit one, submit a PR to the "
        f"[repo]({github}).",
        "Make sure to document the `sst.config.ts` in your example.",
        "",
    ]


def provider_namespace(unit: DocumentationUnit) -> str:
    """Return ``sst`` or ``sst.<provider>`` for the unit's component class.

    Raises
    ------
    MissingRequiredMetadata
        If the class is declared outside the component source tree.
    """
    cls = unit.class_symbol()
    source = cls.source_path or ""
    if not source.startswith(COMPONENT_SOURCE_ROOT):
        msg = (
            f"Fail to generate class namespace from class fileName {source}. "
            f'Expected to start with "{COMPONENT_SOURCE_ROOT}"'
        )
        raise MissingRequiredMetadata(msg)
    namespace = source.split("/")[-2]
    return "sst" if namespace == "components" else f"sst.{namespace}"


class ReferencePageBuilder:
    """Build reference pages for every routed documentation unit."""

    def __init__(
        self,
        site_config: SiteConfig,
        sdk_units: cabc.Sequence[DocumentationUnit] = (),
    ) -> None:
        self.config = site_config
        self.sdk_units = list(sdk_units)

    def _compiler(self, unit: DocumentationUnit) -> PageCompiler:
        return PageCompiler(unit, builder_methods=self.config.builder_methods)

    def build(
        self,
        units: cabc.Sequence[DocumentationUnit],
        *,
        only: str | None = None,
    ) -> list[ReferencePage]:
        """Compile a page for each unit, in input order.

        Parameters
        ----------
        units : Sequence[DocumentationUnit]
            Component reflection units. Units routed to ``SKIP`` produce no
            page but remain available to the global page.
        only : str, optional
            Build just the unit with this name.

        Returns
        -------
        list[ReferencePage]
            Compiled pages. Any compilation error propagates unchanged.
        """
        pages: list[ReferencePage] = []
        for unit in units:
            if only is not None and unit.name != only:
                continue
            kind = self.config.routing.classify(_required_source(unit))
            match kind:
                case UnitKind.SKIP:
                    logger.debug("Skipping %s", unit.name)
                    continue
                case UnitKind.GLOBAL:
                    pages.append(self.global_page(unit, units))
                case UnitKind.CONFIG:
                    pages.append(self.config_page(unit))
                case UnitKind.DNS:
                    pages.append(self.dns_page(unit))
                case UnitKind.LINKABLE:
                    pages.append(self.linkable_page(unit))
                case UnitKind.COMPONENT:
                    pages.append(self.component_page(unit))
        return pages

    def global_page(
        self, unit: DocumentationUnit, units: cabc.Sequence[DocumentationUnit]
    ) -> ReferencePage:
        """Build the page for the global ``$`` library."""
        logger.info("Generating Global...")
        compiler = self._compiler(unit)
        sections = [
            *compiler.about(unit.required_comment()),
            *compiler.variables("Variables"),
            *compiler.functions(unit.functions(), title="Functions"),
        ]
        for title, suffix in self.config.routing.global_extra_functions.items():
            extra = next(
                (u for u in units if (u.source_path or "").endswith(suffix)), None
            )
            if extra is None:
                msg = f"No unit is declared in a file ending with '{suffix}'."
                raise MissingRequiredMetadata(msg)
            sections.extend(compiler.functions(extra.functions(), title=title))
        return ReferencePage(
            title="Global",
            description="Reference doc for the Global `$` library.",
            source=_required_source(unit),
            output_path=Path("reference/global.mdx"),
            sections=sections,
        )

    def config_page(self, unit: DocumentationUnit) -> ReferencePage:
        """Build the page for the project config file."""
        logger.info("Generating Config...")
        compiler = self._compiler(unit)
        sections = [
            *compiler.about(unit.required_comment()),
            *compiler.interfaces(lambda i: i.name == "Config"),
            *compiler.interfaces(lambda i: i.name != "Config"),
        ]
        return ReferencePage(
            title="Config",
            description="Reference doc for the `sst.config.ts`.",
            source=_required_source(unit),
            output_path=Path("reference/config.mdx"),
            sections=sections,
        )

    def dns_page(self, unit: DocumentationUnit) -> ReferencePage:
        """Build the page for a provider's DNS adapter."""
        logger.info("Generating %s...", unit.name)
        provider = unit.name.split("/")[1]
        title = self.config.routing.dns_titles.get(provider, provider)
        compiler = self._compiler(unit)
        sections = [
            *compiler.about(unit.required_comment()),
            *compiler.functions(unit.functions(), title="Functions"),
            *compiler.interfaces(),
        ]
        return ReferencePage(
            title=f"{title} DNS Adapter",
            description=f"Reference doc for the `sst.{provider}.dns` adapter.",
            source=_required_source(unit),
            output_path=Path("component") / provider / "dns.mdx",
            sections=sections,
        )

    def linkable_page(self, unit: DocumentationUnit) -> ReferencePage:
        """Build the page for a linkable helper module."""
        logger.info("Generating %s...", unit.name)
        source = _required_source(unit)
        copy = self.config.routing.linkable_copy(source)
        if copy is None:
            msg = f"No linkable copy is configured for '{source}'."
            raise MissingRequiredMetadata(msg)
        compiler = self._compiler(unit)
        sections = [
            *compiler.about(unit.required_comment()),
            *compiler.functions(unit.functions(), title="Functions"),
            *compiler.interfaces(),
        ]
        return ReferencePage(
            title=f"{copy.title} Linkable helper",
            description=f"Reference doc for the `{copy.namespace}` helper.",
            source=source,
            output_path=_page_path(unit),
            sections=sections,
        )

    def find_sdk(self, unit: DocumentationUnit) -> DocumentationUnit | None:
        """Return the SDK unit (or its namespace) paired with a component."""
        parts = unit.name.split("/")
        if len(parts) < 3:  # noqa: PLR2004
            return None
        name = parts[2]
        sdk = next(
            (s for s in self.sdk_units if s.name in {name, f"aws/{name}"}), None
        )
        return sdk.namespace_or_self() if sdk is not None else None

    def component_page(self, unit: DocumentationUnit) -> ReferencePage:
        """Build the page for a component class and its runtime SDK."""
        logger.info("Generating %s...", unit.name)
        compiler = self._compiler(unit)
        cls = unit.class_symbol()
        class_name = cls.name
        match = VERSION_SUFFIX.search(unit.name)
        version = f".{match.group(1)}" if match else ""
        if cls.comment is None:
            msg = f"Class comment not found for '{class_name}'."
            raise MissingRequiredMetadata(msg)

        constructor = compiler.constructor()
        for fragment in constructor:
            fragment.body = [
                line.replace(f"new {class_name}", f"new {class_name}{version}")
                for line in fragment.body
            ]
        args_name = f"{class_name}Args"
        sections = [
            *compiler.about(cls.comment),
            *constructor,
            *compiler.interfaces(lambda i: i.name == args_name),
            *compiler.properties(),
            *self._sdk_sections(compiler, self.find_sdk(unit)),
            *compiler.methods(),
            *compiler.interfaces(lambda i: i.name != args_name),
        ]
        full_name = f"{provider_namespace(unit)}.{class_name}{version}"
        return ReferencePage(
            title=f"{class_name}{version}",
            description=f"Reference doc for the `{full_name}` component.",
            source=_required_source(unit),
            output_path=_page_path(unit),
            sections=sections,
        )

    def cli_page(self, root: CliCommand) -> ReferencePage:
        """Build the CLI reference page from the command tree."""
        logger.info("Generating CLI...")
        return ReferencePage(
            title="CLI",
            description="Reference doc for the SST CLI.",
            source=CLI_SOURCE,
            output_path=Path("reference/cli.mdx"),
            sections=cli_sections(root),
        )

    def common_errors_page(self, errors: cabc.Sequence[CommonError]) -> ReferencePage:
        """Build the page listing CLI error messages and their fixes."""
        logger.info("Generating Common Errors...")
        return ReferencePage(
            title="Common Errors",
            description="A list of CLI error messages and how to fix them.",
            source=CLI_SOURCE,
            output_path=Path("common-errors.mdx"),
            sections=common_error_sections(errors),
        )

    def examples_page(self, units: cabc.Sequence[DocumentationUnit]) -> ReferencePage:
        """Build the examples page from the ``sst.config.ts`` of each example app.

        Only units with exactly one documented export are listed. Each entry
        shows that export's comment and the body of the app's ``run``
        function, read from ``examples_root``.
        """
        github = self.config.github_url
        sections = [SectionFragment("", 0, _examples_intro(github))]
        for unit in units:
            comment = unit.symbols[0].comment if len(unit.symbols) == 1 else None
            if comment is None:
                continue
            name = unit.name.split("/")[0]
            logger.info("Generating example %s...", name)
            body = [
                "",
                "---",
                comment.summary_text,
                *self._run_function(unit),
                "",
                f"View the [full example]({github}/tree/dev/examples/{name}).",
                "",
            ]
            sections.append(SectionFragment("", 0, body))
        return ReferencePage(
            title="Examples",
            description="A collection of example apps for reference.",
            source="examples/",
            output_path=Path("examples.mdx"),
            sections=sections,
            wrap_body=False,
        )

    def _run_function(self, unit: DocumentationUnit) -> list[str]:
        """Return the dedented body of the app's ``run`` function as a code block.

        Raises
        ------
        MissingRequiredMetadata
            If the config file has no ``run`` function at the expected indent.
        """
        path = self.config.examples_root / _required_source(unit)
        lines = path.read_text(encoding="utf-8").replace("\t", "  ").split("\n")
        ends = [index for index, line in enumerate(lines) if line == RUN_END]
        if RUN_START not in lines or not ends:
            msg = f"No '{RUN_START.strip()}' block found in '{path}'."
            raise MissingRequiredMetadata(msg)
        start = lines.index(RUN_START)
        return [
            '```ts title="sst.config.ts"',
            *(line[4:] for line in lines[start + 1 : ends[-1]]),
            "```",
        ]


    def _sdk_sections(
        self, compiler: PageCompiler, sdk: DocumentationUnit | None
    ) -> list[SectionFragment]:
        """Return the "SDK" group, or nothing when it would be empty."""
        sections = [*compiler.links(), *compiler.bindings()]
        if sdk is not None:
            sdk_compiler = self._compiler(sdk)
            if sdk.name in self.config.sdk.about_namespaces:
                sections.extend(sdk_compiler.about(sdk.required_comment()))
            if sdk.name in self.config.sdk.variable_namespaces:
                sections.extend(sdk_compiler.variables())
            prefixed = self.config.sdk.prefixed_namespaces
            prefix = sdk.name if sdk.name in prefixed else None
            sections.extend(sdk_compiler.functions(sdk.functions(), prefix=prefix))
            sections.extend(sdk_compiler.interfaces(nested=True))
        if not sections:
            return []
        return [SectionFragment("SDK", 2, ["", SDK_INTRO, "", "---"]), *sections]


__all__ = ["ReferencePage", "ReferencePageBuilder", "provider_namespace"]
