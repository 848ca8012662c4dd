"""Compile the symbols of one documentation unit into section fragments.

:class:`PageCompiler` walks a unit's variables, functions, classes and
interfaces and emits :class:`~refdoc_pages.compiler.fragments.SectionFragment`
lists for the page writer. Each compiler owns the unit's
:class:`~refdoc_pages.compiler.anchors.AnchorRegistry`, so the bullet list of
nested fields and the nested sections that follow it share the same anchors.

Example
-------
>>> from refdoc_pages.reflection import load_reflection
>>> from refdoc_pages.compiler import PageCompiler
>>> unit = load_reflection("components-doc.json")[0]  # doctest: +SKIP
>>> compiler = PageCompiler(unit)  # doctest: +SKIP
>>> [f.title for f in compiler.interfaces(nested=False)]  # doctest: +SKIP
['BucketArgs', 'BucketCorsArgs']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from refdoc_pages._constants import (
    DEFAULT_BUILDER_METHODS,
    PARAMETER_TYPE_OVERRIDES,
    VARIABLE_INTERFACES,
    VARIABLE_REFERENCE_OVERRIDES,
)
from refdoc_pages.errors import MissingRequiredMetadata
from refdoc_pages.reflection import (
    ArrayOf,
    InlineObject,
    LiteralValue,
    Primitive,
    Reference,
    Signature,
    Symbol,
    SymbolKind,
    is_hidden,
    render_parts,
)

from .anchors import AnchorRegistry
from .dispatcher import (
    DEFAULT_CONTEXT,
    RenderContext,
    code,
    declared_type,
    render_declared,
    render_parameter_name,
    render_signature,
    render_type,
)
from .flattener import flatten, nested_type_of
from .fragments import SectionFragment

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from refdoc_pages.reflection import Comment, DocumentationUnit

logger = logging.getLogger(__name__)

LINK_METHOD = "getSSTLink"
CLOUDFLARE_BINDING = "cloudflare.binding"


def render_name(symbol: Symbol) -> str:
    """Return the symbol name, suffixed with ``?`` when it is optional."""
    return f"{symbol.name}{'?' if symbol.flags.optional else ''}"


def order_builder_methods(
    members: cabc.Sequence[Symbol], names: cabc.Collection[str]
) -> list[Symbol]:
    """Move methods named in ``names`` ahead of every other member, stably."""
    first = [m for m in members if m.kind == SymbolKind.METHOD and m.name in names]
    rest = [m for m in members if m not in first]
    return first + rest


def _entry_owner(symbol: Symbol) -> Symbol | Signature:
    """Return the symbol or signature that documents a nested entry."""
    if symbol.kind == SymbolKind.METHOD and symbol.signatures:
        return symbol.signatures[0]
    if symbol.kind == SymbolKind.ACCESSOR and symbol.get_signature is not None:
        return symbol.get_signature
    return symbol


def _first_signature(symbol: Symbol) -> Signature:
    if not symbol.signatures:
        msg = f"'{symbol.name}' has no call signature."
        raise MissingRequiredMetadata(msg)
    return symbol.signatures[0]


class PageCompiler:
    """Emit ordered section fragments for the symbols of one unit."""

    def __init__(
        self,
        unit: DocumentationUnit,
        *,
        builder_methods: cabc.Mapping[str, cabc.Sequence[str]] | None = None,
    ) -> None:
        """Initialize the compiler with a fresh anchor registry.

        Parameters
        ----------
        unit : DocumentationUnit
            Unit whose symbols are compiled and whose interfaces are link
            targets for same-page references.
        builder_methods : Mapping[str, Sequence[str]], optional
            Class name to builder-style method names listed first; defaults
            to the ``StepFunctions`` builder methods.
        """
        self.unit = unit
        self.anchors = AnchorRegistry()
        self.builder_methods = (
            builder_methods if builder_methods is not None else DEFAULT_BUILDER_METHODS
        )

    # -- shared pieces ---------------------------------------------------

    def _type(
        self, owner: Symbol | Signature, context: RenderContext = DEFAULT_CONTEXT
    ) -> str:
        return render_declared(self.unit, owner, context)

    @staticmethod
    def _description(
        owner: Symbol | Signature, *, indent: bool = False
    ) -> list[str]:
        if owner.comment is None or not owner.comment.summary:
            return []
        text = owner.comment.summary_text
        if indent:
            text = "\n".join(f"  {line}" for line in text.split("\n"))
        return [text]

    @staticmethod
    def _examples(owner: Symbol | Signature) -> list[str]:
        return owner.comment.examples() if owner.comment else []

    def default_tag(self, symbol: Symbol) -> list[str]:
        """Render the ``@default`` tag of ``symbol``, if present.

        A tag holding a single code span renders as a primitive value;
        anything else renders as comment text.
        """
        tag = symbol.comment.find_tag("@default") if symbol.comment else None
        if tag is None:
            return []
        if len(tag.content) == 1 and tag.content[0].kind == "code":
            value = (
                tag.content[0]
                .text.replace("`", "")
                .replace("{", "&lcub;")
                .replace("}", "&rcub;")
            )
            rendered = render_type(self.unit, Primitive(value))
        else:
            rendered = render_parts(tag.content)
        return ["", "<InlineSection>", f"**Default** {rendered}", "</InlineSection>"]

    def _returns(self, signature: Signature) -> list[str]:
        return [
            "",
            "<InlineSection>",
            f"**Returns** {self._type(signature)}",
            "</InlineSection>",
        ]

    def _parameters(
        self, owner: Symbol, signature: Signature, title: str
    ) -> list[str]:
        if not signature.parameters:
            return []
        lines = ["", '<Section type="parameters">', title]
        for param in signature.parameters:
            rendered = PARAMETER_TYPE_OVERRIDES.get((owner.name, param.name))
            if rendered is None:
                rendered = self._type(param)
            name = code("key", render_parameter_name(param))
            lines.append(f"- <p>{name} {rendered}</p>")
            lines.extend(self._description(param))
        lines.append("</Section>")
        return lines

    def _type_block(self, owner: Symbol | Signature, nested_name: str) -> list[str]:
        return [
            '<Section type="parameters">',
            "<InlineSection>",
            f"**Type** {self._type(owner)}",
            "</InlineSection>",
            *self.nested_type_list(owner, nested_name),
            "</Section>",
        ]

    def nested_type_list(self, owner: Symbol | Signature, name: str) -> list[str]:
        """Return the anchored bullet list of fields nested in ``owner``'s type.

        Anchors are assigned here, in list order; the nested sections emitted
        later look the same anchors up again.
        """
        lines: list[str] = []
        for entry in flatten(declared_type(owner), name):
            symbol = entry.symbol
            has_children = bool(flatten(nested_type_of(symbol)))
            suffix = f" {self._type(_entry_owner(symbol))}" if has_children else ""
            anchor = self.anchors.assign(symbol, entry.prefix)
            indent = "  " * entry.depth
            key = code("key", render_name(symbol))
            lines.append(f"{indent}- <p>[{key}](#{anchor}){suffix}</p>")
        return lines

    def _nested_sections(
        self, owner: Symbol | Signature, name: str
    ) -> list[SectionFragment]:
        """Return one section per field nested in ``owner``'s type."""
        fragments: list[SectionFragment] = []
        for entry in flatten(declared_type(owner), name):
            symbol = entry.symbol
            anchor = self.anchors.assign(symbol, entry.prefix)
            level = 4 if entry.depth == 0 else 5
            parent = f"{entry.prefix}."
            if symbol.kind == SymbolKind.METHOD:
                fragments.extend(
                    self.method(
                        symbol,
                        title=render_name(symbol),
                        level=level,
                        anchor=anchor,
                        parent=parent,
                        parameters_title="**Parameters**",
                    )
                )
                continue
            documented = _entry_owner(symbol)
            body = [
                "<Segment>",
                '<Section type="parameters">',
                "<InlineSection>",
                f"**Type** {self._type(documented)}",
                "</InlineSection>",
                "</Section>",
                *self.default_tag(symbol),
                *self._description(documented),
                "",
                *self._examples(documented),
                "</Segment>",
            ]
            fragments.append(
                SectionFragment(
                    render_name(symbol), level, body, anchor=anchor, parent=parent
                )
            )
        return fragments

    # -- sections ----------------------------------------------------------

    def about(self, comment: Comment) -> list[SectionFragment]:
        """Return the untitled "about" section built from ``comment``."""
        logger.debug(" - about")
        body = ["", '<Section type="about">', comment.summary_text]
        examples = comment.examples()
        if examples:
            body.extend(["", *examples])
        body.extend(["</Section>", "", "---"])
        return [SectionFragment("", 0, body)]

    def _documented_variable(self, variable: Symbol) -> Symbol:
        """Return ``variable`` retyped to the declaration that documents it.

        Some variables are typed through helpers that carry no field
        documentation; they are shown with the fields of a named interface
        in the same unit, or as a reference to a fixed type instead.
        """
        interface_name = VARIABLE_INTERFACES.get(variable.name)
        interface = (
            self.unit.interface_named(interface_name) if interface_name else None
        )
        if interface is not None:
            return dc.replace(variable, type=InlineObject(interface.children))
        override = VARIABLE_REFERENCE_OVERRIDES.get((self.unit.name, variable.name))
        if override is not None:
            package, name = override
            return dc.replace(variable, type=Reference(name, package=package))
        return variable

    def variables(self, title: str | None = None) -> list[SectionFragment]:
        """Return sections for the unit's exported variables."""
        variables = [self._documented_variable(v) for v in self.unit.variables()]
        if not variables:
            return []
        fragments = [SectionFragment(title, 2)] if title else []
        for variable in variables:
            logger.debug(" - variable %s", variable.name)
            body = [
                "<Segment>",
                *self._type_block(variable, variable.name),
                *self._description(variable),
                *self._examples(variable),
                "</Segment>",
            ]
            fragments.append(SectionFragment(render_name(variable), 3, body))
            fragments.extend(self._nested_sections(variable, variable.name))
        return fragments

    def functions(
        self,
        functions: cabc.Sequence[Symbol],
        *,
        title: str | None = None,
        prefix: str | None = None,
    ) -> list[SectionFragment]:
        """Return sections for ``functions``, optionally prefixing signatures."""
        if not functions:
            return []
        fragments = [SectionFragment(title, 2)] if title else []
        for fn in functions:
            logger.debug(" - function %s", fn.name)
            signature = _first_signature(fn)
            qualified = f"{prefix}." if prefix else ""
            body = [
                "<Segment>",
                '<Section type="signature">',
                "```ts",
                f"{qualified}{render_signature(signature)}",
                "```",
                "</Section>",
                *self._parameters(fn, signature, "#### Parameters"),
                *self._returns(signature),
                *self._description(signature),
                "",
                *self._examples(signature),
                "</Segment>",
            ]
            fragments.append(SectionFragment(render_name(fn), 3, body))
        return fragments

    def constructor(self) -> list[SectionFragment]:
        """Return the constructor section of the unit's class.

        Raises
        ------
        MissingRequiredMetadata
            If the class has no constructor.
        """
        logger.debug(" - constructor")
        cls = self.unit.class_symbol()
        constructors = cls.children_of_kind(SymbolKind.CONSTRUCTOR)
        if not constructors:
            msg = f"Constructor not found for class '{cls.name}'."
            raise MissingRequiredMetadata(msg)
        signature = _first_signature(constructors[0])
        body = [
            "",
            "<Segment>",
            '<Section type="signature">',
            "```ts",
            render_signature(signature),
            "```",
            "</Section>",
            *self._parameters(constructors[0], signature, "#### Parameters"),
            "</Segment>",
        ]
        return [SectionFragment("Constructor", 2, body)]

    def class_methods(self) -> list[Symbol]:
        """Return the class's public, documented methods, builders first."""
        cls = self.unit.class_symbol()
        methods = [
            child
            for child in cls.children_of_kind(SymbolKind.METHOD)
            if not child.flags.external
            and not child.flags.private
            and not child.flags.protected
            and child.signatures
            and not is_hidden(child.signatures[0].comment)
        ]
        return order_builder_methods(methods, self.builder_methods.get(cls.name, ()))

    def class_getters(self) -> list[Symbol]:
        """Return the class's public accessors."""
        cls = self.unit.class_symbol()
        return [c for c in cls.children_of_kind(SymbolKind.ACCESSOR) if c.flags.public]

    def _class_method_named(self, name: str) -> Symbol | None:
        cls = self.unit.class_symbol()
        return next(
            (
                c
                for c in cls.children_of_kind(SymbolKind.METHOD)
                if not c.flags.external
                and c.signatures
                and c.signatures[0].name == name
            ),
            None,
        )

    def methods(self) -> list[SectionFragment]:
        """Return the "Methods" group for the unit's class."""
        methods = self.class_methods()
        if not methods:
            return []
        fragments = [SectionFragment("Methods", 2)]
        for method in methods:
            static = "static " if method.flags.static else ""
            title = f"{static}{render_name(method)}"
            fragments.extend(self.method(method, title=title))
        return fragments

    def method(
        self,
        method: Symbol,
        *,
        title: str,
        level: int = 3,
        anchor: str | None = None,
        parent: str | None = None,
        parameters_title: str = "#### Parameters",
    ) -> list[SectionFragment]:
        """Return the section for one method; non-methods yield nothing."""
        if method.kind != SymbolKind.METHOD:
            return []
        logger.debug(" - method %s", method.name)
        signature = _first_signature(method)
        owner = f"{self.unit.class_symbol().name}." if method.flags.static else ""
        body = [
            "<Segment>",
            '<Section type="signature">',
            "```ts",
            f"{owner}{render_signature(signature)}",
            "```",
            "</Section>",
            *self._parameters(method, signature, parameters_title),
            *self._returns(signature),
            *self._description(signature),
            "",
            *self._examples(signature),
            "</Segment>",
        ]
        return [SectionFragment(title, level, body, anchor=anchor, parent=parent)]

    def properties(self) -> list[SectionFragment]:
        """Return the "Properties" group built from public class getters."""
        getters = [
            g
            for g in self.class_getters()
            if g.get_signature is not None and not is_hidden(g.get_signature.comment)
        ]
        if not getters:
            return []
        fragments = [SectionFragment("Properties", 2)]
        for getter in getters:
            logger.debug(" - property %s", getter.name)
            signature = typ.cast("Signature", getter.get_signature)
            body = [
                "<Segment>",
                *self._type_block(signature, getter.name),
                *self._description(signature),
                "</Segment>",
            ]
            fragments.append(SectionFragment(render_name(getter), 3, body))
            fragments.extend(self._nested_sections(signature, getter.name))
        return fragments

    def _link_fields(self, name: str) -> Symbol | None:
        """Return field ``name`` of the link method's returned object type."""
        method = self._class_method_named(LINK_METHOD)
        if method is None:
            return None
        returns = method.signatures[0].returns
        if not isinstance(returns, InlineObject):
            return None
        return next((f for f in returns.fields if f.name == name), None)

    def links(self) -> list[SectionFragment]:
        """Return the "Links" section listing the linkable properties.

        Raises
        ------
        MissingRequiredMetadata
            If a link property has no getter with the same name.
        """
        properties = self._link_fields("properties")
        if properties is None or not isinstance(properties.type, InlineObject):
            return []
        links = [
            f
            for f in properties.type.fields
            if not (f.comment is not None and f.comment.is_internal)
        ]
        if not links:
            return []
        getters = {g.name: g for g in self.class_getters()}
        lines: list[str] = []
        for link in links:
            logger.debug(" - link %s", link.name)
            getter = getters.get(link.name)
            if getter is None or getter.get_signature is None:
                msg = (
                    f"Failed to render link {link.name} because no getter "
                    "property has the matching name."
                )
                raise MissingRequiredMetadata(msg)
            rendered = self._type(link, RenderContext(unwrap_containers=True))
            lines.extend(
                [
                    f"- <p>{code('key', render_name(link))} {rendered}</p>",
                    "",
                    *self._description(getter.get_signature, indent=True),
                ]
            )
        body = [
            "This is accessible through the `Resource` object in the "
            "[SDK](/docs/reference/sdk/#links).",
            "<Segment>",
            '<Section type="parameters">',
            *lines,
            "</Section>",
            "</Segment>",
        ]
        return [SectionFragment("Links", 3, body)]

    def bindings(self) -> list[SectionFragment]:
        """Return the "Bindings" section for Cloudflare-bindable components."""
        include = self._link_fields("include")
        if include is None:
            return []
        match include.type:
            case ArrayOf(element=InlineObject(fields=fields)):
                pass
            case _:
                return []
        is_binding = any(
            f.name == "type"
            and isinstance(f.type, LiteralValue)
            and f.type.value == CLOUDFLARE_BINDING
            for f in fields
        )
        if not is_binding:
            return []
        method = typ.cast("Symbol", self._class_method_named(LINK_METHOD))
        signature = method.signatures[0]
        body = [
            "<Segment>",
            *self._description(signature),
            "",
            *self._examples(signature),
            "</Segment>",
        ]
        return [SectionFragment("Bindings", 3, body)]

    def interfaces(
        self,
        predicate: cabc.Callable[[Symbol], bool] | None = None,
        *,
        nested: bool = False,
    ) -> list[SectionFragment]:
        """Return sections for the unit's visible interfaces.

        Parameters
        ----------
        predicate : Callable[[Symbol], bool], optional
            Keeps only the interfaces it accepts.
        nested : bool, optional
            ``False`` gives each interface an ``h2`` heading with an ``h3``
            per member; ``True`` renders each interface as one ``h3`` object
            whose fields are nested entries beneath it.
        """
        interfaces = [
            i
            for i in self.unit.interfaces()
            if not i.is_hidden and (predicate is None or predicate(i))
        ]
        fragments: list[SectionFragment] = []
        for interface in interfaces:
            logger.debug(" - interface %s", interface.name)
            if nested:
                fragments.extend(self._nested_interface(interface))
            else:
                fragments.extend(self._top_level_interface(interface))
        return fragments

    def _nested_interface(self, interface: Symbol) -> list[SectionFragment]:
        as_object = Symbol(
            name=interface.name,
            kind=SymbolKind.TYPE_LITERAL,
            type=InlineObject(interface.children),
            source_path=interface.source_path,
        )
        body = ["<Segment>", *self._type_block(as_object, as_object.name), "</Segment>"]
        return [
            SectionFragment(interface.name, 3, body),
            *self._nested_sections(as_object, as_object.name),
        ]

    def _top_level_interface(self, interface: Symbol) -> list[SectionFragment]:
        if not interface.children:
            msg = f"Interface {interface.name} has no props."
            raise MissingRequiredMetadata(msg)
        intro = self._description(interface)
        fragments = [SectionFragment(interface.name, 2, ["", *intro] if intro else [])]
        for member in interface.children:
            if member.is_hidden:
                continue
            if member.kind == SymbolKind.PROPERTY:
                logger.debug("   - interface prop %s", member.name)
                body = [
                    "<Segment>",
                    *self._type_block(member, member.name),
                    *self.default_tag(member),
                    *self._description(member),
                    "",
                    *self._examples(member),
                    "</Segment>",
                ]
                fragments.append(SectionFragment(render_name(member), 3, body))
                fragments.extend(self._nested_sections(member, member.name))
            elif member.kind == SymbolKind.METHOD:
                logger.debug("   - interface method %s", member.name)
                static = "static " if member.flags.static else ""
                fragments.extend(
                    self.method(member, title=f"{static}{render_name(member)}")
                )
        return fragments


__all__ = ["PageCompiler", "order_builder_methods", "render_name"]
