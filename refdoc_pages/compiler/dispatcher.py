"""Render type expressions into MDX type fragments.

:func:`render_type` is a pure function over the closed :data:`TypeNode`
union. Every variant has one rendering rule. ``match`` statements end in
:func:`_unsupported`, whose ``Never`` parameter makes a type checker reject a
new variant that has no rule, while an unexpected object at runtime raises
:class:`~refdoc_pages.errors.UnsupportedTypeVariant`.

Example
-------
>>> from refdoc_pages.reflection import ArrayOf, DocumentationUnit, Primitive
>>> unit = DocumentationUnit("example", ())
>>> render_type(unit, ArrayOf(Primitive("string")))
'<code class="primitive">string</code><code class="symbol">[]</code>'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from refdoc_pages._constants import (
    ASYNC_WRAPPERS,
    INPUT_WRAPPERS,
    FIXED_RENDERINGS,
    PASSTHROUGH_WRAPPERS,
    PULUMI_OPTIONS_URL,
    TRANSFORM_MARKER,
)
from refdoc_pages.errors import (
    MissingRequiredMetadata,
    UnsupportedParameterDefault,
    UnsupportedTypeVariant,
)
from refdoc_pages.reflection import (
    ArrayOf,
    CallableSignature,
    InlineObject,
    LiteralValue,
    OpaqueType,
    Primitive,
    Reference,
    Signature,
    SymbolKind,
    TemplateLiteral,
    TupleOf,
    Union,
)

from .resolver import link_href, resolve

if typ.TYPE_CHECKING:
    from refdoc_pages.reflection import DocumentationUnit, Symbol, TypeNode

SEE_OVERRIDE_PATTERN = re.compile(r"^\[(@aws-sdk/client-.+)\]\((.+)\)$")
UNION_SEPARATOR = '<code class="symbol"> | </code>'


@dc.dataclass(frozen=True, slots=True)
class RenderContext:
    """Options that change how a type renders.

    Attributes
    ----------
    unwrap_containers : bool
        Render the payload of asynchronous wrappers (``Output<T>``) directly.
    """

    unwrap_containers: bool = False


DEFAULT_CONTEXT = RenderContext()


def code(css_class: str, text: object) -> str:
    """Return ``text`` wrapped in a ``<code>`` tag with ``css_class``."""
    return f'<code class="{css_class}">{text}</code>'


def type_link(label: str, href: str) -> str:
    """Return a markdown link whose text is a type code span."""
    return f"[{code('type', label)}]({href})"


def quoted(text: str) -> str:
    """Return ``text`` as a primitive surrounded by typographic quotes."""
    return (
        f"{code('symbol', '&ldquo;')}{code('primitive', text)}"
        f"{code('symbol', '&rdquo;')}"
    )


def declared_type(owner: Symbol | Signature) -> TypeNode | None:
    """Return the type documented for a symbol or signature."""
    if isinstance(owner, Signature):
        return owner.returns
    if owner.kind == SymbolKind.ACCESSOR and owner.get_signature is not None:
        return owner.get_signature.returns
    return owner.type


def render_declared(
    unit: DocumentationUnit,
    owner: Symbol | Signature,
    context: RenderContext = DEFAULT_CONTEXT,
) -> str:
    """Render the declared type of ``owner``, honouring ``@see`` overrides.

    A single ``@see [@aws-sdk/client-x.Type](url)`` tag replaces the
    structural rendering with a link to the SDK type.

    Raises
    ------
    MissingRequiredMetadata
        If ``owner`` declares no type.
    """
    see = owner.comment.find_tag("@see") if owner.comment else None
    if see is not None and len(see.content) == 1:
        match = SEE_OVERRIDE_PATTERN.match(see.content[0].text)
        if match:
            return type_link(match.group(1), match.group(2))
    node = declared_type(owner)
    if node is None:
        msg = f"'{owner.name}' has no declared type."
        raise MissingRequiredMetadata(msg)
    return render_type(unit, node, context)


def render_type(  # noqa: C901, PLR0911
    unit: DocumentationUnit,
    node: TypeNode,
    context: RenderContext = DEFAULT_CONTEXT,
) -> str:
    """Render ``node`` as an MDX fragment.

    Raises
    ------
    UnsupportedTypeVariant
        If ``node`` has no rendering rule.
    UnsupportedReference
        If a reference cannot be linked.
    """
    match node:
        case Primitive(name=name):
            return code("primitive", name)
        case LiteralValue(value=value):
            return _render_literal(value)
        case TemplateLiteral():
            return _render_template_literal(node)
        case Union(members=members):
            return UNION_SEPARATOR.join(render_type(unit, m, context) for m in members)
        case ArrayOf(element=Union() as element):
            return (
                f"{code('symbol', '(')}{render_type(unit, element, context)}"
                f"{code('symbol', ')[]')}"
            )
        case ArrayOf(element=element):
            return f"{render_type(unit, element, context)}{code('symbol', '[]')}"
        case TupleOf(elements=elements):
            if not elements:
                raise UnsupportedTypeVariant(node, "empty tuple")
            return f"{render_type(unit, elements[0], context)}{code('symbol', '[]')}"
        case Reference():
            return _render_reference(unit, node, context)
        case InlineObject(fields=fields):
            if not fields:
                raise UnsupportedTypeVariant(node, "object type without fields")
            return code("primitive", "Object")
        case CallableSignature(params=params, returns=returns):
            rendered = ", ".join(
                f"{render_parameter_name(p)}: {render_declared(unit, p, context)}"
                for p in params
            )
            return code(
                "primitive", f"({rendered}) => {render_type(unit, returns, context)}"
            )
        case OpaqueType():
            raise UnsupportedTypeVariant(node)
        case _:
            _unsupported(node)


def _unsupported(node: typ.Never) -> typ.NoReturn:
    raise UnsupportedTypeVariant(node)


def _render_literal(value: str | float | bool | None) -> str:
    if isinstance(value, bool):
        return code("primitive", "true" if value else "false")
    if value is None:
        return quoted("null")
    if isinstance(value, str):
        return quoted(re.sub(r"([*:])", r"\\\1", value))
    return quoted(str(value))


def _escape_braces(text: str) -> str:
    return text.replace("{", "\\{").replace("}", "\\}")


def _render_template_literal(node: TemplateLiteral) -> str:
    if len(node.spans) != 1 or not isinstance(node.spans[0][0], Primitive):
        raise UnsupportedTypeVariant(
            node, "template literal must have exactly one primitive hole"
        )
    hole, tail = node.spans[0]
    text = f"{_escape_braces(node.head)}$\\{{{hole.name}\\}}{_escape_braces(tail)}"
    return quoted(text)


def _first_argument(ref: Reference) -> TypeNode:
    if not ref.type_arguments:
        raise UnsupportedTypeVariant(ref, f"{ref.name} requires a type argument")
    return ref.type_arguments[0]


def _generic(label: str, payload: str) -> str:
    return (
        f"{code('primitive', label)}{code('symbol', '&lt;')}"
        f"{payload}{code('symbol', '&gt;')}"
    )


def _render_reference(
    unit: DocumentationUnit, ref: Reference, context: RenderContext
) -> str:
    """Render a reference: marker types first, then a resolved link."""
    if ref.package == "typescript":
        if not ref.type_arguments:
            return code("primitive", ref.name)
        arguments = ", ".join(render_type(unit, t, context) for t in ref.type_arguments)
        return _generic(ref.name, arguments)
    if ref.name == TRANSFORM_MARKER:
        return _render_transform(unit, ref, context)
    key = (ref.package or "", ref.name)
    wrapper = ASYNC_WRAPPERS.get(key)
    if wrapper is not None:
        payload = render_type(unit, _first_argument(ref), context)
        return payload if context.unwrap_containers else _generic(wrapper, payload)
    wrapper = INPUT_WRAPPERS.get(key)
    if wrapper is not None:
        return _generic(wrapper, render_type(unit, _first_argument(ref), context))
    if ref.name in PASSTHROUGH_WRAPPERS:
        return render_type(unit, _first_argument(ref), context)
    fixed = FIXED_RENDERINGS.get((ref.package, ref.name)) or FIXED_RENDERINGS.get(
        (None, ref.name)
    )
    if fixed is not None:
        css_class, label = fixed
        return code(css_class, label)
    target = resolve(unit, ref)
    return type_link(target.label or ref.name, link_href(target))


def _render_transform(
    unit: DocumentationUnit, ref: Reference, context: RenderContext
) -> str:
    """Render ``Transform<T>`` as ``T | (args: T, opts, name) => void``."""
    rendered = render_type(unit, _first_argument(ref), context)
    return "".join(
        [
            rendered,
            UNION_SEPARATOR,
            code("symbol", "("),
            code("primitive", "args"),
            code("symbol", ": "),
            rendered,
            code("symbol", ", "),
            code("primitive", "opts"),
            code("symbol", ": "),
            type_link("ComponentResourceOptions", PULUMI_OPTIONS_URL),
            code("symbol", ", "),
            code("primitive", "name"),
            code("symbol", ": "),
            code("primitive", "string"),
            code("symbol", ")"),
            code("symbol", " => "),
            code("primitive", "void"),
        ]
    )


def render_parameter_name(param: Symbol) -> str:
    """Return a parameter name with ``...`` for rest and ``?`` for optional.

    Raises
    ------
    UnsupportedParameterDefault
        If the parameter defaults to anything other than ``{}``.
    """
    default = param.default_value
    if default and default != "{}":
        raise UnsupportedParameterDefault(param.name, default)
    rest = "..." if isinstance(param.type, TupleOf) else ""
    optional = "?" if param.flags.optional or default else ""
    return f"{rest}{param.name}{optional}"


def render_signature(signature: Signature) -> str:
    """Return ``name(arg, other?)`` for a call signature."""
    parameters = ", ".join(render_parameter_name(p) for p in signature.parameters)
    return f"{signature.name}({parameters})"


__all__ = [
    "DEFAULT_CONTEXT",
    "RenderContext",
    "code",
    "declared_type",
    "quoted",
    "render_declared",
    "render_parameter_name",
    "render_signature",
    "render_type",
    "type_link",
]
