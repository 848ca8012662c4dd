"""Typed dataclasses describing a reflection graph of documented symbols.

The graph mirrors the shape of a TypeDoc project: documentation units own
symbols, symbols own signatures and children, and every declared type is a
:data:`TypeNode`. All nodes are immutable once the loader has built them.
``Symbol`` and ``Signature`` compare by identity so they can key the per-unit
anchor registry.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from refdoc_pages.errors import MissingRequiredMetadata


class SymbolKind(enum.IntEnum):
    """Reflection kinds, numbered the way TypeDoc numbers them."""

    MODULE = 2
    NAMESPACE = 4
    VARIABLE = 32
    FUNCTION = 64
    CLASS = 128
    INTERFACE = 256
    CONSTRUCTOR = 512
    PROPERTY = 1024
    METHOD = 2048
    PARAMETER = 32768
    TYPE_LITERAL = 65536
    ACCESSOR = 262144
    TYPE_ALIAS = 2097152


@dc.dataclass(frozen=True, slots=True)
class Flags:
    """Declaration modifiers relevant to documentation output."""

    optional: bool = False
    static: bool = False
    public: bool = False
    private: bool = False
    protected: bool = False
    external: bool = False


@dc.dataclass(frozen=True, slots=True)
class CommentPart:
    """A run of comment text; ``kind`` is ``"text"``, ``"code"`` or ``"inline-tag"``."""

    kind: str
    text: str


@dc.dataclass(frozen=True, slots=True)
class BlockTag:
    """A block tag such as ``@default`` or ``@example`` with its content."""

    tag: str
    content: tuple[CommentPart, ...] = ()


def render_parts(parts: typ.Iterable[CommentPart]) -> str:
    """Join comment parts into their raw markdown text."""
    return "".join(part.text for part in parts)


@dc.dataclass(frozen=True, slots=True)
class Comment:
    """Doc comment attached to a symbol or signature.

    Attributes
    ----------
    summary : tuple[CommentPart, ...]
        Leading description text.
    block_tags : tuple[BlockTag, ...]
        Block tags in declaration order (``@default``, ``@example``, ...).
    modifier_tags : frozenset[str]
        Modifier tags such as ``@internal``.
    """

    summary: tuple[CommentPart, ...] = ()
    block_tags: tuple[BlockTag, ...] = ()
    modifier_tags: frozenset[str] = frozenset()

    @property
    def summary_text(self) -> str:
        """Return the summary as markdown text."""
        return render_parts(self.summary)

    @property
    def is_internal(self) -> bool:
        """Return whether the comment carries the ``@internal`` modifier."""
        return "@internal" in self.modifier_tags

    @property
    def is_deprecated(self) -> bool:
        """Return whether the comment carries a ``@deprecated`` block tag."""
        return self.find_tag("@deprecated") is not None

    def find_tag(self, tag: str) -> BlockTag | None:
        """Return the first block tag named ``tag`` or ``None``."""
        return next((block for block in self.block_tags if block.tag == tag), None)

    def examples(self) -> list[str]:
        """Return the rendered text of every ``@example`` block."""
        return [
            render_parts(block.content)
            for block in self.block_tags
            if block.tag == "@example"
        ]


def is_hidden(comment: Comment | None) -> bool:
    """Return whether a comment marks its owner as internal or deprecated."""
    return comment is not None and (comment.is_internal or comment.is_deprecated)


@dc.dataclass(frozen=True, slots=True)
class SymbolRef:
    """Provenance of a reference target.

    ``source_path`` is the declaring file: a repository-relative path for
    symbols inside the project, or the ``node_modules`` path for symbols
    declared by external packages.
    """

    source_path: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Primitive:
    """Intrinsic type such as ``string`` or ``boolean``."""

    name: str


@dc.dataclass(frozen=True, slots=True)
class LiteralValue:
    """Literal type: a string, number, boolean or ``null`` value."""

    value: str | int | float | bool | None


@dc.dataclass(frozen=True, slots=True)
class TemplateLiteral:
    """Template literal type; each span is an interpolated type and trailing text."""

    head: str
    spans: tuple[tuple[TypeNode, str], ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Union:
    """Union of member types."""

    members: tuple[TypeNode, ...]


@dc.dataclass(frozen=True, slots=True)
class ArrayOf:
    """Array of an element type."""

    element: TypeNode


@dc.dataclass(frozen=True, slots=True)
class TupleOf:
    """Tuple type; only the first element is used when rendering."""

    elements: tuple[TypeNode, ...]


@dc.dataclass(frozen=True, slots=True)
class Reference:
    """Named reference to another declaration.

    Attributes
    ----------
    name : str
        Referenced name as written at the use site.
    package : str | None
        Package that declares the target, ``None`` when unknown.
    qualified_name : str | None
        Fully qualified name within the declaring file.
    type_arguments : tuple[TypeNode, ...]
        Generic arguments in declaration order.
    target : SymbolRef | None
        Provenance of the target declaration.
    """

    name: str
    package: str | None = None
    qualified_name: str | None = None
    type_arguments: tuple[TypeNode, ...] = ()
    target: SymbolRef | None = None

    @property
    def source_path(self) -> str | None:
        """Return the declaring file of the target, if known."""
        return self.target.source_path if self.target else None


@dc.dataclass(frozen=True, slots=True)
class InlineObject:
    """Anonymous object type; its fields are documented as nested entries."""

    fields: tuple[Symbol, ...]


@dc.dataclass(frozen=True, slots=True)
class CallableSignature:
    """Function type ``(params) => returns``."""

    params: tuple[Symbol, ...]
    returns: TypeNode


@dc.dataclass(frozen=True, slots=True)
class OpaqueType:
    """A type shape the loader recognised but no rendering rule covers."""

    kind: str


TypeNode: typ.TypeAlias = (
    Primitive
    | LiteralValue
    | TemplateLiteral
    | Union
    | ArrayOf
    | TupleOf
    | Reference
    | InlineObject
    | CallableSignature
    | OpaqueType
)


@dc.dataclass(frozen=True, slots=True, eq=False)
class Signature:
    """Call signature of a function, method, constructor or accessor."""

    name: str
    parameters: tuple[Symbol, ...] = ()
    returns: TypeNode | None = None
    comment: Comment | None = None


@dc.dataclass(frozen=True, slots=True, eq=False)
class Symbol:
    """A documented declaration.

    Attributes
    ----------
    name : str
        Declared name.
    kind : SymbolKind
        Reflection kind.
    flags : Flags
        Declaration modifiers.
    comment : Comment | None
        Doc comment, when present.
    type : TypeNode | None
        Declared type for variables, properties and parameters.
    signatures : tuple[Signature, ...]
        Call signatures for functions, methods and constructors.
    get_signature : Signature | None
        Getter signature for accessors.
    children : tuple[Symbol, ...]
        Members of classes, interfaces, namespaces and modules.
    source_path : str | None
        File that declares the symbol.
    default_value : str | None
        Default value text for parameters.
    """

    name: str
    kind: SymbolKind
    flags: Flags = dc.field(default_factory=Flags)
    comment: Comment | None = None
    type: TypeNode | None = None
    signatures: tuple[Signature, ...] = ()
    get_signature: Signature | None = None
    children: tuple[Symbol, ...] = ()
    source_path: str | None = None

    default_value: str | None = None

    @property
    def is_hidden(self) -> bool:
        """Return whether the symbol is internal or deprecated."""
        return is_hidden(self.comment)

    def children_of_kind(self, kind: SymbolKind) -> list[Symbol]:
        """Return the children of ``kind`` in declaration order."""
        return [child for child in self.children if child.kind == kind]


@dc.dataclass(frozen=True, slots=True, eq=False)
class DocumentationUnit:
    """One compiled source module and its documented symbols."""

    name: str
    symbols: tuple[Symbol, ...]
    source_path: str | None = None

    comment: Comment | None = None

    def of_kind(self, kind: SymbolKind) -> list[Symbol]:
        """Return the unit's symbols of ``kind`` in declaration order."""
        return [symbol for symbol in self.symbols if symbol.kind == kind]

    def interfaces(self) -> list[Symbol]:
        """Return the interfaces declared in this unit."""
        return self.of_kind(SymbolKind.INTERFACE)

    def interface_named(self, name: str) -> Symbol | None:
        """Return the interface called ``name`` or ``None``."""
        return next((i for i in self.interfaces() if i.name == name), None)

    def variables(self) -> list[Symbol]:
        """Return the exported variables that are neither internal nor deprecated."""
        return [v for v in self.of_kind(SymbolKind.VARIABLE) if not v.is_hidden]

    def functions(self) -> list[Symbol]:
        """Return functions whose first signature is not tagged internal."""
        result: list[Symbol] = []
        for fn in self.of_kind(SymbolKind.FUNCTION):
            comment = fn.signatures[0].comment if fn.signatures else None
            if comment is not None and comment.is_internal:
                continue
            result.append(fn)
        return result

    def class_symbol(self) -> Symbol:
        """Return the first class declared in the unit.

        Raises
        ------
        MissingRequiredMetadata
            If the unit declares no class.
        """
        classes = self.of_kind(SymbolKind.CLASS)
        if not classes:
            msg = f"Class not found in unit '{self.name}'."
            raise MissingRequiredMetadata(msg)
        return classes[0]

    def required_comment(self) -> Comment:
        """Return the unit comment, raising when it is absent."""
        if self.comment is None:
            msg = f"Module comment not found for unit '{self.name}'."
            raise MissingRequiredMetadata(msg)
        return self.comment

    def namespace_or_self(self) -> DocumentationUnit:
        """Return the first namespace as a unit, or this unit when it has none."""
        namespaces = self.of_kind(SymbolKind.NAMESPACE)
        if not namespaces:
            return self
        namespace = namespaces[0]
        return DocumentationUnit(
            name=namespace.name,
            symbols=namespace.children,
            source_path=namespace.source_path or self.source_path,
            comment=namespace.comment,
        )


__all__ = [
    "ArrayOf",
    "BlockTag",
    "CallableSignature",
    "Comment",
    "CommentPart",
    "DocumentationUnit",
    "Flags",
    "InlineObject",
    "LiteralValue",
    "OpaqueType",
    "Primitive",
    "Reference",
    "Signature",
    "Symbol",
    "SymbolKind",
    "SymbolRef",
    "TemplateLiteral",
    "TupleOf",
    "TypeNode",
    "Union",
    "is_hidden",
    "render_parts",
]
