"""Reflection graph model and the loader that builds it from JSON."""

from .loader import ReflectionReader, load_reflection, read_source
from .models import (
    ArrayOf,
    BlockTag,
    CallableSignature,
    Comment,
    CommentPart,
    DocumentationUnit,
    Flags,
    InlineObject,
    LiteralValue,
    OpaqueType,
    Primitive,
    Reference,
    Signature,
    Symbol,
    SymbolKind,
    SymbolRef,
    TemplateLiteral,
    TupleOf,
    TypeNode,
    Union,
    is_hidden,
    render_parts,
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
    "ReflectionReader",
    "Signature",
    "Symbol",
    "SymbolKind",
    "SymbolRef",
    "TemplateLiteral",
    "TupleOf",
    "TypeNode",
    "Union",
    "is_hidden",
    "load_reflection",
    "read_source",
    "render_parts",
]
