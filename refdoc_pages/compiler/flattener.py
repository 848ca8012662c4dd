"""Flatten nested type expressions into ordered documentation entries."""

from __future__ import annotations

import typing as typ

from refdoc_pages._constants import DICTIONARY_CONTAINERS
from refdoc_pages.reflection import (
    ArrayOf,
    InlineObject,
    Reference,
    SymbolKind,
    Union,
)

from .fragments import NestedEntry

if typ.TYPE_CHECKING:
    from refdoc_pages.reflection import Symbol, TypeNode


def flatten(
    node: TypeNode | None, prefix: str = "", depth: int = 0
) -> list[NestedEntry]:
    """Return every documentable field reachable through ``node``.

    Entries come out depth-first in declaration order. Unions distribute over
    their members, arrays append ``[]`` to the prefix without adding a level,
    generic references recurse into their type arguments, and inline objects
    emit one entry per visible field before recursing into property and
    accessor types one level deeper. Other variants have no nested fields.

    Parameters
    ----------
    node : TypeNode | None
        Type expression to walk; ``None`` yields no entries.
    prefix : str, optional
        Dotted field path that leads to ``node``.
    depth : int, optional
        Nesting level of ``node``'s own fields.

    Returns
    -------
    list[NestedEntry]
        The flattened entries.

    Examples
    --------
    >>> from refdoc_pages.reflection import InlineObject, Primitive, Symbol, SymbolKind
    >>> cert = Symbol("cert", SymbolKind.PROPERTY, type=Primitive("string"))
    >>> entries = flatten(InlineObject((cert,)), "domain")
    >>> [(e.depth, e.prefix, e.symbol.name) for e in entries]
    [(0, 'domain', 'cert')]
    """
    match node:
        case Union(members=members):
            return [entry for m in members for entry in flatten(m, prefix, depth)]
        case ArrayOf(element=element):
            return flatten(element, f"{prefix}[]", depth)
        case Reference(type_arguments=arguments) if arguments:
            return _flatten_arguments(node, prefix, depth)
        case InlineObject(fields=fields):
            return _flatten_fields(fields, prefix, depth)
        case _:
            return []


def _flatten_arguments(ref: Reference, prefix: str, depth: int) -> list[NestedEntry]:
    arguments = ref.type_arguments
    is_dictionary = (ref.package or "", ref.name) in DICTIONARY_CONTAINERS
    entries: list[NestedEntry] = []
    for index, argument in enumerate(arguments):
        is_value = is_dictionary and index == len(arguments) - 1
        entries.extend(flatten(argument, f"{prefix}[]" if is_value else prefix, depth))
    return entries


def _flatten_fields(
    fields: tuple[Symbol, ...], prefix: str, depth: int
) -> list[NestedEntry]:
    entries: list[NestedEntry] = []
    for field in fields:
        if field.is_hidden:
            continue
        entries.append(NestedEntry(depth=depth, prefix=prefix, symbol=field))
        child_prefix = f"{prefix}.{field.name}"
        if field.kind == SymbolKind.PROPERTY:
            entries.extend(flatten(field.type, child_prefix, depth + 1))
        elif field.kind == SymbolKind.ACCESSOR and field.get_signature is not None:
            entries.extend(
                flatten(field.get_signature.returns, child_prefix, depth + 1)
            )
    return entries


def nested_type_of(symbol: Symbol) -> TypeNode | None:
    """Return the type whose fields a nested entry exposes.

    Properties expose their declared type, methods their first signature's
    return type, and accessors their getter's return type.
    """
    if symbol.kind == SymbolKind.METHOD:
        return symbol.signatures[0].returns if symbol.signatures else None
    if symbol.kind == SymbolKind.ACCESSOR:
        return symbol.get_signature.returns if symbol.get_signature else None
    return symbol.type


__all__ = ["flatten", "nested_type_of"]
