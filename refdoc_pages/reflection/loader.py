"""Load TypeDoc-style JSON reflection documents into typed units.

The loader reads the JSON a reflection provider emits (for example
``typedoc --json components-doc.json``) and turns it into immutable
:class:`~refdoc_pages.reflection.models.DocumentationUnit` objects. Documents
can come from disk or over HTTP; remote fetches reuse the retrying session
setup used for page sources.

Example
-------
>>> from pathlib import Path
>>> from refdoc_pages.reflection import load_reflection
>>> units = load_reflection(Path("components-doc.json"))  # doctest: +SKIP
>>> units[0].name  # doctest: +SKIP
'components/aws/bucket'
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from refdoc_pages.errors import ReflectionLoadError

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
)

logger = logging.getLogger(__name__)

Raw = dict[str, typ.Any]


def load_reflection(source: Path | str) -> list[DocumentationUnit]:
    """Load every documentation unit from a reflection document.

    Parameters
    ----------
    source : Path | str
        Filesystem path, or an ``http(s)`` URL, of a TypeDoc JSON project.

    Returns
    -------
    list[DocumentationUnit]
        Units in project order. A project without module children is
        returned as a single unit.

    Raises
    ------
    FileNotFoundError
        If ``source`` is a path that does not exist.
    ReflectionLoadError
        If the document is not valid JSON or is not a JSON object.
    """
    payload = read_source(source)
    try:
        project = msgspec_json.decode(payload)
    except msgspec.DecodeError as exc:
        msg = f"Reflection document '{source}' is not valid JSON: {exc}"
        raise ReflectionLoadError(msg) from exc
    if not isinstance(project, dict):
        msg = f"Reflection document '{source}' must contain a JSON object."
        raise ReflectionLoadError(msg)
    return ReflectionReader(project).units()


def read_source(source: Path | str) -> bytes:
    """Return the raw bytes of a local file or remote URL.

    Raises
    ------
    FileNotFoundError
        If ``source`` is a path that does not exist.
    requests.HTTPError
        If a remote fetch still fails after retries.
    """
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return _fetch_remote(source)
    path = Path(source)
    if not path.exists():
        msg = f"Document '{path}' not found."
        raise FileNotFoundError(msg)
    return path.read_bytes()


def _fetch_remote(url: str) -> bytes:
    """Download a reflection document with retries on transient errors."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    try:
        resp = session.get(url, timeout=30)
        resp.raise_for_status()
        return resp.content
    finally:
        session.close()


class ReflectionReader:
    """Convert a decoded TypeDoc project into documentation units."""

    def __init__(self, project: Raw) -> None:
        self.project = project
        self._index: dict[int, Raw] = {}
        self._index_reflection(project)

    def units(self) -> list[DocumentationUnit]:
        """Return the project's modules as documentation units."""
        children = self.project.get("children") or []
        modules = [c for c in children if c.get("kind") == SymbolKind.MODULE]
        if not modules:
            return [self._build_unit(self.project)]
        return [self._build_unit(module) for module in modules]

    def _index_reflection(self, raw: Raw) -> None:
        """Record ``raw`` and every nested reflection by numeric id."""
        reflection_id = raw.get("id")
        if isinstance(reflection_id, int):
            self._index[reflection_id] = raw
        for child in raw.get("children") or []:
            self._index_reflection(child)
        for signature in raw.get("signatures") or []:
            self._index_reflection(signature)

    def _build_unit(self, raw: Raw) -> DocumentationUnit:
        symbols = self._build_children(raw)
        return DocumentationUnit(
            name=raw.get("name", ""),
            symbols=symbols,
            source_path=_source_path(raw),
            comment=_build_comment(raw.get("comment")),
        )

    def _build_children(self, raw: Raw) -> tuple[Symbol, ...]:
        symbols: list[Symbol] = []
        for child in raw.get("children") or []:
            symbol = self._build_symbol(child)
            if symbol is not None:
                symbols.append(symbol)
        return tuple(symbols)

    def _build_symbol(self, raw: Raw) -> Symbol | None:
        """Build a Symbol, returning ``None`` for reflection kinds we skip."""
        try:
            kind = SymbolKind(raw.get("kind"))
        except ValueError:
            logger.debug(
                "skipping %s with unsupported kind %s", raw.get("name"), raw.get("kind")
            )
            return None
        get_signature = raw.get("getSignature")
        return Symbol(
            name=raw.get("name", ""),
            kind=kind,
            flags=_build_flags(raw.get("flags")),
            comment=_build_comment(raw.get("comment")),
            type=self._build_type(raw["type"]) if raw.get("type") else None,
            signatures=tuple(
                self._build_signature(sig) for sig in raw.get("signatures") or []
            ),
            get_signature=(
                self._build_signature(get_signature) if get_signature else None
            ),
            children=self._build_children(raw),
            source_path=_source_path(raw),
            default_value=raw.get("defaultValue"),
        )

    def _build_signature(self, raw: Raw) -> Signature:
        parameters: list[Symbol] = []
        for param in raw.get("parameters") or []:
            payload = {**param, "kind": param.get("kind", SymbolKind.PARAMETER)}
            symbol = self._build_symbol(payload)
            if symbol is not None:
                parameters.append(symbol)
        return Signature(
            name=raw.get("name", ""),
            parameters=tuple(parameters),
            returns=self._build_type(raw["type"]) if raw.get("type") else None,
            comment=_build_comment(raw.get("comment")),
        )

    def _build_type(self, raw: Raw) -> TypeNode:  # noqa: PLR0911
        """Convert one JSON type node into a TypeNode variant."""
        match raw.get("type"):
            case "intrinsic":
                return Primitive(raw.get("name", ""))
            case "literal":
                return LiteralValue(_literal_value(raw.get("value")))
            case "templateLiteral":
                spans = tuple(
                    (self._build_type(span[0]), span[1])
                    for span in raw.get("tail") or []
                )
                return TemplateLiteral(head=raw.get("head", ""), spans=spans)
            case "union":
                return Union(tuple(self._build_type(t) for t in raw.get("types", [])))
            case "array":
                return ArrayOf(self._build_type(raw["elementType"]))
            case "tuple":
                elements = raw.get("elements") or []
                return TupleOf(tuple(self._build_type(e) for e in elements))
            case "reference":
                return self._build_reference(raw)
            case "reflection":
                return self._build_declaration_type(raw.get("declaration") or {})
            case other:
                return OpaqueType(str(other))

    def _build_reference(self, raw: Raw) -> Reference:
        arguments = tuple(self._build_type(t) for t in raw.get("typeArguments") or [])
        return Reference(
            name=raw.get("name", ""),
            package=raw.get("package"),
            qualified_name=raw.get("qualifiedName"),
            type_arguments=arguments,
            target=self._build_target(raw.get("target")),
        )

    def _build_target(self, target: object) -> SymbolRef | None:
        """Resolve a reference target id or external symbol id into provenance."""
        match target:
            case int() if target in self._index:
                return SymbolRef(_source_path(self._index[target]))
            case {"sourceFileName": str() as file_name}:
                return SymbolRef(file_name)
            case _:
                return None

    def _build_declaration_type(self, declaration: Raw) -> TypeNode:
        """Build a callable or inline object type from a type-literal declaration."""
        signatures = declaration.get("signatures") or []
        if signatures:
            signature = self._build_signature(signatures[0])
            return CallableSignature(
                params=signature.parameters,
                returns=signature.returns or Primitive("void"),
            )
        return InlineObject(self._build_children(declaration))


def _literal_value(value: object) -> str | int | float | bool | None:
    """Return a literal's value, turning bigint objects into integers.

    Bigint literals arrive as ``{"negative": bool, "value": "<digits>"}``.
    """
    match value:
        case {"value": str() as digits, **rest}:
            number = int(digits)
            return -number if rest.get("negative") else number
        case str() | int() | float() | bool() | None:
            return value
        case _:
            return str(value)


def _source_path(raw: Raw) -> str | None:
    sources = raw.get("sources") or []
    if not sources:
        return None
    return sources[0].get("fileName")


def _build_flags(raw: Raw | None) -> Flags:
    if not raw:
        return Flags()
    return Flags(
        optional=bool(raw.get("isOptional")),
        static=bool(raw.get("isStatic")),
        public=bool(raw.get("isPublic")),
        private=bool(raw.get("isPrivate")),
        protected=bool(raw.get("isProtected")),
        external=bool(raw.get("isExternal")),
    )


def _build_parts(raw: list[Raw] | None) -> tuple[CommentPart, ...]:
    return tuple(
        CommentPart(kind=part.get("kind", "text"), text=part.get("text", ""))
        for part in raw or []
    )


def _build_comment(raw: Raw | None) -> Comment | None:
    if not raw:
        return None
    return Comment(
        summary=_build_parts(raw.get("summary")),
        block_tags=tuple(
            BlockTag(
                tag=block.get("tag", ""), content=_build_parts(block.get("content"))
            )
            for block in raw.get("blockTags") or []
        ),
        modifier_tags=frozenset(raw.get("modifierTags") or ()),
    )


__all__ = ["ReflectionReader", "load_reflection", "read_source"]
