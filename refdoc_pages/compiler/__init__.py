"""Compile reflection units into ordered documentation sections.

The passes run bottom-up: :mod:`.flattener` walks nested object types,
:mod:`.anchors` hands out collision-free slugs, :mod:`.resolver` turns
references into link targets, :mod:`.dispatcher` renders type expressions and
:mod:`.page_compiler` assembles the resulting
:class:`~refdoc_pages.compiler.fragments.SectionFragment` lists.

Examples
--------
>>> from refdoc_pages.compiler import PageCompiler
>>> from refdoc_pages.reflection import DocumentationUnit
>>> PageCompiler(DocumentationUnit("empty", ())).variables("Variables")
[]
"""

from .anchors import AnchorRegistry, slug_base
from .dispatcher import (
    DEFAULT_CONTEXT,
    RenderContext,
    render_declared,
    render_parameter_name,
    render_signature,
    render_type,
)
from .flattener import flatten, nested_type_of
from .fragments import NestedEntry, SectionFragment
from .page_compiler import PageCompiler, order_builder_methods, render_name
from .resolver import (
    External,
    LinkTarget,
    OtherUnitPath,
    SameUnitAnchor,
    external_template,
    link_href,
    resolve,
)

__all__ = [
    "DEFAULT_CONTEXT",
    "AnchorRegistry",
    "External",
    "LinkTarget",
    "NestedEntry",
    "OtherUnitPath",
    "PageCompiler",
    "RenderContext",
    "SameUnitAnchor",
    "SectionFragment",
    "external_template",
    "flatten",
    "link_href",
    "nested_type_of",
    "order_builder_methods",
    "render_declared",
    "render_name",
    "render_parameter_name",
    "render_signature",
    "render_type",
    "resolve",
    "slug_base",
]
