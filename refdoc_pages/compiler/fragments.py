"""Shared dataclasses passed between the compiler passes and the page writer."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from refdoc_pages.reflection import Symbol


@dc.dataclass(frozen=True, slots=True)
class NestedEntry:
    """A documentable field reached by flattening a type expression.

    Attributes
    ----------
    depth : int
        Nesting level; ``0`` for fields of the outermost object type.
    prefix : str
        Dotted field path leading to the field (``"domain"``, ``"nodes[]"``).
    symbol : Symbol
        The nested field itself.
    """

    depth: int
    prefix: str
    symbol: Symbol


@dc.dataclass(slots=True)
class SectionFragment:
    """A compiled documentation section consumed by the page template.

    Attributes
    ----------
    title : str
        Heading text; ignored when ``level`` is ``0``.
    level : int
        Heading level. ``0`` renders no heading, ``2`` and ``3`` render
        markdown headings, and anchored ``4``/``5`` render nested titles.
    body : list[str]
        MDX lines emitted under the heading.
    anchor : str | None
        Anchor id for nested entries.
    parent : str | None
        Field path shown before a nested title (``"domain."``).
    """

    title: str
    level: int
    body: list[str] = dc.field(default_factory=list)
    anchor: str | None = None
    parent: str | None = None

    @property
    def heading(self) -> str:
        """Return the MDX heading line for this fragment, or an empty string."""
        if self.anchor is not None:
            return (
                f'<NestedTitle id="{self.anchor}" Tag="h{self.level}" '
                f'parent="{self.parent or ""}">{self.title}</NestedTitle>'
            )
        if self.level:
            return f"{'#' * self.level} {self.title}"
        return ""


__all__ = ["NestedEntry", "SectionFragment"]
