"""Per-unit registry of anchor slugs for nested documentation entries."""

from __future__ import annotations

import re
import typing as typ

if typ.TYPE_CHECKING:
    from refdoc_pages.reflection import Symbol

_DISALLOWED = re.compile(r"[^a-z0-9.]")


def slug_base(prefix: str, name: str) -> str:
    """Return the un-suffixed slug for field ``name`` under ``prefix``.

    Examples
    --------
    >>> slug_base("domain", "cert")
    'domain-cert'
    >>> slug_base("nodes[]", "api?")
    'nodes-api'
    """
    return _DISALLOWED.sub("", f"{prefix}.{name}".lower()).replace(".", "-")


class AnchorRegistry:
    """Assign collision-free anchor slugs within one documentation unit.

    Slugs are handed out in first-seen order. A symbol keeps its slug for the
    registry's lifetime, so repeated lookups return the same anchor. Create
    one registry per unit and never share it across units.
    """

    def __init__(self) -> None:
        self._by_symbol: dict[Symbol, str] = {}
        self._used: set[str] = set()

    def assign(self, symbol: Symbol, prefix: str) -> str:
        """Return the slug for ``symbol``, assigning one on first sight.

        Parameters
        ----------
        symbol : Symbol
            Nested field being anchored; identity, not name, keys the lookup.
        prefix : str
            Dotted field path leading to ``symbol``.

        Returns
        -------
        str
            ``slug_base(prefix, symbol.name)``, suffixed with ``-1``, ``-2``
            and so on when that value is already taken.
        """
        existing = self._by_symbol.get(symbol)
        if existing is not None:
            return existing
        base = slug_base(prefix, symbol.name)
        candidate = base
        counter = 1
        while candidate in self._used:
            candidate = f"{base}-{counter}"
            counter += 1
        self._used.add(candidate)
        self._by_symbol[symbol] = candidate
        return candidate


__all__ = ["AnchorRegistry", "slug_base"]
