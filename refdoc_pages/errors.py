"""Exception hierarchy raised while compiling reference documentation.

Every error here is fatal: the run aborts instead of skipping the offending
unit or symbol, because a silently incomplete reference page reads as if it
were complete. The messages embed the ``repr`` of the node that could not be
handled so a failing run points straight at the unsupported input shape.

Examples
--------
>>> from refdoc_pages.errors import UnsupportedTypeVariant
>>> from refdoc_pages.reflection import OpaqueType
>>> err = UnsupportedTypeVariant(OpaqueType("conditional"))
>>> err.node.kind
'conditional'
"""

from __future__ import annotations


class ReferenceDocError(RuntimeError):
    """Base class for fatal reference documentation errors."""


class ReflectionLoadError(ReferenceDocError):
    """Raised when a reflection document cannot be decoded."""


class CliDocumentError(ReferenceDocError):
    """Raised when a CLI or error-catalogue document has the wrong shape."""


class UnsupportedTypeVariant(ReferenceDocError):
    """Raised when no rendering rule exists for a type node."""

    def __init__(self, node: object, reason: str | None = None) -> None:
        self.node = node
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Unsupported type variant{detail}: {node!r}")


class UnsupportedReference(ReferenceDocError):
    """Raised when a reference cannot be classified into a link target."""

    def __init__(self, reference: object, reason: str | None = None) -> None:
        self.reference = reference
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Unsupported reference{detail}: {reference!r}")


class MissingRequiredMetadata(ReferenceDocError):
    """Raised when structurally required reflection metadata is absent."""


class UnsupportedParameterDefault(ReferenceDocError):
    """Raised when a signature parameter declares a non-trivial default value."""

    def __init__(self, name: str, default_value: str) -> None:
        self.name = name
        self.default_value = default_value
        msg = "\n".join(
            [
                f'Unsupported default value "{default_value}" for name "{name}".',
                "",
                "Signature parameters can be optional in one of two ways:",
                ' - the optional flag is set, ie. "(args?: FooArgs)"',
                ' - the default value is "{}", ie. "(args: FooArgs = {})"',
            ]
        )
        super().__init__(msg)


__all__ = [
    "CliDocumentError",
    "MissingRequiredMetadata",
    "ReferenceDocError",
    "ReflectionLoadError",
    "UnsupportedParameterDefault",
    "UnsupportedReference",
    "UnsupportedTypeVariant",
]
