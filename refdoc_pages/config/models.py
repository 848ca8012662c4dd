"""Typed dataclasses describing reference-doc site configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path

from refdoc_pages._constants import DEFAULT_BUILDER_METHODS


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


class UnitKind(enum.Enum):
    """Page family a documentation unit is routed to."""

    SKIP = "skip"
    GLOBAL = "global"
    CONFIG = "config"
    DNS = "dns"
    LINKABLE = "linkable"
    COMPONENT = "component"


@dc.dataclass(slots=True)
class LinkableCopy:
    """Title and namespace shown on a linkable-helper page."""

    title: str
    namespace: str


def _default_linkable() -> dict[str, LinkableCopy]:
    return {
        "/aws/permission.ts": LinkableCopy("AWS", "sst.aws.permission"),
        "/cloudflare/binding.ts": LinkableCopy("Cloudflare", "sst.cloudflare.binding"),
    }


def _default_dns_titles() -> dict[str, str]:
    return {"aws": "AWS", "cloudflare": "Cloudflare", "vercel": "Vercel"}


@dc.dataclass(slots=True)
class RoutingConfig:
    """Source-path rules that decide which page family a unit belongs to."""

    skip_suffixes: list[str] = dc.field(default_factory=lambda: ["/aws/iam-edit.ts"])
    global_source: str = "platform/src/global-config.d.ts"
    config_source: str = "platform/src/config.ts"
    dns_suffix: str = "/dns.ts"
    linkable: dict[str, LinkableCopy] = dc.field(default_factory=_default_linkable)
    dns_titles: dict[str, str] = dc.field(default_factory=_default_dns_titles)
    global_extra_functions: dict[str, str] = dc.field(
        default_factory=lambda: {"AWS": "/aws/iam-edit.ts"}
    )

    def linkable_copy(self, source_path: str) -> LinkableCopy | None:
        """Return the linkable copy whose suffix matches ``source_path``."""
        return next(
            (
                copy
                for suffix, copy in self.linkable.items()
                if source_path.endswith(suffix)
            ),
            None,
        )

    def classify(self, source_path: str) -> UnitKind:
        """Return the page family for a unit declared in ``source_path``.

        Examples
        --------
        >>> RoutingConfig().classify("platform/src/components/aws/dns.ts")
        <UnitKind.DNS: 'dns'>
        >>> RoutingConfig().classify("platform/src/components/aws/bucket.ts")
        <UnitKind.COMPONENT: 'component'>
        """
        if any(source_path.endswith(suffix) for suffix in self.skip_suffixes):
            return UnitKind.SKIP
        if source_path == self.global_source:
            return UnitKind.GLOBAL
        if source_path == self.config_source:
            return UnitKind.CONFIG
        if source_path.endswith(self.dns_suffix):
            return UnitKind.DNS
        if self.linkable_copy(source_path) is not None:
            return UnitKind.LINKABLE
        return UnitKind.COMPONENT


@dc.dataclass(slots=True)
class SdkConfig:
    """How runtime SDK modules are folded into component pages."""

    about_namespaces: list[str] = dc.field(default_factory=lambda: ["realtime", "task"])
    prefixed_namespaces: list[str] = dc.field(
        default_factory=lambda: ["realtime", "task"]
    )
    variable_namespaces: list[str] = dc.field(default_factory=lambda: ["opencontrol"])


@dc.dataclass(slots=True)
class SiteConfig:
    """Everything the reference-doc build needs besides the reflection data.

    ``cli_doc``, ``common_errors_doc`` and ``examples_reflection`` are optional
    inputs; each one that is set enables its page family.
    """

    output_dir: Path = Path()
    docs_root: Path = Path("src/content/docs/docs")
    components_reflection: str | None = None
    sdk_reflection: str | None = None
    examples_reflection: str | None = None
    examples_root: Path = Path("examples")
    cli_doc: str | None = None
    common_errors_doc: str | None = None
    github_url: str = "https://github.com/sst/sst"
    routing: RoutingConfig = dc.field(default_factory=RoutingConfig)
    sdk: SdkConfig = dc.field(default_factory=SdkConfig)
    builder_methods: dict[str, tuple[str, ...]] = dc.field(
        default_factory=lambda: dict(DEFAULT_BUILDER_METHODS)
    )


__all__ = [
    "LinkableCopy",
    "RoutingConfig",
    "SdkConfig",
    "SiteConfig",
    "SiteConfigError",
    "UnitKind",
]
