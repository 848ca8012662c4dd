"""Resolve reference types into link targets.

A reference points either at a symbol documented on the same page, at
another component page, or at documentation hosted by an external package.
Resolution is a pure function of the reference's carried provenance and the
unit being compiled; nothing is looked up in global state.

Resolution order
----------------
1. Marker names (DNS adapters, linkable helpers, provisioning options) map
   to fixed targets regardless of package.
2. The component class of the unit links to the page itself, and interfaces
   declared in the unit link to their same-page anchor.
3. Targets declared under the component source tree link to the component
   page, with an anchor only for ``*Args`` types.
4. Known external packages link through their URL template.
5. Anything else raises :class:`~refdoc_pages.errors.UnsupportedReference`.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from refdoc_pages._constants import (
    COMPONENT_DOCS_ROOT,
    COMPONENT_SOURCE_ROOT,
    PULUMI_INPUT_TYPE_DOCS,
    PULUMI_OPTIONS_URL,
)
from refdoc_pages.errors import MissingRequiredMetadata, UnsupportedReference

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from refdoc_pages.reflection import DocumentationUnit, Reference


@dc.dataclass(frozen=True, slots=True)
class External:
    """Link to documentation hosted outside the generated site."""

    url: str
    label: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SameUnitAnchor:
    """Link within the current page; ``slug=None`` links to the page itself."""

    slug: str | None
    label: str | None = None


@dc.dataclass(frozen=True, slots=True)
class OtherUnitPath:
    """Link to another generated page, optionally at an anchor."""

    path: str
    anchor: str | None = None
    label: str | None = None


LinkTarget: typ.TypeAlias = External | SameUnitAnchor | OtherUnitPath


def link_href(target: LinkTarget) -> str:
    """Return the href text for ``target``."""
    match target:
        case External(url=url):
            return url
        case SameUnitAnchor(slug=None):
            return "."
        case SameUnitAnchor(slug=slug):
            return f"#{slug}"
        case OtherUnitPath(path=path, anchor=None):
            return path
        case OtherUnitPath(path=path, anchor=anchor):
            return f"{path}#{anchor}"


MARKER_LINKS: dict[str, LinkTarget] = {
    "AwsDns": OtherUnitPath(f"{COMPONENT_DOCS_ROOT}/aws/dns/", label="sst.aws.dns"),
    "CloudflareDns": OtherUnitPath(
        f"{COMPONENT_DOCS_ROOT}/cloudflare/dns/", label="sst.cloudflare.dns"
    ),
    "VercelDns": OtherUnitPath(
        f"{COMPONENT_DOCS_ROOT}/vercel/dns/", label="sst.vercel.dns"
    ),
    "AwsPermission": OtherUnitPath(
        f"{COMPONENT_DOCS_ROOT}/aws/permission/", label="sst.aws.permission"
    ),
    "CloudflareBinding": OtherUnitPath(
        f"{COMPONENT_DOCS_ROOT}/cloudflare/binding/", label="sst.cloudflare.binding"
    ),
    "ComponentResourceOptions": External(PULUMI_OPTIONS_URL),
    "CustomResourceOptions": External(
        "https://www.pulumi.com/docs/iac/concepts/resources/dynamic-providers/"
    ),
    "FileAsset": External(
        "https://www.pulumi.com/docs/iac/concepts/assets-archives/#assets"
    ),
    "FileArchive": External(
        "https://www.pulumi.com/docs/iac/concepts/assets-archives/#archives"
    ),
    "__module": External(
        "https://www.pulumi.com/docs/reference/pkg/nodejs/pulumi/pulumi/",
        label="@pulumi/pulumi",
    ),
}

BUN_SHELL_LINK = External("https://bun.sh/docs/runtime/shell", label="Bun Shell")

_COMPONENT_PATH = re.compile(rf"{re.escape(COMPONENT_SOURCE_ROOT)}(.*)\.ts")
_PULUMI_PROVIDER_PATH = re.compile(r"node_modules/@pulumi/([^/]+)/(.+)\.d\.ts")
_PULUMIVERSE_PATH = re.compile(r"node_modules/@pulumiverse/([^/]+)/(.+)\.d\.ts")
_AWS_LAMBDA_PATH = re.compile(r"node_modules/@types/aws-lambda/(.+)")


def resolve(unit: DocumentationUnit, ref: Reference) -> LinkTarget:
    """Classify ``ref`` into a link target for pages generated from ``unit``.

    Raises
    ------
    UnsupportedReference
        If no rule recognises the reference.
    """
    marker = MARKER_LINKS.get(ref.name)
    if marker is not None:
        return marker
    if ref.qualified_name == "Shell":
        return BUN_SHELL_LINK

    if _is_unit_class(unit, ref.name):
        return SameUnitAnchor(None)
    if unit.interface_named(ref.name) is not None:
        return SameUnitAnchor(ref.name.lower())

    source_path = ref.source_path
    if source_path and source_path.startswith(COMPONENT_SOURCE_ROOT):
        return _component_link(ref, source_path)

    template = external_template(ref.package)
    if template is not None:
        return template(ref)

    raise UnsupportedReference(ref)


def _is_unit_class(unit: DocumentationUnit, name: str) -> bool:
    try:
        return unit.class_symbol().name == name
    except MissingRequiredMetadata:
        return False


def _component_link(ref: Reference, source_path: str) -> OtherUnitPath:
    path = _COMPONENT_PATH.sub(rf"{COMPONENT_DOCS_ROOT}/\1", source_path)
    anchor = ref.name.lower() if ref.name.endswith("Args") else None
    return OtherUnitPath(path, anchor)


def _match_provenance(pattern: re.Pattern[str], ref: Reference) -> re.Match[str]:
    match = pattern.search(ref.source_path or "")
    if match is None:
        raise UnsupportedReference(ref, f"no declaring file matches {pattern.pattern}")
    return match


def _pulumi_registry_url(provider: str, cls: str, name: str) -> str:
    hash_ = "#inputs" if name.endswith("Args") else ""
    return f"https://www.pulumi.com/registry/packages/{provider}/api-docs/{cls}/{hash_}"


def _pulumi_provider_link(ref: Reference) -> External:
    """Link a Pulumi provider resource or input type to the Pulumi registry."""
    match = _match_provenance(_PULUMI_PROVIDER_PATH, ref)
    provider = match.group(1).lower()
    cls = match.group(2).lower()
    if cls == "types/input":
        page = PULUMI_INPUT_TYPE_DOCS.get(ref.name)
        if page is None:
            raise UnsupportedReference(ref, "unmapped Pulumi provider input type")
        return External(
            f"https://www.pulumi.com/registry/packages/{provider}/api-docs/"
            f"{page}/#{ref.name.lower()}"
        )
    if cls.startswith("types/"):
        raise UnsupportedReference(ref, "unsupported Pulumi provider class type")
    return External(_pulumi_registry_url(provider, cls, ref.name))


def _pulumiverse_link(ref: Reference) -> External:
    match = _match_provenance(_PULUMIVERSE_PATH, ref)
    return External(
        _pulumi_registry_url(match.group(1).lower(), match.group(2).lower(), ref.name)
    )


def _aws_lambda_link(ref: Reference) -> External:
    match = _match_provenance(_AWS_LAMBDA_PATH, ref)
    return External(
        "https://github.com/DefinitelyTyped/DefinitelyTyped/blob/master/types/"
        f"aws-lambda/{match.group(1)}"
    )


def _esbuild_link(ref: Reference) -> External:
    hash_ = "#loader" if ref.name == "Loader" else "#build"
    return External(f"https://esbuild.github.io/api/{hash_}")


def _opencontrol_link(ref: Reference) -> External:
    return External("https://opencontrol.ai/")


def _bun_shell_link(ref: Reference) -> External:
    return BUN_SHELL_LINK


EXTERNAL_TEMPLATES: dict[str, cabc.Callable[[Reference], External]] = {
    "@pulumiverse/vercel": _pulumiverse_link,
    "@types/aws-lambda": _aws_lambda_link,
    "esbuild": _esbuild_link,
    "opencontrol": _opencontrol_link,
    "bun-types": _bun_shell_link,
}

# Scoped packages sharing one template; exact entries win over prefixes.
EXTERNAL_PREFIX_TEMPLATES: tuple[
    tuple[str, cabc.Callable[[Reference], External]], ...
] = (
    ("@pulumi/", _pulumi_provider_link),
)

# The Pulumi SDK itself only links through marker names.
_NO_TEMPLATE = frozenset({"@pulumi/pulumi"})


def external_template(
    package: str | None,
) -> cabc.Callable[[Reference], External] | None:
    """Return the URL template registered for ``package``, if any."""
    if not package or package in _NO_TEMPLATE:
        return None
    exact = EXTERNAL_TEMPLATES.get(package)
    if exact is not None:
        return exact
    for prefix, template in EXTERNAL_PREFIX_TEMPLATES:
        if package.startswith(prefix):
            return template
    return None


__all__ = [
    "EXTERNAL_TEMPLATES",
    "MARKER_LINKS",
    "External",
    "LinkTarget",
    "OtherUnitPath",
    "SameUnitAnchor",
    "external_template",
    "link_href",
    "resolve",
]
