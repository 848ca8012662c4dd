"""Unit tests for classifying references into link targets."""

from __future__ import annotations

import pytest

from refdoc_pages.compiler import (
    External,
    OtherUnitPath,
    SameUnitAnchor,
    external_template,
    link_href,
    resolve,
)
from refdoc_pages.errors import UnsupportedReference
from refdoc_pages.reflection import (
    DocumentationUnit,
    Reference,
    Symbol,
    SymbolKind,
    SymbolRef,
)


@pytest.fixture
def unit() -> DocumentationUnit:
    """Return a component unit declaring ``Queue`` and ``QueueArgs``."""
    return DocumentationUnit(
        "components/aws/queue",
        (
            Symbol("Queue", SymbolKind.CLASS),
            Symbol("QueueArgs", SymbolKind.INTERFACE),
        ),
    )


def _external(name: str, package: str, source: str) -> Reference:
    return Reference(name, package=package, target=SymbolRef(source))


def test_marker_names_win_over_provenance(unit: DocumentationUnit) -> None:
    """Marker names resolve to fixed targets whatever their package."""
    ref = _external("FileAsset", "@pulumi/pulumi", "node_modules/@pulumi/asset.d.ts")
    target = resolve(unit, ref)
    assert isinstance(target, External)
    assert link_href(target).endswith("#assets")


def test_unit_class_links_to_page(unit: DocumentationUnit) -> None:
    """The component class links to the current page."""
    target = resolve(unit, Reference("Queue"))
    assert target == SameUnitAnchor(None)
    assert link_href(target) == "."


def test_unit_interface_links_to_anchor(unit: DocumentationUnit) -> None:
    """Interfaces of the unit link to their lowercased anchor."""
    target = resolve(unit, Reference("QueueArgs"))
    assert link_href(target) == "#queueargs"


def test_other_component_links_to_its_page(unit: DocumentationUnit) -> None:
    """Types declared under the component tree link to that component page."""
    args = Reference(
        "FunctionArgs",
        target=SymbolRef("platform/src/components/aws/function.ts"),
    )
    component = Reference(
        "Function",
        target=SymbolRef("platform/src/components/aws/function.ts"),
    )

    assert resolve(unit, args) == OtherUnitPath("/docs/component/aws/function", "functionargs")
    assert link_href(resolve(unit, component)) == "/docs/component/aws/function"


def test_pulumi_provider_resource(unit: DocumentationUnit) -> None:
    """Pulumi provider classes link to the registry page for the resource."""
    ref = _external("Bucket", "@pulumi/aws", "node_modules/@pulumi/aws/s3/bucket.d.ts")
    assert link_href(resolve(unit, ref)) == (
        "https://www.pulumi.com/registry/packages/aws/api-docs/s3/bucket/"
    )


def test_pulumi_provider_args_link_to_inputs(unit: DocumentationUnit) -> None:
    """Provider ``*Args`` types link to the inputs section."""
    ref = _external(
        "BucketArgs", "@pulumi/aws", "node_modules/@pulumi/aws/s3/bucket.d.ts"
    )
    assert link_href(resolve(unit, ref)).endswith("/s3/bucket/#inputs")


def test_pulumi_provider_input_type(unit: DocumentationUnit) -> None:
    """Mapped provider input types link into the documenting resource page."""
    ref = _external(
        "DistributionOrigin", "@pulumi/aws", "node_modules/@pulumi/aws/types/input.d.ts"
    )
    assert link_href(resolve(unit, ref)) == (
        "https://www.pulumi.com/registry/packages/aws/api-docs/"
        "cloudfront/distribution/#distributionorigin"
    )


def test_unmapped_provider_input_type_raises(unit: DocumentationUnit) -> None:
    """Provider input types without a documenting page are rejected."""
    ref = _external(
        "SomethingNew", "@pulumi/aws", "node_modules/@pulumi/aws/types/input.d.ts"
    )
    with pytest.raises(UnsupportedReference):
        resolve(unit, ref)


def test_pulumiverse_and_lambda_templates(unit: DocumentationUnit) -> None:
    """Vercel provider and Lambda types use their package URL templates."""
    vercel = _external(
        "DnsRecord",
        "@pulumiverse/vercel",
        "node_modules/@pulumiverse/vercel/dnsRecord.d.ts",
    )
    handler = _external(
        "Handler", "@types/aws-lambda", "node_modules/@types/aws-lambda/handler.d.ts"
    )

    assert link_href(resolve(unit, vercel)) == (
        "https://www.pulumi.com/registry/packages/vercel/api-docs/dnsrecord/"
    )
    assert link_href(resolve(unit, handler)).endswith("types/aws-lambda/handler.d.ts")


def test_esbuild_loader_anchor(unit: DocumentationUnit) -> None:
    """``esbuild`` references link to the loader or build section."""
    loader = Reference("Loader", package="esbuild")
    options = Reference("BuildOptions", package="esbuild")
    assert link_href(resolve(unit, loader)) == "https://esbuild.github.io/api/#loader"
    assert link_href(resolve(unit, options)) == "https://esbuild.github.io/api/#build"


def test_bun_shell_by_qualified_name(unit: DocumentationUnit) -> None:
    """The Bun ``Shell`` type links to the Bun shell docs."""
    ref = Reference("$", package="bun-types", qualified_name="Shell")
    target = resolve(unit, ref)
    assert isinstance(target, External)
    assert target.label == "Bun Shell"


def test_pulumi_sdk_has_no_template() -> None:
    """The Pulumi SDK package only resolves through marker names."""
    assert external_template("@pulumi/pulumi") is None
    assert external_template("@pulumi/cloudflare") is not None
    assert external_template(None) is None


def test_unknown_reference_raises(unit: DocumentationUnit) -> None:
    """References no rule recognises carry themselves in the error."""
    ref = Reference("Ghost")
    with pytest.raises(UnsupportedReference) as excinfo:
        resolve(unit, ref)
    assert excinfo.value.reference is ref
