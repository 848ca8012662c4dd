"""Unit tests for rendering type expressions into MDX fragments."""

from __future__ import annotations

import pytest

from refdoc_pages.compiler import RenderContext, render_declared, render_type
from refdoc_pages.compiler.dispatcher import (
    UNION_SEPARATOR,
    code,
    quoted,
    render_parameter_name,
    render_signature,
)
from refdoc_pages.errors import (
    MissingRequiredMetadata,
    UnsupportedParameterDefault,
    UnsupportedReference,
    UnsupportedTypeVariant,
)
from refdoc_pages.reflection import (
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
    Union,
)

STRING = code("primitive", "string")
NUMBER = code("primitive", "number")


@pytest.fixture
def unit() -> DocumentationUnit:
    """Return a unit with one class and one interface to link against."""
    return DocumentationUnit(
        "components/aws/bucket",
        (
            Symbol(
                "Bucket",
                SymbolKind.CLASS,
                source_path="platform/src/components/aws/bucket.ts",
            ),
            Symbol("BucketCorsArgs", SymbolKind.INTERFACE),
        ),
    )


def _param(name: str, **kwargs: object) -> Symbol:
    kwargs.setdefault("type", Primitive("string"))
    return Symbol(name, SymbolKind.PARAMETER, **kwargs)  # type: ignore[arg-type]


def test_union_of_primitives(unit: DocumentationUnit) -> None:
    """Union members render in order, joined by the union separator."""
    actual = render_type(unit, Union((Primitive("string"), Primitive("number"))))
    assert actual == f"{STRING}{UNION_SEPARATOR}{NUMBER}", (
        f"unexpected union rendering {actual!r}"
    )


def test_string_literal_is_quoted(unit: DocumentationUnit) -> None:
    """String literals render between typographic quotes."""
    assert render_type(unit, LiteralValue("arm64")) == quoted("arm64")


def test_string_literal_escapes_markdown(unit: DocumentationUnit) -> None:
    """Asterisks and colons in literal text are backslash-escaped."""
    assert render_type(unit, LiteralValue("a:b*")) == quoted("a\\:b\\*")


def test_boolean_and_null_literals(unit: DocumentationUnit) -> None:
    """Booleans render bare; ``null`` renders quoted."""
    assert render_type(unit, LiteralValue(value=True)) == code("primitive", "true")
    assert render_type(unit, LiteralValue(None)) == quoted("null")
    assert render_type(unit, LiteralValue(3)) == quoted("3")


def test_template_literal_with_one_hole(unit: DocumentationUnit) -> None:
    """A single primitive hole renders as an escaped ``${type}`` placeholder."""
    node = TemplateLiteral("arn:{", ((Primitive("string"), "}"),))
    assert render_type(unit, node) == quoted("arn:\\{$\\{string\\}\\}")


def test_template_literal_with_two_holes_is_rejected(unit: DocumentationUnit) -> None:
    """More than one hole has no rendering rule."""
    node = TemplateLiteral(
        "a", ((Primitive("string"), "-"), (Primitive("number"), ""))
    )
    with pytest.raises(UnsupportedTypeVariant) as excinfo:
        render_type(unit, node)
    assert excinfo.value.node is node


def test_array_of_union_is_parenthesised(unit: DocumentationUnit) -> None:
    """Arrays of unions wrap the union in parentheses."""
    node = ArrayOf(Union((Primitive("string"), Primitive("number"))))
    expected = (
        f"{code('symbol', '(')}{STRING}{UNION_SEPARATOR}{NUMBER}{code('symbol', ')[]')}"
    )
    assert render_type(unit, node) == expected
    assert render_type(unit, ArrayOf(Primitive("string"))) == (
        f"{STRING}{code('symbol', '[]')}"
    )


def test_tuple_renders_first_element(unit: DocumentationUnit) -> None:
    """Tuples render as an array of their first element."""
    node = TupleOf((Primitive("string"), Primitive("number")))
    assert render_type(unit, node) == f"{STRING}{code('symbol', '[]')}"


def test_inline_object_renders_as_object(unit: DocumentationUnit) -> None:
    """Object types with fields render as ``Object``; empty ones are rejected."""
    node = InlineObject((_param("a"),))
    assert render_type(unit, node) == code("primitive", "Object")
    with pytest.raises(UnsupportedTypeVariant):
        render_type(unit, InlineObject(()))


def test_callable_renders_arrow_signature(unit: DocumentationUnit) -> None:
    """Function types render their parameters and return type."""
    node = CallableSignature(
        (_param("event"), _param("ctx", flags=Flags(optional=True))),
        Primitive("void"),
    )
    expected = code(
        "primitive",
        f"(event: {STRING}, ctx?: {STRING}) => {code('primitive', 'void')}",
    )
    assert render_type(unit, node) == expected


def test_unknown_shapes_raise(unit: DocumentationUnit) -> None:
    """Opaque types and foreign objects have no rendering rule."""
    with pytest.raises(UnsupportedTypeVariant):
        render_type(unit, OpaqueType("conditional"))
    with pytest.raises(UnsupportedTypeVariant):
        render_type(unit, "string")  # type: ignore[arg-type]


def test_typescript_generic(unit: DocumentationUnit) -> None:
    """TypeScript built-ins render as ``Name<args>``."""
    node = Reference(
        "Record",
        package="typescript",
        type_arguments=(Primitive("string"), Primitive("number")),
    )
    expected = (
        f"{code('primitive', 'Record')}{code('symbol', '&lt;')}"
        f"{STRING}, {NUMBER}{code('symbol', '&gt;')}"
    )
    assert render_type(unit, node) == expected


def test_async_wrapper_and_unwrapping(unit: DocumentationUnit) -> None:
    """``Output<T>`` renders wrapped by default and bare when unwrapping."""
    node = Reference(
        "OutputInstance", package="@pulumi/pulumi", type_arguments=(Primitive("string"),)
    )
    wrapped = (
        f"{code('primitive', 'Output')}{code('symbol', '&lt;')}"
        f"{STRING}{code('symbol', '&gt;')}"
    )
    assert render_type(unit, node) == wrapped
    assert render_type(unit, node, RenderContext(unwrap_containers=True)) == STRING


def test_platform_input_stays_wrapped_when_unwrapping(unit: DocumentationUnit) -> None:
    """``@sst/platform`` ``Input<T>`` keeps its wrapper in every context."""
    node = Reference(
        "Input", package="@sst/platform", type_arguments=(Primitive("string"),)
    )
    wrapped = (
        f"{code('primitive', 'Input')}{code('symbol', '&lt;')}"
        f"{STRING}{code('symbol', '&gt;')}"
    )
    assert render_type(unit, node) == wrapped
    assert render_type(unit, node, RenderContext(unwrap_containers=True)) == wrapped, (
        "platform inputs must not be unwrapped on link pages"
    )


def test_wrapper_names_from_other_packages_are_not_unwrapped(
    unit: DocumentationUnit,
) -> None:
    """Only Pulumi's own ``Output`` is treated as an async wrapper."""
    node = Reference(
        "Output",
        package="left-pad",
        type_arguments=(Primitive("string"),),
        target=SymbolRef("node_modules/left-pad/index.d.ts"),
    )
    with pytest.raises(UnsupportedReference):
        render_type(unit, node, RenderContext(unwrap_containers=True))


def test_passthrough_wrapper(unit: DocumentationUnit) -> None:
    """``Unwrap<T>`` renders as ``T``."""
    node = Reference("Unwrap", type_arguments=(Primitive("number"),))
    assert render_type(unit, node) == NUMBER


def test_transform_renders_value_or_callback(unit: DocumentationUnit) -> None:
    """``Transform<T>`` renders ``T`` or a callback receiving ``T``."""
    node = Reference("Transform", type_arguments=(Primitive("string"),))
    rendered = render_type(unit, node)
    assert rendered.startswith(f"{STRING}{UNION_SEPARATOR}")
    assert "ComponentResourceOptions" in rendered
    assert rendered.endswith(code("primitive", "void"))


def test_fixed_rendering_for_marker_names(unit: DocumentationUnit) -> None:
    """Known marker references render a fixed label instead of a link."""
    node = Reference("T", package="sst")
    assert render_type(unit, node) == code("primitive", "string")


def test_reference_to_same_unit_interface(unit: DocumentationUnit) -> None:
    """Interfaces of the unit link to their anchor on the same page."""
    node = Reference("BucketCorsArgs")
    expected = f"[{code('type', 'BucketCorsArgs')}](#bucketcorsargs)"
    assert render_type(unit, node) == expected


def test_reference_to_unit_class_links_to_page(unit: DocumentationUnit) -> None:
    """The unit's own class links to the page itself."""
    assert render_type(unit, Reference("Bucket")) == f"[{code('type', 'Bucket')}](.)"


def test_reference_with_marker_label(unit: DocumentationUnit) -> None:
    """Marker links use their configured label."""
    expected = f"[{code('type', 'sst.aws.dns')}](/docs/component/aws/dns/)"
    assert render_type(unit, Reference("AwsDns")) == expected


def test_unresolvable_reference_raises(unit: DocumentationUnit) -> None:
    """References with no rule propagate :class:`UnsupportedReference`."""
    node = Reference(
        "Mystery",
        package="left-pad",
        target=SymbolRef("node_modules/left-pad/index.d.ts"),
    )
    with pytest.raises(UnsupportedReference) as excinfo:
        render_type(unit, node)
    assert excinfo.value.reference is node
    assert "Mystery" in str(excinfo.value)


def test_see_tag_overrides_declared_type(unit: DocumentationUnit) -> None:
    """An AWS SDK ``@see`` link replaces the structural rendering."""
    text = "[@aws-sdk/client-sqs.Message](https://docs.aws.amazon.com/sqs)"
    prop = Symbol(
        "message",
        SymbolKind.PROPERTY,
        comment=Comment(block_tags=(BlockTag("@see", (CommentPart("text", text),)),)),
        type=OpaqueType("conditional"),
    )
    expected = (
        f"[{code('type', '@aws-sdk/client-sqs.Message')}](https://docs.aws.amazon.com/sqs)"
    )
    assert render_declared(unit, prop) == expected


def test_missing_declared_type_raises(unit: DocumentationUnit) -> None:
    """A symbol without a type cannot be rendered."""
    with pytest.raises(MissingRequiredMetadata):
        render_declared(unit, Symbol("x", SymbolKind.PROPERTY))


def test_parameter_names() -> None:
    """Rest, optional and ``{}``-defaulted parameters are marked."""
    assert render_parameter_name(_param("name")) == "name"
    assert render_parameter_name(_param("opts", default_value="{}")) == "opts?"
    assert render_parameter_name(_param("x", flags=Flags(optional=True))) == "x?"
    rest = _param("args", type=TupleOf((Primitive("string"),)))
    assert render_parameter_name(rest) == "...args"


def test_parameter_with_unsupported_default_raises() -> None:
    """Defaults other than ``{}`` are rejected."""
    with pytest.raises(UnsupportedParameterDefault):
        render_parameter_name(_param("retries", default_value="3"))


def test_render_signature() -> None:
    """Signatures list parameter names after the callee name."""
    signature = Signature(
        "new Bucket",
        parameters=(_param("name"), _param("args", flags=Flags(optional=True))),
    )
    assert render_signature(signature) == "new Bucket(name, args?)"
