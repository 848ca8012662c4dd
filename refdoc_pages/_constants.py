"""Common literal values used across refdoc_pages.

These tables keep hand-maintained naming conventions in one place so the
compiler, builder and tests import the same values without drifting.
Intended for internal use within the refdoc_pages package.

Examples
--------
>>> from refdoc_pages import _constants
>>> _constants.COMPONENT_SOURCE_ROOT
'platform/src/components/'
>>> ("typescript", "Record") in _constants.DICTIONARY_CONTAINERS
True
"""

COMPONENT_SOURCE_ROOT = "platform/src/components/"
COMPONENT_DOCS_ROOT = "/docs/component"

# Two-argument generics whose value argument is documented under ``[]``.
DICTIONARY_CONTAINERS: frozenset[tuple[str, str]] = frozenset(
    {
        ("typescript", "Record"),
        ("typescript", "Map"),
        ("typescript", "ReadonlyMap"),
    }
)

# Pulumi wrappers around values that resolve asynchronously; rendered as
# ``Name<T>``, or as ``T`` alone where link fields are unwrapped.
ASYNC_WRAPPERS: dict[tuple[str, str], str] = {
    ("@pulumi/pulumi", "Input"): "Input",
    ("@pulumi/pulumi", "Output"): "Output",
    ("@pulumi/pulumi", "OutputInstance"): "Output",
}

# Wrappers that always render as ``Name<T>``.
INPUT_WRAPPERS: dict[tuple[str, str], str] = {
    ("@sst/platform", "Input"): "Input",
}

# Wrappers rendered as their first type argument.
PASSTHROUGH_WRAPPERS: frozenset[str] = frozenset(
    {"Unwrap", "UnwrappedObject", "UnwrappedArray"}
)

TRANSFORM_MARKER = "Transform"

PULUMI_OPTIONS_URL = "https://www.pulumi.com/docs/concepts/options/"

# (package, name) -> (css class, label); ``None`` matches any package.
FIXED_RENDERINGS: dict[tuple[str | None, str], tuple[str, str]] = {
    ("@pulumi/pulumi", "T"): ("primitive", "T"),
    ("sst", "T"): ("primitive", "string"),
    (None, "FunctionArn"): ("primitive", '"arn:aws:lambda:$&#123;string&#125;"'),
    (None, "SsrSite"): ("primitive", "All SSR sites"),
    ("@sst/platform", "Resource"): ("type", "Resource"),
    ("@sst/platform", "Constructor"): ("type", "Constructor"),
}

# Pulumi provider input types -> registry page that documents them.
PULUMI_INPUT_TYPE_DOCS: dict[str, str] = {
    "DistributionOrigin": "cloudfront/distribution",
    "DistributionOriginGroup": "cloudfront/distribution",
    "DistributionCustomErrorResponse": "cloudfront/distribution",
    "DistributionDefaultCacheBehavior": "cloudfront/distribution",
    "DistributionOrderedCacheBehavior": "cloudfront/distribution",
}

# Builder-style methods listed before every other class member.
DEFAULT_BUILDER_METHODS: dict[str, tuple[str, ...]] = {
    "StepFunctions": (
        "task",
        "choice",
        "parallel",
        "map",
        "pass",
        "succeed",
        "fail",
        "wait",
    ),
}

# (function, parameter) -> fixed type label used instead of the derived type.
PARAMETER_TYPE_OVERRIDES: dict[tuple[str, str], str] = {
    ("$jsonParse", "reviver"): (
        '[<code class="type">JSON.parse reviver</code>]'
        "(https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/"
        "Global_Objects/JSON/parse#reviver)"
    ),
    ("$jsonStringify", "replacer"): (
        '[<code class="type">JSON.stringify replacer</code>]'
        "(https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/"
        "Global_Objects/JSON/stringify#replacer)"
    ),
    ("$transform", "resource"): '<code class="type">Component Class</code>',
    ("$transform", "cb"): '<code class="type">(args, opts, name) => void</code>',
}

PAGE_COMPONENT_IMPORTS: tuple[tuple[str, str], ...] = (
    ("VideoAside", "src/components/VideoAside.astro"),
    ("Segment", "src/components/tsdoc/Segment.astro"),
    ("Section", "src/components/tsdoc/Section.astro"),
    ("NestedTitle", "src/components/tsdoc/NestedTitle.astro"),
    ("InlineSection", "src/components/tsdoc/InlineSection.astro"),
)

# Variable name -> interface in the same unit whose fields document it.
VARIABLE_INTERFACES: dict[str, str] = {
    "$app": "$APP",
}

# (unit, variable) -> (package, name) of the reference it is documented as.
VARIABLE_REFERENCE_OVERRIDES: dict[tuple[str, str], tuple[str, str]] = {
    ("opencontrol", "tools"): ("opencontrol", "Tools"),
}
