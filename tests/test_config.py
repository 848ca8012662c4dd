"""Tests for loading and validating ``refdocs.yaml``."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from refdoc_pages.config import (
    LinkableCopy,
    RoutingConfig,
    SiteConfigError,
    UnitKind,
    load_site_config,
)

REPO_ROOT = Path(__file__).resolve().parents[1]


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "refdocs.yaml"
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    """An empty document yields the default routing and SDK settings."""
    config = load_site_config(_write(tmp_path, "{}"))

    assert config.components_reflection is None
    assert config.docs_root == Path("src/content/docs/docs")
    assert config.cli_doc is None
    assert config.examples_reflection is None
    assert config.github_url == "https://github.com/sst/sst"
    assert config.routing.dns_titles["aws"] == "AWS"
    assert config.sdk.prefixed_namespaces == ["realtime", "task"]
    assert config.sdk.variable_namespaces == ["opencontrol"]
    assert config.builder_methods["StepFunctions"][0] == "task"


def test_overrides_are_applied(tmp_path: Path) -> None:
    """Provided sections replace the corresponding defaults."""
    config = load_site_config(
        _write(
            tmp_path,
            """
defaults:
  output_dir: site
  docs_root: docs
  components_reflection: https://example.invalid/components.json
  examples_reflection: examples.json
  examples_root: repo/examples
  cli_doc: cli.json
  common_errors_doc: errors.json
  github_url: https://github.com/acme/infra
routing:
  dns_suffix: /dns-adapter.ts
  linkable:
    /aws/policy.ts:
      title: AWS
      namespace: sst.aws.policy
sdk:
  about_namespaces: []
  variable_namespaces: [opencontrol, bus]
builder_methods:
  Workflow: [start, step]
""",
        ),
    )

    assert config.output_dir / config.docs_root == Path("site/docs")
    assert config.examples_reflection == "examples.json"
    assert config.examples_root == Path("repo/examples")
    assert (config.cli_doc, config.common_errors_doc) == ("cli.json", "errors.json")
    assert config.github_url == "https://github.com/acme/infra"
    assert config.components_reflection == "https://example.invalid/components.json"
    assert config.routing.dns_suffix == "/dns-adapter.ts"
    assert config.routing.linkable == {
        "/aws/policy.ts": LinkableCopy("AWS", "sst.aws.policy")
    }
    assert config.sdk.about_namespaces == []
    assert config.sdk.variable_namespaces == ["opencontrol", "bus"]
    assert config.builder_methods == {"Workflow": ("start", "step")}


def test_checked_in_config_loads() -> None:
    """The repository's sample configuration is valid."""
    config = load_site_config(REPO_ROOT / "config" / "refdocs.yaml")
    assert config.routing.global_extra_functions == {"AWS": "/aws/iam-edit.ts"}


@pytest.mark.parametrize(
    "text",
    [
        "- not\n- a mapping",
        "routing: [1, 2]",
        "routing:\n  linkable:\n    /x.ts:\n      title: X",
        "routing:\n  skip_suffixes: /single.ts",
        "builder_methods:\n  StepFunctions: task",
        "routing:\n  dns_titles:\n    aws: ''",
        "sdk:\n  variable_namespaces: opencontrol",
    ],
)
def test_invalid_shapes_raise(tmp_path: Path, text: str) -> None:
    """Values with the wrong shape raise :class:`SiteConfigError`."""
    with pytest.raises(SiteConfigError):
        load_site_config(_write(tmp_path, text))


def test_missing_config_raises(tmp_path: Path) -> None:
    """A missing file raises ``FileNotFoundError``."""
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("platform/src/components/aws/iam-edit.ts", UnitKind.SKIP),
        ("platform/src/global-config.d.ts", UnitKind.GLOBAL),
        ("platform/src/config.ts", UnitKind.CONFIG),
        ("platform/src/components/cloudflare/dns.ts", UnitKind.DNS),
        ("platform/src/components/aws/permission.ts", UnitKind.LINKABLE),
        ("platform/src/components/aws/bucket.ts", UnitKind.COMPONENT),
    ],
)
def test_routing_classifies_sources(source: str, expected: UnitKind) -> None:
    """Source paths route units to their page family."""
    routing = RoutingConfig()
    actual = routing.classify(source)
    assert actual is expected, f"{source!r} routed to {actual!r}"


def test_linkable_copy_lookup() -> None:
    """Linkable copy is found by source suffix."""
    routing = RoutingConfig()
    copy = routing.linkable_copy("platform/src/components/cloudflare/binding.ts")
    assert copy == LinkableCopy("Cloudflare", "sst.cloudflare.binding")
    assert routing.linkable_copy("platform/src/components/aws/bucket.ts") is None


def test_config_is_plain_data() -> None:
    """Routing defaults are independent per instance."""
    first: typ.Any = RoutingConfig()
    second: typ.Any = RoutingConfig()
    first.skip_suffixes.append("/extra.ts")
    assert second.skip_suffixes == ["/aws/iam-edit.ts"]
