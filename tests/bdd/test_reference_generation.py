"""Behaviour tests for end-to-end reference page generation.

The scenarios in ``features/reference_generation.feature`` write a small
TypeDoc-style reflection document and a ``refdocs.yaml`` file into a
temporary directory, run the ``generate`` command, and assert on the written
MDX. The failure scenario checks that a compilation error leaves the output
tree empty.

Usage:
    pytest tests/bdd/test_reference_generation.py -v
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest
from pytest_bdd import given, scenarios, then, when

from refdoc_pages import cli
from refdoc_pages.errors import UnsupportedReference

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "reference_generation.feature"
)
scenarios(FEATURE_FILE)

BUCKET_SOURCE = "platform/src/components/aws/bucket.ts"
PAGE_PATH = Path("src/content/docs/docs/component/aws/bucket.mdx")


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _project(transform_type: dict[str, typ.Any]) -> dict[str, typ.Any]:
    """Return a project with a ``Bucket`` class and its ``BucketArgs``."""
    sources = [{"fileName": BUCKET_SOURCE, "line": 1, "character": 0}]
    domain = {
        "type": "reflection",
        "declaration": {
            "id": 20,
            "name": "__type",
            "kind": 65536,
            "children": [
                {"id": 21, "name": "cert", "kind": 1024, "type": {"type": "intrinsic", "name": "string"}},
                {"id": 22, "name": "name", "kind": 1024, "type": {"type": "intrinsic", "name": "string"}},
            ],
        },
    }
    return {
        "id": 0,
        "name": "platform",
        "kind": 1,
        "children": [
            {
                "id": 1,
                "name": "components/aws/bucket",
                "kind": 2,
                "sources": sources,
                "children": [
                    {
                        "id": 2,
                        "name": "Bucket",
                        "kind": 128,
                        "sources": sources,
                        "comment": {"summary": [{"kind": "text", "text": "Create an S3 bucket."}]},
                        "children": [
                            {
                                "id": 3,
                                "name": "constructor",
                                "kind": 512,
                                "signatures": [
                                    {
                                        "id": 4,
                                        "name": "new Bucket",
                                        "kind": 16384,
                                        "parameters": [
                                            {"id": 5, "name": "name", "kind": 32768, "type": {"type": "intrinsic", "name": "string"}},
                                            {
                                                "id": 6,
                                                "name": "args",
                                                "kind": 32768,
                                                "flags": {"isOptional": True},
                                                "type": {"type": "reference", "name": "BucketArgs", "target": 7},
                                            },
                                        ],
                                    }
                                ],
                            }
                        ],
                    },
                    {
                        "id": 7,
                        "name": "BucketArgs",
                        "kind": 256,
                        "sources": sources,
                        "children": [
                            {"id": 8, "name": "domain", "kind": 1024, "flags": {"isOptional": True}, "type": domain},
                            {"id": 9, "name": "transform", "kind": 1024, "flags": {"isOptional": True}, "type": transform_type},
                        ],
                    },
                ],
            }
        ],
    }


def _write_project(tmp_path: Path, transform_type: dict[str, typ.Any]) -> Path:
    path = tmp_path / "components-doc.json"
    path.write_bytes(msgspec_json.encode(_project(transform_type)))
    return path


@given("a reflection document for the bucket component")
def given_bucket_reflection(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write a reflection document whose references all resolve."""
    transform = {
        "type": "reference",
        "name": "BucketV2",
        "package": "@pulumi/aws",
        "target": {
            "sourceFileName": "node_modules/@pulumi/aws/s3/bucketV2.d.ts",
            "qualifiedName": "BucketV2",
        },
    }
    scenario_state["reflection"] = _write_project(tmp_path, transform)


@given("a reflection document whose args reference an unknown package")
def given_broken_reflection(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write a reflection document with a reference no rule can link."""
    transform = {
        "type": "reference",
        "name": "Mystery",
        "package": "left-pad",
        "target": {
            "sourceFileName": "node_modules/left-pad/index.d.ts",
            "qualifiedName": "Mystery",
        },
    }
    scenario_state["reflection"] = _write_project(tmp_path, transform)


@given("a refdocs config pointing at it")
def given_config(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write ``refdocs.yaml`` rooted in a fresh site directory."""
    site = tmp_path / "site"
    config_path = tmp_path / "refdocs.yaml"
    config_path.write_text(
        f"""
defaults:
  output_dir: {site}
  components_reflection: {scenario_state["reflection"]}
""".strip()
        + "\n",
        encoding="utf-8",
    )
    scenario_state["site"] = site
    scenario_state["config"] = config_path


@when("I run the generate command")
def when_generate(
    scenario_state: dict[str, object], capsys: pytest.CaptureFixture[str]
) -> None:
    """Run the generate command against the scenario config."""
    cli.generate(config=typ.cast("Path", scenario_state["config"]))


@when("I run the generate command expecting a failure")
def when_generate_fails(scenario_state: dict[str, object]) -> None:
    """Run the generate command and keep the raised error."""
    with pytest.raises(UnsupportedReference) as excinfo:
        cli.generate(config=typ.cast("Path", scenario_state["config"]))
    scenario_state["error"] = excinfo.value


@then("the bucket page is written")
def then_page_written(scenario_state: dict[str, object]) -> None:
    """The component page lands at its docs path."""
    site = typ.cast("Path", scenario_state["site"])
    page = site / PAGE_PATH
    assert page.exists(), f"expected {page} to be written"
    scenario_state["text"] = page.read_text(encoding="utf-8")


@then("the page documents nested fields with anchors")
def then_nested_fields(scenario_state: dict[str, object]) -> None:
    """Nested fields appear in the bullet list and as nested titles."""
    text = typ.cast("str", scenario_state["text"])
    assert "title: Bucket" in text
    assert 'description: Reference doc for the `sst.aws.Bucket` component.' in text
    assert '- <p>[<code class="key">cert</code>](#domain-cert)</p>' in text, (
        "expected an anchored bullet for domain.cert"
    )
    assert (
        '<NestedTitle id="domain-cert" Tag="h4" parent="domain.">cert</NestedTitle>'
        in text
    )
    assert (
        "https://www.pulumi.com/registry/packages/aws/api-docs/s3/bucketv2/" in text
    ), "expected the provider resource to link to the Pulumi registry"


@then("the command reports the written page")
def then_reports(capsys: pytest.CaptureFixture[str]) -> None:
    """The command prints one ``wrote`` line per page."""
    out = capsys.readouterr().out
    assert "wrote " in out
    assert out.strip().endswith("bucket.mdx")


@then("the failure names the unsupported reference")
def then_failure_names_reference(scenario_state: dict[str, object]) -> None:
    """The error carries the offending reference."""
    error = typ.cast("UnsupportedReference", scenario_state["error"])
    assert "Mystery" in str(error)


@then("no pages are written")
def then_nothing_written(scenario_state: dict[str, object]) -> None:
    """A failed compilation leaves the site directory absent."""
    site = typ.cast("Path", scenario_state["site"])
    assert not site.exists(), "no output should be written when compilation fails"
