"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_builder_methods,
    _build_linkable,
    _optional_str,
    _require_mapping,
    _string_list,
    _string_map,
)
from .models import RoutingConfig, SdkConfig, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a reference-doc build.

    Every section is optional; omitted values fall back to the defaults on
    :class:`SiteConfig`.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/refdocs.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with routing, SDK and builder-method settings.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure is not a mapping or a value has the wrong
        shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from refdoc_pages.config import load_site_config
    >>> config = load_site_config(Path("config/refdocs.yaml"))  # doctest: +SKIP
    >>> config.routing.dns_suffix  # doctest: +SKIP
    '/dns.ts'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    defaults = _require_mapping(raw.get("defaults"), "defaults")
    base = SiteConfig()
    builder_methods = (
        _build_builder_methods(raw["builder_methods"])
        if "builder_methods" in raw
        else base.builder_methods
    )
    return SiteConfig(
        output_dir=Path(defaults.get("output_dir", base.output_dir)),
        docs_root=Path(defaults.get("docs_root", base.docs_root)),
        components_reflection=_optional_str(defaults.get("components_reflection")),
        sdk_reflection=_optional_str(defaults.get("sdk_reflection")),
        examples_reflection=_optional_str(defaults.get("examples_reflection")),
        examples_root=Path(defaults.get("examples_root", base.examples_root)),
        cli_doc=_optional_str(defaults.get("cli_doc")),
        common_errors_doc=_optional_str(defaults.get("common_errors_doc")),
        github_url=_optional_str(defaults.get("github_url")) or base.github_url,
        routing=_build_routing(_require_mapping(raw.get("routing"), "routing")),
        sdk=_build_sdk(_require_mapping(raw.get("sdk"), "sdk")),
        builder_methods=builder_methods,
    )


def _build_routing(payload: typ.Mapping[str, typ.Any]) -> RoutingConfig:
    """Merge routing overrides into the default routing rules."""
    base = RoutingConfig()
    return RoutingConfig(
        skip_suffixes=(
            _string_list(payload["skip_suffixes"], "routing.skip_suffixes")
            if "skip_suffixes" in payload
            else base.skip_suffixes
        ),
        global_source=_optional_str(payload.get("global_source")) or base.global_source,
        config_source=_optional_str(payload.get("config_source")) or base.config_source,
        dns_suffix=_optional_str(payload.get("dns_suffix")) or base.dns_suffix,
        linkable=(
            _build_linkable(payload["linkable"])
            if "linkable" in payload
            else base.linkable
        ),
        dns_titles=(
            _string_map(payload["dns_titles"], "routing.dns_titles")
            if "dns_titles" in payload
            else base.dns_titles
        ),
        global_extra_functions=(
            _string_map(
                payload["global_extra_functions"], "routing.global_extra_functions"
            )
            if "global_extra_functions" in payload
            else base.global_extra_functions
        ),
    )


def _build_sdk(payload: typ.Mapping[str, typ.Any]) -> SdkConfig:
    """Merge SDK overrides into the default SDK settings."""
    base = SdkConfig()
    about = payload.get("about_namespaces")
    prefixed = payload.get("prefixed_namespaces")
    variables = payload.get("variable_namespaces")
    return SdkConfig(
        about_namespaces=(
            base.about_namespaces
            if about is None
            else _string_list(about, "sdk.about_namespaces")
        ),
        prefixed_namespaces=(
            base.prefixed_namespaces
            if prefixed is None
            else _string_list(prefixed, "sdk.prefixed_namespaces")
        ),
        variable_namespaces=(
            base.variable_namespaces
            if variables is None
            else _string_list(variables, "sdk.variable_namespaces")
        ),
    )


__all__ = ["load_site_config"]
