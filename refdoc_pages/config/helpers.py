"""Utility helpers shared by the reference-doc configuration loader."""

from __future__ import annotations

import typing as typ

from .models import LinkableCopy, SiteConfigError


def _require_mapping(value: object, key: str) -> dict[str, typ.Any]:
    """Return ``value`` as a dict, treating ``None`` as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise SiteConfigError(msg)
    return dict(value)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_list(value: object, key: str) -> list[str]:
    """Return a list of non-empty strings from a YAML sequence."""
    if not isinstance(value, list):
        msg = f"'{key}' must be a list of strings."
        raise SiteConfigError(msg)
    items = [_optional_str(item) for item in value]
    if any(item is None for item in items):
        msg = f"'{key}' must not contain empty entries."
        raise SiteConfigError(msg)
    return typ.cast("list[str]", items)


def _string_map(value: object, key: str) -> dict[str, str]:
    """Return a mapping of non-empty string keys to non-empty string values."""
    result: dict[str, str] = {}
    for name, target in _require_mapping(value, key).items():
        text = _optional_str(target)
        if text is None:
            msg = f"'{key}.{name}' must be a non-empty string."
            raise SiteConfigError(msg)
        result[str(name)] = text
    return result


def _build_linkable(value: object) -> dict[str, LinkableCopy]:
    """Build linkable-helper copy keyed by source suffix."""
    result: dict[str, LinkableCopy] = {}
    for suffix, payload in _require_mapping(value, "routing.linkable").items():
        if not isinstance(payload, dict):
            msg = f"'routing.linkable.{suffix}' must be a mapping."
            raise SiteConfigError(msg)
        title = _optional_str(payload.get("title"))
        namespace = _optional_str(payload.get("namespace"))
        if not (title and namespace):
            msg = f"'routing.linkable.{suffix}' requires 'title' and 'namespace'."
            raise SiteConfigError(msg)
        result[str(suffix)] = LinkableCopy(title=title, namespace=namespace)
    return result


def _build_builder_methods(value: object) -> dict[str, tuple[str, ...]]:
    """Build the class name to builder-method order mapping."""
    return {
        str(cls): tuple(_string_list(names, f"builder_methods.{cls}"))
        for cls, names in _require_mapping(value, "builder_methods").items()
    }


__all__ = [
    "_build_builder_methods",
    "_build_linkable",
    "_optional_str",
    "_require_mapping",
    "_string_list",
    "_string_map",
]
