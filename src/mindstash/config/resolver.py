"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import MindstashConfig

ENV_PREFIX = "MINDSTASH__"


def resolve_with_precedence(
    *,
    defaults: MindstashConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> MindstashConfig:
    """Layer override sources on top of ``defaults`` and validate the result.

    Sources are applied in order (file, environment, CLI); later sources win.
    Keys may be nested mappings or dotted paths such as ``ingestion.chunk_size``.

    Raises:
        ConfigError: If a source is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is None:
            continue
        merged = _deep_merge(merged, _normalize_mapping(source, source_name=name))

    try:
        return MindstashConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def overrides_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``MINDSTASH__SECTION__KEY`` variables into a nested override mapping.

    Values are parsed as YAML scalars, so ``true`` and ``12`` arrive typed.
    """
    overrides: dict[str, Any] = {}
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
        if not path:
            continue
        try:
            value: Any = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        assign_dotted(overrides, path, value)
    return overrides


def assign_dotted(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at the nested location described by ``path``.

    Raises:
        ConfigError: If a non-mapping value sits on the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(f"Cannot assign into '{segment}' because it is not a mapping.")
        node = existing
    node[path[-1]] = value


def _normalize_mapping(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    label = source_name.capitalize()
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{label} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in dict(source).items():
        if not isinstance(key, str):
            raise ConfigError(f"{label} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _normalize_mapping(value, source_name=source_name)
        try:
            assign_dotted(result, key.split("."), value)
        except ConfigError as exc:
            raise ConfigError(f"{label} override for {key} conflicts with existing value.") from exc
    return result


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "assign_dotted", "overrides_from_env", "resolve_with_precedence"]
