"""Settings loading entry points for retryer."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .models import RetrySettings

DEFAULT_SECTION = "retry"
ENV_PREFIX = "RETRYER_"
ENV_FIELDS = ("max_retries", "delay_seconds")


class ConfigError(RuntimeError):
    """Raised when settings files cannot be loaded or validated."""


def load_settings(
    path: Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    section: str = DEFAULT_SECTION,
) -> RetrySettings:
    """Load retry settings from ``path``, the environment and ``overrides``.

    Later sources win: file, then ``RETRYER_*`` environment variables, then
    explicit overrides. Dotted override keys such as ``retry.max_retries``
    are accepted.
    """

    merged: dict[str, Any] = {}
    sources: list[str] = []
    if path:
        payload = _expect_mapping(_read_structured_file(path), path)
        merged = _select_section(payload, section, path)
        sources.append(str(path))

    env_values = _env_values()
    if env_values:
        merged = _deep_merge(merged, env_values)
        sources.extend(f"{ENV_PREFIX}{field.upper()}" for field in env_values)

    if overrides:
        expanded = _expand_override_keys(overrides)
        merged = _deep_merge(merged, _select_section(expanded, section, Path("<overrides>")))
        sources.append("overrides")

    try:
        return RetrySettings.model_validate(merged)
    except ValidationError as exc:
        origin = ", ".join(sources) or "defaults"
        raise ConfigError(f"Invalid retry settings from {origin}: {exc}") from exc


def dump_example_settings(dest: Path, *, section: str = DEFAULT_SECTION) -> None:
    """Write the default settings to ``dest`` as YAML or JSON."""

    if dest.suffix.lower() == ".toml":
        raise ConfigError("TOML export is not supported yet; use a YAML destination.")

    dest.parent.mkdir(parents=True, exist_ok=True)
    payload = {section: RetrySettings().model_dump()}
    if dest.suffix.lower() == ".json":
        dest.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return
    dest.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def _env_values() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field in ENV_FIELDS:
        raw = os.getenv(f"{ENV_PREFIX}{field.upper()}")
        if raw is not None and raw.strip():
            values[field] = raw.strip()
    return values


def _select_section(payload: Mapping[str, Any], section: str, source: Path) -> dict[str, Any]:
    """Return top-level keys with the ``section`` mapping merged over them."""

    top_level = {key: value for key, value in payload.items() if key != section}
    if section in payload:
        return _deep_merge(top_level, _expect_mapping(payload[section], source))
    return top_level


def _expect_mapping(payload: Any, source: Path) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Expected mapping data in {source}, got {type(payload)!r}.")
    return dict(payload)


def _read_structured_file(path: Path) -> Any:
    """Return the parsed contents of a YAML/TOML/JSON file."""

    if not path.exists():
        raise ConfigError(f"Config file {path} does not exist.")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    try:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text) or {}
        if suffix == ".toml":
            return tomllib.loads(text)
        if suffix == ".json":
            return json.loads(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc

    raise ConfigError(f"Unsupported config format for {path}")


def _deep_merge(base: Mapping[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge two mappings returning a new dictionary."""

    result: dict[str, Any] = dict(base)
    for key, value in extra.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_override_keys(overrides: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in overrides.items():
        if isinstance(key, str) and "." in key:
            *parents, leaf = key.split(".")
            converted: dict[str, Any] = {leaf: value}
            for segment in reversed(parents):
                converted = {segment: converted}
        else:
            converted = {key: value}
        result = _deep_merge(result, converted)
    return result


__all__ = [
    "ConfigError",
    "DEFAULT_SECTION",
    "dump_example_settings",
    "load_settings",
]
