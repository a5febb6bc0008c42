"""Utility helpers for loading the letterfreq configuration."""

from __future__ import annotations

import copy
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

import jsonschema

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]

from contracts.config_schema import CONFIG_SCHEMA, DEFAULT_CONFIG
from contracts.errors import ConfigError


def _merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(data: Mapping[str, Any], source: str) -> None:
    validator_cls = jsonschema.validators.validator_for(CONFIG_SCHEMA)
    validator = validator_cls(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda err: list(err.absolute_path))
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.absolute_path) or "<root>"
        raise ConfigError(f"{source}: {location}: {first.message}")


@lru_cache(maxsize=8)
def get_config(path: str | None = None) -> Dict[str, Any]:
    """Load, validate and cache the configuration at ``path``.

    Without a path the built-in defaults are returned.  Values from the file
    are merged over the defaults section by section.
    """

    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    try:
        with config_path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file '{config_path}' was not found") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file '{config_path}': {exc}") from exc

    _validate(data, str(config_path))
    return _merge(DEFAULT_CONFIG, data)


def reload() -> None:
    """Clear cached configurations."""

    get_config.cache_clear()


def get_section(path: str, default: Any = None, *, config: Mapping[str, Any] | None = None) -> Any:
    """Retrieve a nested configuration value using dotted notation."""

    data: Any = config if config is not None else get_config()
    for part in path.split("."):
        if isinstance(data, Mapping) and part in data:
            data = data[part]
        else:
            if default is not None:
                return default
            raise KeyError(f"Configuration path '{path}' not found")
    return data


__all__ = ["get_config", "get_section", "reload"]
