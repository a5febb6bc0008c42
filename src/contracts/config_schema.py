"""JSON Schema for the TOML configuration file."""

from __future__ import annotations

from typing import Any, Dict

__all__ = ["CONFIG_SCHEMA", "DEFAULT_CONFIG"]

DEFAULT_CONFIG: Dict[str, Any] = {
    "dispatch": {"executor": "threaded", "max_workers": 0},
    "counter": {"chunk_size": 64 * 1024},
    "logging": {"level": "WARNING"},
    "events": {"enabled": False, "dir": "logs/letterfreq", "max_bytes": 100 * 1024 * 1024},
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "letterfreq configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "dispatch": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "executor": {"enum": ["threaded", "sequential"]},
                "max_workers": {"type": "integer", "minimum": 0},
            },
        },
        "counter": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "chunk_size": {"type": "integer", "minimum": 1},
            },
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {"enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
            },
        },
        "events": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "enabled": {"type": "boolean"},
                "dir": {"type": "string", "minLength": 1},
                "max_bytes": {"type": "integer", "minimum": 1},
            },
        },
    },
}
