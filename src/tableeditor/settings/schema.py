"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import HTTP_TIMEOUT_SEC, PAGE_SIZE, SCROLL_THRESHOLD_PX

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "tableeditor/settings.schema.json",
    "type": "object",
    "required": ["schema", "paging", "source"],
    "properties": {
        "schema": {"const": "tableeditor/settings@1"},
        "paging": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1},
                "scroll_threshold_px": {"type": "number", "minimum": 0},
            },
            "additionalProperties": False,
        },
        "source": {
            "type": "object",
            "properties": {
                "url": {"type": ["string", "null"]},
                "mode": {"type": "string", "enum": ["paged", "snapshot"]},
                "timeout_sec": {"type": "number", "exclusiveMinimum": 0},
                "fallback_seed": {"type": ["integer", "null"]},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
                },
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "tableeditor/settings@1",
    "paging": {
        "page_size": PAGE_SIZE,
        "scroll_threshold_px": SCROLL_THRESHOLD_PX,
    },
    "source": {
        "url": None,
        "mode": "paged",
        "timeout_sec": HTTP_TIMEOUT_SEC,
        "fallback_seed": None,
    },
    "logging": {"level": "INFO"},
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)
_SECTIONS = ("paging", "source", "logging")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
