"""Settings file management with validation and change notifications."""

from __future__ import annotations

import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..errors import SettingsLoadError, SettingsValidationError
from ..gui.viewmodels.signal import Signal
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults

ENV_SETTINGS_PATH = "TABLEEDITOR_SETTINGS"


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    override = os.environ.get(ENV_SETTINGS_PATH)
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "tableeditor" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "tableeditor" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "tableeditor" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "tableeditor" / "settings.json"
    return Path.home() / ".config" / "tableeditor" / "settings.json"


class SettingsManager:
    """Load, validate and persist user settings for the application."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)
        self.settings_changed = Signal()  # emits (key, value)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk; missing files yield defaults.

        Nothing is written back here, so read-only commands never create
        a settings file.
        """

        path = self.path
        self._path = path
        payload = None
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(f"cannot read {path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise SettingsValidationError(f"{path} must contain a JSON object")
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc

    def save(self) -> None:
        write_json(self.path, self._data)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value*, validate, persist and notify."""

        if isinstance(value, Path):
            value = str(value)
        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self.save()
        self.settings_changed.emit(key, value)

    def as_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)
