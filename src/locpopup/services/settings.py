"""Settings dataclass and JSON persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..events import DEFAULT_NOTIFICATION_METHOD
from ..ui.presentation import (
    ERROR_BACKGROUND,
    POPUP_BACKGROUND,
    POPUP_FOREGROUND,
    WARNING_BACKGROUND,
    PopupPalette,
)

__all__ = ["ENV_PREFIX", "Settings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
ENV_PREFIX = "LOCPOPUP_"
_SETTINGS_DIR = Path.home() / ".locpopup"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "LOCPOPUP_NOTIFICATION_METHOD": "notification_method",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "LOCPOPUP_ENABLED": "enabled",
    "LOCPOPUP_DEBUG_LOGGING": "debug_logging",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "LOCPOPUP_LOCATION_WINDOW": "location_window",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_BOOL_FIELDS = frozenset({"enabled", "debug_logging"})
_INT_FIELDS = frozenset({"location_window"})


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    enabled: bool = True
    notification_method: str = DEFAULT_NOTIFICATION_METHOD
    location_window: int = 0
    debug_logging: bool = False
    error_background: str = ERROR_BACKGROUND
    warning_background: str = WARNING_BACKGROUND
    popup_foreground: str = POPUP_FOREGROUND
    popup_background: str = POPUP_BACKGROUND
    metadata: dict[str, Any] = field(default_factory=dict)

    def palette(self) -> PopupPalette:
        return PopupPalette(
            error_background=self.error_background,
            warning_background=self.warning_background,
            foreground=self.popup_foreground,
            background=self.popup_background,
        )


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _coerce_payload(_filter_fields(payload))
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
            LOGGER.debug("Settings loaded from %s (version=%s)", self._path, payload.get("version"))

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        metadata_override = filtered.get("metadata")
        if isinstance(metadata_override, Mapping):
            merged_metadata = dict(settings.metadata or {})
            merged_metadata.update(metadata_override)
            filtered["metadata"] = merged_metadata
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning(
                    "Environment override %s=%s is not a valid integer",
                    env_name,
                    value,
                )
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _coerce_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce persisted values to their field types, dropping the ones that don't fit."""

    coerced: Dict[str, Any] = {}
    for key, value in data.items():
        try:
            coerced[key] = _coerce_field(key, value)
        except (TypeError, ValueError):
            LOGGER.warning("Ignoring settings value %s=%r of type %s", key, value, type(value).__name__)
    return coerced


def _coerce_field(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        raise ValueError(name)
    if name in _INT_FIELDS:
        if isinstance(value, bool):
            raise TypeError(name)
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return int(value.strip(), 10)
        raise TypeError(name)
    if name == "metadata":
        if not isinstance(value, Mapping):
            raise TypeError(name)
        return dict(value)
    if not isinstance(value, str):
        raise TypeError(name)
    return value
