"""User settings for the command-line integration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

_DEFAULT_PATH = Path.home() / ".config" / "litecoder" / "settings.yaml"


class LanguageSettings(BaseModel):
    enabled: bool = True
    max_suggestions: int = Field(default=5, ge=1, le=5)


class Settings(BaseModel):
    enable_transparent_mode: bool = True
    suggestion_delay: int = Field(default=100, ge=0, description="Debounce in milliseconds")
    enable_status_bar: bool = True
    language_settings: Dict[str, LanguageSettings] = Field(default_factory=dict)

    def for_language(self, language: str) -> LanguageSettings:
        return self.language_settings.get(language, LanguageSettings())


def settings_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return path
    override = os.environ.get("LITECODER_CONFIG")
    if override:
        return Path(override)
    return _DEFAULT_PATH


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from YAML, falling back to defaults when no file exists."""

    resolved = settings_path(path)
    if not resolved.exists():
        return Settings()

    try:
        data = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Settings file {resolved} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {resolved} must contain a mapping")

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings in {resolved}: {exc}") from exc


__all__ = ["LanguageSettings", "Settings", "load_settings", "settings_path"]
