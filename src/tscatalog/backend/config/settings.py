"""Configuration loader for the translation catalogue."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

if TYPE_CHECKING:  # pragma: no cover - only for static type checkers
    from tscatalog.backend.app.localization import Catalog

_LOGGER = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
SETTINGS_FILE = CONFIG_DIRECTORY / "catalog.yaml"

ENV_OVERRIDES: Mapping[str, str] = {
    "TSCATALOG_RESOURCE_DIR": "resource_directory",
    "TSCATALOG_DEFAULT_LOCALE": "default_locale",
    "TSCATALOG_FILE_PATTERN": "file_pattern",
}


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class CatalogSettings(BaseModel):
    """Where translation resources live and which locale is the default."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    resource_directory: Path
    file_pattern: str = "*.ts"
    default_locale: str | None = None
    source_locale: str = "en_US"

    @field_validator("resource_directory", mode="after")
    @classmethod
    def _resolve_directory(cls, value: Path) -> Path:
        if not value.is_absolute():
            value = PACKAGE_ROOT / value
        return value

    @field_validator("file_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        if not value.strip():
            raise ConfigurationError("File patterns must be non-empty")
        return value

    @field_validator("default_locale", mode="before")
    @classmethod
    def _blank_locale_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def _apply_environment(raw: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(raw)
    for variable, field_name in ENV_OVERRIDES.items():
        value = environ.get(variable)
        if value is None:
            continue
        if not value.strip():
            _LOGGER.warning("Ignoring empty value for %s", variable)
            continue
        merged[field_name] = value.strip()
    return merged


def build_settings(
    path: Path = SETTINGS_FILE,
    environ: Mapping[str, str] | None = None,
) -> CatalogSettings:
    """Read ``path`` and apply environment overrides."""

    if not path.exists():
        raise FileNotFoundError(f"Catalogue settings not found: {path}")

    raw = _apply_environment(_load_yaml(path), os.environ if environ is None else environ)
    try:
        return CatalogSettings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Catalogue settings validation failed: {error}") from error


@lru_cache(maxsize=1)
def load_settings() -> CatalogSettings:
    """Load and cache the settings for the running process."""

    return build_settings()


def load_configured_catalog(settings: CatalogSettings | None = None) -> Catalog:
    """Build a catalogue from the configured resource directory."""

    from tscatalog.backend.app.localization import load_directory

    settings = settings or load_settings()
    return load_directory(
        settings.resource_directory,
        default_locale=settings.default_locale,
        pattern=settings.file_pattern,
    )


__all__ = [
    "CONFIG_DIRECTORY",
    "CatalogSettings",
    "ConfigurationError",
    "ENV_OVERRIDES",
    "PACKAGE_ROOT",
    "SETTINGS_FILE",
    "build_settings",
    "load_configured_catalog",
    "load_settings",
]
