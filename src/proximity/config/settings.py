# src/proximity/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/proximity/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `PROXIMITY_CONFIG_PATH`
- environment variables (`PROXIMITY_LOG_LEVEL`, `PROXIMITY_INPUT_PATH`)

Design rule:
- The reference point, radius and Earth radius live in YAML and are passed into the
  filter as arguments; nothing in the record pipeline reads settings by itself.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from proximity.core.env import load_dotenv_if_present
from proximity.core.geo import Coordinate


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `proximity.config`."""
    text = resources.files("proximity.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "Proximity"
    log_level: str = "INFO"


class InputSettings(BaseModel):
    path: str = "data/customers.json"
    encoding: str = "utf-8"


class ReferenceSettings(BaseModel):
    """Reference point in decimal degrees."""

    latitude_deg: float = Field(default=53.339428, ge=-90, le=90)
    longitude_deg: float = Field(default=-6.257664, ge=-180, le=180)


class FilterSettings(BaseModel):
    radius_km: float = Field(default=100, gt=0)
    earth_radius_km: float = Field(default=6371, gt=0)
    clamp_central_angle: bool = True
    reject_duplicate_ids: bool = False
    shards: int = Field(default=1, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    input: InputSettings = Field(default_factory=InputSettings)
    reference: ReferenceSettings = Field(default_factory=ReferenceSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)


def reference_from_settings(settings: Settings) -> Coordinate:
    """Build the reference point (radians) from settings."""
    ref = settings.reference
    return Coordinate.from_degrees(ref.latitude_deg, ref.longitude_deg)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)
    log_level = os.getenv("PROXIMITY_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    input_path = os.getenv("PROXIMITY_INPUT_PATH")
    if input_path:
        data.setdefault("input", {})["path"] = input_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("PROXIMITY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
