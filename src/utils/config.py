"""YAML configuration loading."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, TypedDict, cast

import yaml


class PathsConfig(TypedDict, total=False):
    projects_data: str
    categories_data: str
    dates_data: str


class MapsConfig(TypedDict, total=False):
    google_api_key: str
    center: list[float]
    zoom: int


class ListingConfig(TypedDict, total=False):
    page_size: int
    map_limit: int


class GeocodingConfig(TypedDict, total=False):
    enabled: bool
    user_agent: str
    timeout: int


class StorageConfig(TypedDict, total=False):
    persist_suggestions: bool


class LoggingConfig(TypedDict, total=False):
    level: str


class AppConfig(TypedDict, total=False):
    paths: PathsConfig
    maps: MapsConfig
    listing: ListingConfig
    geocoding: GeocodingConfig
    storage: StorageConfig
    logging: LoggingConfig


DEFAULT_CENTER: tuple[float, float] = (47.6062, -122.3321)


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as file:
        data = yaml.safe_load(file)

    if not isinstance(data, dict):
        raise ValueError("The configuration file must contain a mapping at the top level.")

    return cast(AppConfig, data)


def resolve_data_paths(config: AppConfig, root: Path) -> tuple[Path, Optional[Path], Optional[Path]]:
    """Return the projects, categories and dates paths relative to ``root``."""
    if "paths" not in config:
        raise KeyError("Configuration is missing the 'paths' section.")

    paths: PathsConfig = config["paths"]
    projects_data = paths.get("projects_data")
    if projects_data is None:
        raise KeyError("Configuration 'paths' is missing the 'projects_data' entry.")

    def resolve(value: Optional[str]) -> Optional[Path]:
        if not value:
            return None
        candidate = Path(value)
        return candidate if candidate.is_absolute() else root / candidate

    projects_path = resolve(projects_data)
    assert projects_path is not None
    return projects_path, resolve(paths.get("categories_data")), resolve(paths.get("dates_data"))


def get_google_maps_api_key(config: AppConfig) -> Optional[str]:
    maps_config = cast(MapsConfig, config.get("maps", {}))
    api_key = maps_config.get("google_api_key") if isinstance(maps_config, dict) else None
    if api_key is None:
        return None

    text_key = str(api_key).strip()
    return text_key or None


def get_map_center(config: AppConfig) -> tuple[float, float]:
    """Return the configured ``(latitude, longitude)`` map centre."""
    maps_config = cast(MapsConfig, config.get("maps", {}))
    center = maps_config.get("center") if isinstance(maps_config, dict) else None
    if isinstance(center, list) and len(center) == 2:
        try:
            return float(center[0]), float(center[1])
        except (TypeError, ValueError):
            pass
    return DEFAULT_CENTER


def get_page_size(config: AppConfig) -> int:
    listing = cast(ListingConfig, config.get("listing", {}))
    return int(listing.get("page_size", 24) or 24)


__all__ = [
    "AppConfig",
    "DEFAULT_CENTER",
    "get_google_maps_api_key",
    "get_map_center",
    "get_page_size",
    "load_config",
    "resolve_data_paths",
]
