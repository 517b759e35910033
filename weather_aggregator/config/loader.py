import os
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml
from loguru import logger
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .settings import Settings

ENV_PREFIX = "WDP_"
DEFAULT_CONFIG_FILE = Path("config.yaml")


class ConfigError(Exception):
    pass


class LaunchSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")

    config_path: Optional[Path] = None


def deep_merge(source: dict, destination: dict) -> dict:
    for key, value in source.items():
        if isinstance(value, dict) and key in destination and isinstance(destination[key], dict):
            destination[key] = deep_merge(value, destination[key])
        else:
            destination[key] = value
    return destination


def _iter_leaves(data: Mapping[str, Any], prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], Any]]:
    for key, value in data.items():
        path = prefix + (str(key),)
        if isinstance(value, dict) and value:
            yield from _iter_leaves(value, path)
        else:
            yield path, value


def env_names(path: Tuple[str, ...]) -> Tuple[str, ...]:
    """``weather.services.weather-api.api_key`` -> WDP_WEATHER_SERVICES_WEATHER-API_API_KEY (and a ``_`` variant)."""
    name = ENV_PREFIX + "_".join(path).upper()
    alternative = name.replace("-", "_")
    return (name,) if alternative == name else (name, alternative)


def apply_env_overrides(data: dict, environ: Mapping[str, str]) -> dict:
    overrides = {}
    for path, _ in list(_iter_leaves(data)):
        for env_name in env_names(path):
            if env_name in environ:
                overrides[path] = environ[env_name]
                break

    for path, value in overrides.items():
        node = data
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = value
        logger.debug("Config override from environment: {}", ".".join(path))
    return data


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"error reading config file: {path} not found")

    try:
        raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"error reading config file {path}: {exc}") from exc

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigError("config must be a YAML mapping at the top level")
    return raw_config


def resolve_config_path(path: Union[str, Path, None] = None) -> Optional[Path]:
    if path:
        return Path(path)

    launch = LaunchSettings()
    if launch.config_path is not None:
        return launch.config_path

    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def load_settings(path: Union[str, Path, None] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Defaults, then the YAML file, then ``WDP_*`` environment variables."""
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = Settings().model_dump()

    config_path = resolve_config_path(path)
    if config_path is not None:
        deep_merge(_read_yaml(config_path), data)

    apply_env_overrides(data, environ)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"error unmarshaling config: {exc}") from exc
