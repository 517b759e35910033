from .loader import ConfigError, load_settings
from .settings import (
    LoggingSettings,
    ServerSettings,
    Settings,
    TelemetrySettings,
    WeatherServiceSettings,
    WeatherSettings
)

__all__ = [
    'ConfigError',
    'load_settings',
    'LoggingSettings',
    'ServerSettings',
    'Settings',
    'TelemetrySettings',
    'WeatherServiceSettings',
    'WeatherSettings'
]
