from .base import (
    DailyForecastProvider,
    FORECAST_DAYS,
    JsonValue,
    ProviderPayload,
    WeatherProvider,
    forecast_dates
)
from .openmeteo import OpenMeteoProvider
from .weatherapi import WeatherAPIProvider

__all__ = [
    'DailyForecastProvider',
    'FORECAST_DAYS',
    'JsonValue',
    'ProviderPayload',
    'WeatherProvider',
    'forecast_dates',
    'OpenMeteoProvider',
    'WeatherAPIProvider'
]
