from typing import Dict, List, Type

from loguru import logger

from weather_aggregator.config.settings import WeatherServiceSettings, WeatherSettings
from .base import DailyForecastProvider
from .openmeteo import OpenMeteoProvider
from .weatherapi import WeatherAPIProvider

PROVIDER_TYPES: Dict[str, Type[DailyForecastProvider]] = {
    'open-meteo': OpenMeteoProvider,
    'weather-api': WeatherAPIProvider
}


def create_provider(name: str, service: WeatherServiceSettings, timeout: float) -> DailyForecastProvider:
    provider_cls = PROVIDER_TYPES.get(service.type)
    if provider_cls is None:
        raise ValueError(f"Unknown weather service type '{service.type}' for '{name}'")

    return provider_cls(
        base_url=service.base_url,
        api_key=service.api_key,
        timeout=timeout,
        params=service.params,
        name=name
    )


def build_providers(settings: WeatherSettings) -> List[DailyForecastProvider]:
    providers = []
    for name, service in settings.get_enabled_services().items():
        providers.append(create_provider(name, service, settings.timeout))
        logger.debug("Registered weather provider {} ({})", name, service.type)
    return providers
