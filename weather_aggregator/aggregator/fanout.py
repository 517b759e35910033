import asyncio
import time
from typing import Dict, Optional, Sequence

from loguru import logger

from weather_aggregator.weather.base import ProviderPayload, WeatherProvider
from .errors import NoProvidersError
from .models import ForecastBundle


async def _call_provider(provider: WeatherProvider, lat: float, lon: float, metrics, log) -> Optional[ProviderPayload]:
    started = time.perf_counter()
    try:
        payload = await provider.get_5day_forecast(lat, lon)
    except Exception as e:
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.warning("Provider {} failed after {:.0f}ms: {}", provider.name, elapsed_ms, e)
        if metrics is not None:
            metrics.record_provider_call(provider.name, success=False)
        return None

    if metrics is not None:
        metrics.record_provider_call(provider.name, success=True)
    log.debug("Provider {} answered in {:.0f}ms", provider.name, (time.perf_counter() - started) * 1000)
    return payload


async def fetch_forecasts(providers: Sequence[WeatherProvider], lat: float, lon: float,
                          metrics=None, request_id: Optional[str] = None) -> ForecastBundle:
    """Query every provider concurrently and merge whatever succeeded.

    A failing provider is logged and left out of the bundle. Only when no
    provider returns data does the whole fetch fail.
    """
    log = logger.bind(component="fanout", request_id=request_id)

    payloads = await asyncio.gather(
        *(_call_provider(provider, lat, lon, metrics, log) for provider in providers)
    )

    services: Dict[str, ProviderPayload] = {}
    for provider, payload in zip(providers, payloads):
        if payload is not None:
            services[provider.name] = payload

    if not services:
        log.error("No provider returned data for {:.6f},{:.6f} ({} tried)", lat, lon, len(providers))
        raise NoProvidersError()

    return ForecastBundle(services=services)
