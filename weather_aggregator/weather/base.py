import asyncio
import datetime
from typing import Dict, List, Optional, Protocol, Union

import httpx
from loguru import logger

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]
ProviderPayload = Dict[str, JsonValue]

FORECAST_DAYS = 5


class WeatherProvider(Protocol):
    name: str

    async def get_5day_forecast(self, lat: float, lon: float) -> ProviderPayload:
        """Return ``day1``..``day5`` slots for the given coordinates."""


def forecast_dates(today: Optional[datetime.date] = None) -> List[str]:
    today = today or datetime.date.today()
    return [(today + datetime.timedelta(days=offset)).isoformat() for offset in range(FORECAST_DAYS)]


class DailyForecastProvider:
    """Base for providers that are queried one calendar day at a time.

    The five days are fetched concurrently over one ``httpx.AsyncClient``.
    A failed day is reported in its slot as ``{"error": ..., "date": ...}``
    instead of failing the whole call, even when every day fails.
    """

    name = "provider"

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 10.0,
                 params: Optional[Dict[str, str]] = None, name: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key or None
        self.timeout = timeout
        self.params = dict(params or {})
        if name:
            self.name = name
        self._transport = transport
        self.log = logger.bind(component="provider", provider=self.name)

    def missing_credentials(self) -> Optional[str]:
        return None

    async def fetch_day(self, client: httpx.AsyncClient, lat: float, lon: float, date: str) -> ProviderPayload:
        raise NotImplementedError

    async def get_5day_forecast(self, lat: float, lon: float) -> ProviderPayload:
        missing = self.missing_credentials()
        if missing:
            self.log.warning("{} called without credentials for {:.6f},{:.6f}", self.name, lat, lon)
            return {"error": missing}

        dates = forecast_dates()
        timeout_config = httpx.Timeout(self.timeout)

        async with httpx.AsyncClient(timeout=timeout_config, transport=self._transport) as client:
            days = await asyncio.gather(*(self._fetch_day_slot(client, lat, lon, date) for date in dates))

        results = {f"day{i + 1}": day for i, day in enumerate(days)}
        failed = sum(1 for day in days if isinstance(day, dict) and "error" in day)
        if failed == len(days):
            self.log.warning("{} returned no usable day for {:.6f},{:.6f}: {}", self.name, lat, lon, days[0]["error"])
        else:
            self.log.info("{} forecast completed for {:.6f},{:.6f}: {} days, {} failed",
                          self.name, lat, lon, len(days), failed)
        return results

    async def _fetch_day_slot(self, client: httpx.AsyncClient, lat: float, lon: float, date: str) -> ProviderPayload:
        try:
            return await asyncio.wait_for(self.fetch_day(client, lat, lon, date), timeout=self.timeout)
        except asyncio.TimeoutError:
            error = f"request timed out after {self.timeout:g}s"
        except httpx.HTTPStatusError as e:
            error = f"API request failed with status: {e.response.status_code}"
        except Exception as e:
            error = str(e) or e.__class__.__name__

        self.log.warning("Failed to fetch {} forecast for {}: {}", self.name, date, error)
        return {"error": error, "date": date}
