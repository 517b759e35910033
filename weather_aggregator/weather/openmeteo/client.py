import httpx

from weather_aggregator.weather.base import DailyForecastProvider, ProviderPayload
from .config import DEFAULT_BASE_URL, get_day_params
from .response_processor import process_daily_response


class OpenMeteoProvider(DailyForecastProvider):
    name = "open-meteo"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    async def fetch_day(self, client: httpx.AsyncClient, lat: float, lon: float, date: str) -> ProviderPayload:
        response = await client.get(f"{self.base_url}/forecast", params=get_day_params(lat, lon, date, self.params))
        response.raise_for_status()
        return process_daily_response(response.json(), date)
