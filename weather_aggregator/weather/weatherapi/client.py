from typing import Any, Dict

import httpx

from weather_aggregator.weather.base import DailyForecastProvider, ProviderPayload

DEFAULT_BASE_URL = 'https://api.weatherapi.com/v1'
MISSING_KEY_MESSAGE = "WeatherAPI requires API key to be configured"


def process_forecast_day(data: Dict[str, Any], date: str) -> Dict[str, Any]:
    forecast_days = (data.get('forecast') or {}).get('forecastday') or []
    if not forecast_days:
        raise ValueError(f"WeatherAPI returned no forecast for {date}")

    day = forecast_days[0].get('day') or {}
    condition = day.get('condition') or {}
    return {
        'date': forecast_days[0].get('date', date),
        'max_temperature': day.get('maxtemp_c'),
        'min_temperature': day.get('mintemp_c'),
        'precipitation': day.get('totalprecip_mm'),
        'weather_code': condition.get('code'),
        'weather_description': condition.get('text'),
        'max_wind_kph': day.get('maxwind_kph'),
        'avg_humidity': day.get('avghumidity'),
        'chance_of_rain': day.get('daily_chance_of_rain')
    }


class WeatherAPIProvider(DailyForecastProvider):
    name = "weather-api"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def missing_credentials(self):
        if not self.api_key:
            return MISSING_KEY_MESSAGE
        return None

    async def fetch_day(self, client: httpx.AsyncClient, lat: float, lon: float, date: str) -> ProviderPayload:
        params = {
            'key': self.api_key,
            'q': f"{lat:.6f},{lon:.6f}",
            'date': date
        }
        params.update(self.params)

        response = await client.get(f"{self.base_url}/forecast.json", params=params)
        response.raise_for_status()
        return process_forecast_day(response.json(), date)
