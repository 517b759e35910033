import httpx
import pytest
import respx

from weather_aggregator.config import WeatherServiceSettings, WeatherSettings
from weather_aggregator.weather import (
    OpenMeteoProvider,
    WeatherAPIProvider,
    forecast_dates,
)
from weather_aggregator.weather.registry import build_providers, create_provider
from weather_aggregator.weather.weatherapi import MISSING_KEY_MESSAGE

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
WEATHER_API_URL = "https://api.weatherapi.com/v1/forecast.json"


def open_meteo_body(date: str) -> dict:
    return {
        "latitude": 52.52,
        "longitude": 13.41,
        "daily_units": {"time": "iso8601", "temperature_2m_max": "°C", "precipitation_sum": "mm"},
        "daily": {
            "time": [date],
            "temperature_2m_max": [21.4],
            "temperature_2m_min": [12.1],
            "precipitation_sum": [0.3],
            "weathercode": [3],
        },
    }


def weather_api_body(date: str) -> dict:
    return {
        "forecast": {
            "forecastday": [{
                "date": date,
                "day": {
                    "maxtemp_c": 19.0,
                    "mintemp_c": 9.5,
                    "totalprecip_mm": 1.2,
                    "maxwind_kph": 22.3,
                    "avghumidity": 71,
                    "daily_chance_of_rain": 40,
                    "condition": {"text": "Patchy rain possible", "code": 1063},
                },
            }]
        }
    }


@pytest.mark.asyncio
@respx.mock
async def test_open_meteo_requests_each_day():
    def respond(request):
        params = request.url.params
        assert params["latitude"] == "52.520000"
        assert params["longitude"] == "13.410000"
        assert params["timezone"] == "auto"
        assert params["start_date"] == params["end_date"]
        return httpx.Response(200, json=open_meteo_body(params["start_date"]))

    route = respx.get(OPEN_METEO_URL).mock(side_effect=respond)
    provider = OpenMeteoProvider(timeout=5)

    forecast = await provider.get_5day_forecast(52.52, 13.41)

    assert route.call_count == 5
    dates = forecast_dates()
    assert list(forecast) == ["day1", "day2", "day3", "day4", "day5"]
    assert forecast["day1"]["date"] == dates[0]
    assert forecast["day5"]["date"] == dates[4]
    assert forecast["day1"]["max_temperature"] == 21.4
    assert forecast["day1"]["min_temperature"] == 12.1
    assert forecast["day1"]["weather_code"] == 3
    assert forecast["day1"]["weather_description"] == "Overcast"
    assert forecast["day1"]["units"]["max_temperature"] == "°C"


@pytest.mark.asyncio
@respx.mock
async def test_open_meteo_failed_day_is_kept_in_its_slot():
    dates = forecast_dates()

    def respond(request):
        date = request.url.params["start_date"]
        if date == dates[2]:
            return httpx.Response(500)
        return httpx.Response(200, json=open_meteo_body(date))

    respx.get(OPEN_METEO_URL).mock(side_effect=respond)

    forecast = await OpenMeteoProvider(timeout=5).get_5day_forecast(52.52, 13.41)

    assert forecast["day3"] == {"error": "API request failed with status: 500", "date": dates[2]}
    assert "error" not in forecast["day2"]


@pytest.mark.asyncio
@respx.mock
async def test_open_meteo_all_days_failing_keeps_error_slots():
    respx.get(OPEN_METEO_URL).mock(return_value=httpx.Response(503))

    forecast = await OpenMeteoProvider(timeout=5).get_5day_forecast(52.52, 13.41)

    assert forecast == {
        f"day{i + 1}": {"error": "API request failed with status: 503", "date": date}
        for i, date in enumerate(forecast_dates())
    }


@pytest.mark.asyncio
@respx.mock
async def test_open_meteo_params_without_daily_keep_default_variables():
    route = respx.get(OPEN_METEO_URL).mock(
        side_effect=lambda request: httpx.Response(200, json=open_meteo_body(request.url.params["start_date"]))
    )
    provider = OpenMeteoProvider(params={"temperature_unit": "fahrenheit"}, timeout=5)

    forecast = await provider.get_5day_forecast(1.0, 2.0)

    request = route.calls.last.request
    assert request.url.params["daily"] == "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode"
    assert request.url.params["temperature_unit"] == "fahrenheit"
    assert "error" not in forecast["day1"]


@pytest.mark.asyncio
@respx.mock
async def test_open_meteo_passes_configured_params():
    route = respx.get(OPEN_METEO_URL).mock(
        side_effect=lambda request: httpx.Response(200, json=open_meteo_body(request.url.params["start_date"]))
    )
    provider = OpenMeteoProvider(params={"daily": "temperature_2m_max", "models": "icon_seamless"}, timeout=5)

    await provider.get_5day_forecast(1.0, 2.0)

    request = route.calls.last.request
    assert request.url.params["daily"] == "temperature_2m_max"
    assert request.url.params["models"] == "icon_seamless"


@pytest.mark.asyncio
@respx.mock
async def test_weather_api_shapes_forecast_day():
    route = respx.get(WEATHER_API_URL).mock(
        side_effect=lambda request: httpx.Response(200, json=weather_api_body(request.url.params["date"]))
    )
    provider = WeatherAPIProvider(api_key="secret", timeout=5)

    forecast = await provider.get_5day_forecast(40.7128, -74.006)

    assert route.call_count == 5
    request = route.calls.last.request
    assert request.url.params["key"] == "secret"
    assert request.url.params["q"] == "40.712800,-74.006000"
    day = forecast["day1"]
    assert day["max_temperature"] == 19.0
    assert day["weather_description"] == "Patchy rain possible"
    assert day["chance_of_rain"] == 40


@pytest.mark.asyncio
async def test_weather_api_without_key_does_no_io():
    with respx.mock() as router:
        forecast = await WeatherAPIProvider(timeout=5).get_5day_forecast(1.0, 2.0)

    assert forecast == {"error": MISSING_KEY_MESSAGE}
    assert router.calls.call_count == 0


@pytest.mark.asyncio
@respx.mock
async def test_weather_api_empty_forecast_marks_day_failed():
    respx.get(WEATHER_API_URL).mock(return_value=httpx.Response(200, json={"forecast": {"forecastday": []}}))

    forecast = await WeatherAPIProvider(api_key="k", timeout=5).get_5day_forecast(1.0, 2.0)

    dates = forecast_dates()
    assert forecast["day1"] == {"error": f"WeatherAPI returned no forecast for {dates[0]}", "date": dates[0]}
    assert all("error" in forecast[f"day{i}"] for i in range(1, 6))


def test_build_providers_uses_enabled_services_only():
    settings = WeatherSettings(
        timeout=3,
        services={
            "meteo-eu": {"type": "open-meteo", "base_url": "https://meteo.example.com/v1/"},
            "wapi": {"type": "weather-api", "enabled": False, "base_url": "https://wapi.example.com/v1"},
        },
    )

    providers = build_providers(settings)

    assert [p.name for p in providers] == ["meteo-eu"]
    assert isinstance(providers[0], OpenMeteoProvider)
    assert providers[0].base_url == "https://meteo.example.com/v1"
    assert providers[0].timeout == 3


def test_create_provider_rejects_unknown_type():
    service = WeatherServiceSettings.model_construct(type="darksky", base_url="https://x", params={})

    with pytest.raises(ValueError):
        create_provider("darksky", service, timeout=1)

