DEFAULT_BASE_URL = 'https://api.open-meteo.com/v1'

DAILY_PARAMS = [
    'temperature_2m_max', 'temperature_2m_min', 'precipitation_sum', 'weathercode'
]

DEFAULT_PARAMS = {'daily': ','.join(DAILY_PARAMS)}

WEATHER_CODE_DESCRIPTIONS = {
    0: "Clear sky", 1: "Mainly clear", 2: "Partly cloudy", 3: "Overcast",
    45: "Fog", 48: "Depositing rime fog", 51: "Light drizzle", 53: "Moderate drizzle",
    55: "Dense drizzle", 56: "Light freezing drizzle", 57: "Dense freezing drizzle",
    61: "Slight rain", 63: "Moderate rain", 65: "Heavy rain",
    66: "Light freezing rain", 67: "Heavy freezing rain", 71: "Slight snow fall",
    73: "Moderate snow fall", 75: "Heavy snow fall", 77: "Snow grains",
    80: "Slight rain showers", 81: "Moderate rain showers", 82: "Violent rain showers",
    85: "Slight snow showers", 86: "Heavy snow showers", 95: "Thunderstorm",
    96: "Thunderstorm with slight hail", 99: "Thunderstorm with heavy hail"
}


def get_day_params(lat: float, lon: float, date: str, extra: dict) -> dict:
    params = {
        'latitude': f"{lat:.6f}",
        'longitude': f"{lon:.6f}",
        'start_date': date,
        'end_date': date,
        'timezone': 'auto'
    }
    params.update(DEFAULT_PARAMS)
    params.update(extra or {})
    return params


def get_weather_code_description(code) -> str:
    return WEATHER_CODE_DESCRIPTIONS.get(code, "Unknown")
