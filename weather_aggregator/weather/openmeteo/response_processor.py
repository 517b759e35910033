from typing import Any, Dict

from .config import get_weather_code_description

FIELD_NAMES = {
    'temperature_2m_max': 'max_temperature',
    'temperature_2m_min': 'min_temperature',
    'precipitation_sum': 'precipitation',
    'weathercode': 'weather_code',
    'weather_code': 'weather_code'
}


def _first(value):
    if isinstance(value, list):
        return value[0] if value else None
    return value


def process_daily_response(data: Dict[str, Any], date: str) -> Dict[str, Any]:
    daily = data.get('daily')
    if not isinstance(daily, dict):
        raise ValueError(f"Open-Meteo response has no daily block for {date}")

    times = daily.get('time') or []
    if times and times[0] != date:
        raise ValueError(f"Open-Meteo returned {times[0]} instead of {date}")

    day = {'date': date}
    for variable, values in daily.items():
        if variable == 'time':
            continue
        day[FIELD_NAMES.get(variable, variable)] = _first(values)

    if day.get('weather_code') is not None:
        day['weather_description'] = get_weather_code_description(day['weather_code'])

    units = data.get('daily_units')
    if isinstance(units, dict):
        day['units'] = {FIELD_NAMES.get(k, k): v for k, v in units.items() if k != 'time'}

    return day
