from .client import OpenMeteoProvider
from .config import WEATHER_CODE_DESCRIPTIONS, get_weather_code_description

__all__ = ['OpenMeteoProvider', 'WEATHER_CODE_DESCRIPTIONS', 'get_weather_code_description']
