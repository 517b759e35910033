from .client import WeatherAPIProvider, MISSING_KEY_MESSAGE

__all__ = ['WeatherAPIProvider', 'MISSING_KEY_MESSAGE']
