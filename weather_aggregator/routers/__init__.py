from . import health, metrics, weather

__all__ = ['health', 'metrics', 'weather']
