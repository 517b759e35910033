from fastapi import FastAPI

from weather_aggregator.config import load_settings
from weather_aggregator.core import configure_logging, create_app


def build_app() -> FastAPI:
    """Application factory for ``uvicorn --factory weather_aggregator.main:build_app``."""
    settings = load_settings()
    configure_logging(settings.logging)
    return create_app(settings)
