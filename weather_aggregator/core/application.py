from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from loguru import logger

from weather_aggregator import __version__
from weather_aggregator.aggregator import WeatherAggregator
from weather_aggregator.config import Settings
from weather_aggregator.middleware import observability_middleware, request_id_middleware
from weather_aggregator.monitoring import SystemMonitor
from weather_aggregator.responses import PrettyJSONResponse
from weather_aggregator.routers import health, metrics, weather
from .startup import shutdown_handler, startup_handler


async def generic_exception_handler(request: Request, exc: Exception):
    logger.bind(
        component="app",
        request_id=getattr(request.state, "request_id", None)
    ).opt(exception=exc).error("Unhandled exception for request: {} {}", request.method, request.url)

    return PrettyJSONResponse(
        status_code=500,
        content={"error": "internal_error", "detail": "An unexpected server error occurred."},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_handler(app)
    try:
        yield
    finally:
        await shutdown_handler(app)


def create_app(settings: Optional[Settings] = None, aggregator: Optional[WeatherAggregator] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        default_response_class=PrettyJSONResponse,
        debug=False,
        title="Weather Aggregator",
        version=__version__,
        description="Cached, request-coalescing weather forecast aggregation",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.aggregator = aggregator or WeatherAggregator(settings.weather)
    app.state.metrics = app.state.aggregator.metrics
    app.state.system_monitor = SystemMonitor()
    app.state.shutdown_deadline = None

    app.add_exception_handler(Exception, generic_exception_handler)

    # request_id wraps observability so access logs carry the id
    app.middleware("http")(observability_middleware)
    app.middleware("http")(request_id_middleware)

    _setup_routers(app, settings)

    return app


def _setup_routers(app: FastAPI, settings: Settings):
    app.include_router(weather.router)
    app.include_router(health.router)
    if settings.telemetry.enabled:
        app.include_router(metrics.router)
