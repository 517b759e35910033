import time

from fastapi import FastAPI
from loguru import logger

from weather_aggregator import __version__
from weather_aggregator.aggregator import DEFAULT_SHUTDOWN_TIMEOUT

log = logger.bind(component="lifecycle")


def mark_shutdown_started(app: FastAPI, timeout: float = DEFAULT_SHUTDOWN_TIMEOUT):
    """Start the shutdown budget shared by the HTTP server and the aggregator."""
    if getattr(app.state, "shutdown_deadline", None) is None:
        app.state.shutdown_deadline = time.monotonic() + timeout


def remaining_shutdown_budget(app: FastAPI, timeout: float = DEFAULT_SHUTDOWN_TIMEOUT) -> float:
    deadline = getattr(app.state, "shutdown_deadline", None)
    if deadline is None:
        return timeout
    return max(deadline - time.monotonic(), 0.0)


async def startup_handler(app: FastAPI):
    settings = app.state.settings
    log.info("Starting weather-aggregator v{} ({})", __version__, settings.environment)

    await app.state.aggregator.start()

    if settings.telemetry.enabled:
        log.info("Telemetry enabled, metrics exposed at /metrics (collector endpoint {})", settings.telemetry.endpoint)

    log.info("Server ready on {}:{}", settings.server.host, settings.server.port)


async def shutdown_handler(app: FastAPI, timeout: float = DEFAULT_SHUTDOWN_TIMEOUT):
    budget = remaining_shutdown_budget(app, timeout)
    log.info("Shutting down weather-aggregator, {:.1f}s left to drain", budget)

    drained = await app.state.aggregator.stop(timeout=budget)
    if not drained:
        log.error("Aggregator did not drain within the {:g}s shutdown budget", timeout)

    log.info("Shutdown complete")
