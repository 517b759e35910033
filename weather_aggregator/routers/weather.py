from typing import Optional

from fastapi import APIRouter, Query, Request
from loguru import logger

from weather_aggregator.aggregator import (
    ForecastBundle,
    HandlerTimeoutError,
    QueueFullError,
    WeatherAggregator
)
from weather_aggregator.responses import PrettyJSONResponse, error_response
from weather_aggregator.validation import (
    CoordinateBindError,
    CoordinateValidationError,
    validate_coordinates
)

router = APIRouter()

DAY_FIELDS = ("day1", "day2", "day3", "day4", "day5")


def transform_to_weather_response(bundle: ForecastBundle) -> dict:
    response = {}
    for service_name, payload in bundle.services.items():
        if not isinstance(payload, dict):
            continue
        response[service_name] = {day: payload[day] for day in DAY_FIELDS if day in payload}
    return response


@router.get("/weather", response_class=PrettyJSONResponse)
async def get_weather(request: Request, lat: Optional[str] = Query(None), lon: Optional[str] = Query(None)):
    aggregator: WeatherAggregator = request.app.state.aggregator
    log = logger.bind(component="weather_handler", request_id=getattr(request.state, "request_id", None))

    try:
        lat_value, lon_value = validate_coordinates(lat, lon)
    except CoordinateBindError as e:
        log.warning("Failed to bind request parameters: {}", e)
        return error_response(400, "Invalid request format", "BIND_ERROR", str(e))
    except CoordinateValidationError as e:
        log.warning("Request validation failed: {}", e)
        return error_response(
            400, "Invalid request parameters", "VALIDATION_ERROR",
            "Request parameters failed validation", validation_errors=e.errors
        )

    log.info("Processing weather request for {:.6f},{:.6f}", lat_value, lon_value)

    try:
        bundle = await aggregator.get_weather(lat_value, lon_value)
    except HandlerTimeoutError as e:
        log.warning("Request timeout ({}) after {:g}s", e.reason, e.timeout)
        return error_response(
            503, "Request timeout due to server overload", "REQUEST_TIMEOUT",
            f"Request timed out after {e.timeout:g}s", reason=e.reason
        )
    except QueueFullError:
        log.warning("Request rejected due to queue full")
        return error_response(
            503, "Server is too busy to handle the request", "QUEUE_FULL",
            "Server is currently overloaded, please retry with exponential backoff",
            headers={"Retry-After": "1"}
        )
    except Exception as e:
        log.error("Failed to get weather data: {}", e)
        return error_response(500, "Failed to fetch weather data", "AGGREGATION_ERROR", str(e))

    response = transform_to_weather_response(bundle)
    log.info("Weather request completed with {} services", len(response))
    return response
