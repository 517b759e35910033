import time
import uuid

from fastapi import Request
from loguru import logger

from weather_aggregator.context import REQUEST_ID_HEADER, request_id_var

access_log = logger.bind(component="http")


async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    token = request_id_var.set(request_id)
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


async def observability_middleware(request: Request, call_next):
    metrics = request.app.state.metrics
    monitor = request.app.state.system_monitor
    start_time = time.perf_counter()

    metrics.requests_in_flight.inc()
    try:
        response = await call_next(request)
    finally:
        metrics.requests_in_flight.dec()

    process_time = time.perf_counter() - start_time
    status = response.status_code
    metrics.record_request(request.method, _route_template(request), status, process_time)
    monitor.record_request(process_time, status)
    response.headers["X-Process-Time"] = f"{process_time:.4f}"

    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"

    log = access_log.bind(
        request_id=getattr(request.state, "request_id", None),
        method=request.method,
        path=path,
        status=status,
        latency_ms=round(process_time * 1000, 2),
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )
    if status >= 500:
        log.error("HTTP request {} {} -> {}", request.method, path, status)
    elif status >= 400:
        log.warning("HTTP request {} {} -> {}", request.method, path, status)
    else:
        log.info("HTTP request {} {} -> {}", request.method, path, status)
    return response
