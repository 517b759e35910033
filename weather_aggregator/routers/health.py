import datetime

from fastapi import APIRouter, Request

from weather_aggregator.responses import PrettyJSONResponse

router = APIRouter(prefix="/health")


def _base_status(request: Request) -> dict:
    return {
        "status": "ok",
        "uptime": request.app.state.system_monitor.uptime()
    }


@router.get("", response_class=PrettyJSONResponse)
async def health(request: Request):
    aggregator = request.app.state.aggregator
    return {
        **_base_status(request),
        "timestamp": datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "aggregator": aggregator.get_stats(),
        "system": request.app.state.system_monitor.get_system_health()
    }


@router.get("/live", response_class=PrettyJSONResponse)
async def liveness(request: Request):
    return _base_status(request)


@router.get("/ready", response_class=PrettyJSONResponse)
async def readiness(request: Request):
    aggregator = request.app.state.aggregator
    if not aggregator.is_running:
        return PrettyJSONResponse(
            status_code=503,
            content={"status": "unavailable", "aggregator_state": aggregator.state.value}
        )
    return {**_base_status(request), "aggregator_state": aggregator.state.value}
