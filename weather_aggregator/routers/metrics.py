from fastapi import APIRouter, Request, Response

from weather_aggregator.monitoring import CONTENT_TYPE_LATEST

router = APIRouter()


@router.get("/metrics")
async def metrics(request: Request):
    registry_output = request.app.state.metrics.render()
    return Response(content=registry_output, media_type=CONTENT_TYPE_LATEST)
