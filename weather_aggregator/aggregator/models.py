import time
import uuid
import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from weather_aggregator.weather.base import ProviderPayload


class AggregatorState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


def utc_timestamp() -> str:
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class ForecastBundle:
    services: Dict[str, ProviderPayload]
    timestamp: str = field(default_factory=utc_timestamp)


@dataclass
class TaskResult:
    bundle: Optional[ForecastBundle] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.bundle is not None


@dataclass
class FetchTask:
    key: str
    lat: float
    lon: float
    request_id: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    created_at: float = field(default_factory=time.monotonic)

    def age(self) -> float:
        return time.monotonic() - self.created_at
