"""
Shared fixtures for the weather aggregator test suite.

Providers are replaced by in-process stubs that count invocations and can
be slowed down, failed, or held on an event until the test releases them.
"""

import asyncio

import pytest
import pytest_asyncio

from weather_aggregator.aggregator import WeatherAggregator
from weather_aggregator.config import WeatherSettings


def sample_payload(name: str) -> dict:
    return {
        f"day{i}": {"date": f"2024-06-0{i}", "max_temperature": 20.0 + i, "source": name}
        for i in range(1, 6)
    }


class StubProvider:
    def __init__(self, name: str, delay: float = 0.0, fail: bool = False, payload: dict = None,
                 gate: asyncio.Event = None):
        self.name = name
        self.delay = delay
        self.fail = fail
        self.payload = payload
        self.gate = gate
        self.calls = 0
        self.coordinates = []

    async def get_5day_forecast(self, lat: float, lon: float) -> dict:
        self.calls += 1
        self.coordinates.append((lat, lon))
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError(f"{self.name} unavailable")
        return self.payload if self.payload is not None else sample_payload(self.name)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def build_weather_settings(**overrides) -> WeatherSettings:
    values = {
        "cache_ttl": 300,
        "workers": 2,
        "queue_size": 10,
        "handler_timeout": 2,
        "timeout": 2,
        "services": {},
    }
    values.update(overrides)
    return WeatherSettings(**values)


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def weather_settings():
    return build_weather_settings


@pytest_asyncio.fixture
async def start_aggregator():
    started = []

    async def _start(providers, clock=None, **overrides):
        kwargs = {"providers": providers}
        if clock is not None:
            kwargs["clock"] = clock
        aggregator = WeatherAggregator(build_weather_settings(**overrides), **kwargs)
        await aggregator.start()
        started.append(aggregator)
        return aggregator

    yield _start

    for aggregator in started:
        if aggregator.is_running:
            await aggregator.stop(timeout=1)
