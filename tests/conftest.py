import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

import pytest

from luminary.models.color import HSBColor, in_bounds
from luminary.models.light import LightEndpoint


@dataclass
class Write:
    at: float
    key: str
    color: Tuple[float, float, float]


class RecordingController:
    """LightController fake that records every write with its loop time."""

    def __init__(self, latency: float = 0.0, fail: Optional[Set[str]] = None, raise_for: Optional[Set[str]] = None):
        self.latency = latency
        self.fail = fail or set()
        self.raise_for = raise_for or set()
        self.writes: List[Write] = []
        self.in_flight: Dict[str, int] = {}
        self.max_in_flight: Dict[str, int] = {}

    async def set_color(self, endpoint_id, hue, saturation, brightness):
        self.in_flight[endpoint_id] = self.in_flight.get(endpoint_id, 0) + 1
        self.max_in_flight[endpoint_id] = max(self.max_in_flight.get(endpoint_id, 0), self.in_flight[endpoint_id])
        try:
            if self.latency:
                await asyncio.sleep(self.latency)
            if endpoint_id in self.raise_for:
                raise ConnectionError("bridge unreachable")
            self.writes.append(Write(asyncio.get_running_loop().time(), endpoint_id, (hue, saturation, brightness)))
            return endpoint_id not in self.fail
        finally:
            self.in_flight[endpoint_id] -= 1

    def keys(self) -> List[str]:
        return [write.key for write in self.writes]


class RecordingWriter:
    """Stands in for the write coordinator: resolves every write immediately."""

    def __init__(self):
        self.calls: List[Tuple[str, HSBColor]] = []

    def set_color(self, key: str, color: HSBColor) -> "asyncio.Future[bool]":
        self.calls.append((key, color))
        future = asyncio.get_running_loop().create_future()
        future.set_result(True)
        return future

    def colors_for(self, key: str) -> List[HSBColor]:
        return [color for light_id, color in self.calls if light_id == key]

    def out_of_bounds(self) -> List[Tuple[str, HSBColor]]:
        return [(key, color) for key, color in self.calls if not in_bounds(*color.as_tuple())]


class UpdateRecorder:
    def __init__(self):
        self.updates: List[Tuple[str, Optional[HSBColor]]] = []

    def __call__(self, light_id: str, color: Optional[HSBColor]) -> None:
        self.updates.append((light_id, color))


@pytest.fixture
def lights() -> List[LightEndpoint]:
    return [
        LightEndpoint(id="A", position=(10, 40)),
        LightEndpoint(id="B", position=(5, 10)),
        LightEndpoint(id="C", position=(20, 25)),
        LightEndpoint(id="D", position=(30, 0)),
        LightEndpoint(id="E", position=(15, 30)),
    ]


@pytest.fixture
def controller() -> RecordingController:
    return RecordingController()


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def recorder() -> UpdateRecorder:
    return UpdateRecorder()
