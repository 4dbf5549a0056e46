from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import BaseModel, Field, field_validator


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class LightEndpoint(BaseModel):
    """An addressable light and its canvas position for the current session."""

    id: str
    position: Position = Field(default_factory=Position)

    @field_validator("position", mode="before")
    @classmethod
    def _position_from_pair(cls, value: Any) -> Any:
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return {"x": value[0], "y": value[1]}
        return value


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @staticmethod
    def of(lights: Sequence[LightEndpoint]) -> "BoundingBox":
        if not lights:
            return BoundingBox(0.0, 1.0, 0.0, 1.0)
        xs = [light.position.x for light in lights]
        ys = [light.position.y for light in lights]
        return BoundingBox(min(xs), max(xs), min(ys), max(ys))

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    @property
    def max_radius(self) -> float:
        return math.hypot(self.max_x - self.min_x, self.max_y - self.min_y) / 2.0

    # A degenerate axis (all lights on one line) normalizes to 0.
    def normalize_x(self, x: float) -> float:
        span = self.max_x - self.min_x
        return (x - self.min_x) / span if span > 0 else 0.0

    def normalize_y(self, y: float) -> float:
        span = self.max_y - self.min_y
        return (y - self.min_y) / span if span > 0 else 0.0

    def normalize_radial(self, x: float, y: float) -> float:
        radius = self.max_radius
        if radius <= 0:
            return 0.0
        cx, cy = self.center
        return math.hypot(x - cx, y - cy) / radius


def normalized_index(index: int, count: int) -> float:
    return float(index) / float(max(1, count - 1))
