from __future__ import annotations

import asyncio
from enum import Enum
from typing import Sequence

from pydantic import Field

from luminary.models.color import BLUE, RED, HSBColor, lerp
from luminary.models.light import BoundingBox, LightEndpoint
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig

PHASE_STEPS = 20  # phase 0, 0.05, ... 0.95


class GradientDirection(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    RADIAL = "radial"

    @property
    def icon(self) -> str:
        return {
            GradientDirection.HORIZONTAL: "arrow.left.and.right",
            GradientDirection.VERTICAL: "arrow.up.and.down",
            GradientDirection.RADIAL: "circle.circle",
        }[self]


class GradientFlowConfig(ShowConfig):
    start_color: HSBColor = BLUE
    end_color: HSBColor = RED
    speed: float = Field(default=2.0, ge=0.5, le=5.0)  # seconds per full cycle
    direction: GradientDirection = GradientDirection.HORIZONTAL


class GradientFlowShow(Show):
    """Scroll a start-to-end gradient across the layout.

    A light's coordinate is normalized within the bounding box of the
    targets (or taken as distance from its center for ``radial``), offset by
    the phase and wrapped into [0, 1) to pick the blend factor.
    """

    id = "gradient-flow"
    name = "Gradient Flow"
    description = "Smooth color gradient flows across spatial layout"
    icon = "chart.line.uptrend.xyaxis"
    config_model = GradientFlowConfig

    @staticmethod
    def coordinate(bbox: BoundingBox, light: LightEndpoint, direction: GradientDirection) -> float:
        x, y = light.position.x, light.position.y
        if direction is GradientDirection.VERTICAL:
            return bbox.normalize_y(y)
        if direction is GradientDirection.RADIAL:
            return bbox.normalize_radial(x, y)
        return bbox.normalize_x(x)

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return

        bbox = BoundingBox.of(lights)
        while True:
            for step in range(PHASE_STEPS):
                phase = step / PHASE_STEPS
                config = self.config
                for light in lights:
                    t = (self.coordinate(bbox, light, config.direction) + phase) % 1.0
                    self.emit(writer, on_update, light.id, lerp(config.start_color, config.end_color, t))
                await asyncio.sleep(config.speed / PHASE_STEPS)
