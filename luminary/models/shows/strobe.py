from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from pydantic import Field

from luminary.models.color import WHITE, HSBColor
from luminary.models.light import LightEndpoint, Position
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle


class StrobeConfig(ShowConfig):
    color: HSBColor = WHITE
    speed: float = Field(default=0.2, ge=0.05, le=1.0)  # seconds between flashes
    intensity: float = Field(default=100.0, ge=10.0, le=100.0)  # on brightness


class StrobeShow(Show):
    """Short flash at ``intensity`` for speed/4, then dark for ``speed``."""

    id = "strobe"
    name = "Strobe"
    description = "Configurable strobe effect with color and speed"
    icon = "bolt.fill"
    config_model = StrobeConfig

    def preview_color(self, light_id: str, position: Position, t: float) -> Optional[HSBColor]:
        return self.config.color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        while True:
            config = self.config
            on_color = config.color.with_brightness(config.intensity)
            off_color = config.color.with_brightness(0.0)

            await settle(self.emit_all(writer, on_update, [(light.id, on_color) for light in lights]))
            await asyncio.sleep(config.speed / 4)

            await settle(self.emit_all(writer, on_update, [(light.id, off_color) for light in lights]))
            await asyncio.sleep(config.speed)
