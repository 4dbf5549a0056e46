from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from pydantic import Field

from luminary.models.color import PURPLE, HSBColor
from luminary.models.light import LightEndpoint, Position
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig

DIM_BRIGHTNESS = 10.0


class ColorPulseConfig(ShowConfig):
    color: HSBColor = PURPLE
    speed: float = Field(default=1.0, ge=0.2, le=5.0)  # seconds per pulse


class ColorPulseShow(Show):
    id = "color-pulse"
    name = "Color Pulse"
    description = "All lights pulse in sync with adjustable rhythm"
    icon = "waveform.path.ecg"
    config_model = ColorPulseConfig

    def preview_color(self, light_id: str, position: Position, t: float) -> Optional[HSBColor]:
        return self.config.color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        while True:
            config = self.config
            bright = config.color
            dim = bright.with_brightness(DIM_BRIGHTNESS)

            self.emit_all(writer, on_update, [(light.id, bright) for light in lights])
            await asyncio.sleep(config.speed / 2)

            self.emit_all(writer, on_update, [(light.id, dim) for light in lights])
            await asyncio.sleep(config.speed / 2)
