from __future__ import annotations

import asyncio
from typing import Sequence

from pydantic import Field

from luminary.models.color import HSBColor
from luminary.models.light import LightEndpoint
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig

MIN_FLICKER_DELAY = 0.05
MAX_FLICKER_DELAY = 0.2


class FireEffectConfig(ShowConfig):
    intensity: float = Field(default=0.8, ge=0.3, le=1.0)  # how wild the flicker is


class FireEffectShow(Show):
    id = "fire-effect"
    name = "Fire Effect"
    description = "Flickering orange/red/yellow to simulate flames"
    icon = "flame.fill"
    config_model = FireEffectConfig

    def flame(self, intensity: float) -> HSBColor:
        rng = self.rng
        return HSBColor.clamped(
            rng.uniform(0.0, 30.0),  # red to orange
            rng.uniform(80.0, 100.0),
            rng.uniform(50.0 * intensity, 100.0 * intensity),
        )

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        while True:
            intensity = self.config.intensity
            for light in lights:
                self.emit(writer, on_update, light.id, self.flame(intensity))
            await asyncio.sleep(self.rng.uniform(MIN_FLICKER_DELAY, MAX_FLICKER_DELAY))
