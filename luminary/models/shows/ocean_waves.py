from __future__ import annotations

import asyncio
import math
from typing import Sequence

from pydantic import Field

from luminary.models.color import HSBColor
from luminary.models.light import BoundingBox, LightEndpoint
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig

PHASE_STEP = 0.05


class OceanWavesConfig(ShowConfig):
    speed: float = Field(default=2.0, ge=0.5, le=5.0)  # seconds per wave
    wave_intensity: float = Field(default=0.7, ge=0.3, le=1.0)


def ocean_color(phase: float, wave_intensity: float) -> HSBColor:
    swell = math.sin(phase * 2.0 * math.pi)
    # Deep blue to bright teal.
    return HSBColor.clamped(180.0 + swell * 20.0, 85.0, 40.0 + swell * 40.0 * wave_intensity)


class OceanWavesShow(Show):
    id = "ocean-waves"
    name = "Ocean Waves"
    description = "Blue/teal colors undulate smoothly"
    icon = "water.waves"
    config_model = OceanWavesConfig

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return

        bbox = BoundingBox.of(lights)
        wave_phase = 0.0
        while True:
            config = self.config
            for light in lights:
                # Vertical position sets the timing offset.
                phase = wave_phase + bbox.normalize_y(light.position.y)
                self.emit(writer, on_update, light.id, ocean_color(phase, config.wave_intensity))
            wave_phase += PHASE_STEP
            await asyncio.sleep(config.speed / 20)
