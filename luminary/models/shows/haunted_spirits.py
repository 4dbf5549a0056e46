from __future__ import annotations

import asyncio
import math
import time
from typing import Sequence

from pydantic import Field

from luminary.models.color import ORANGE, PURPLE, HSBColor, blend
from luminary.models.light import LightEndpoint, normalized_index
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle

TICK = 0.15
MIN_PULSE_INTERVAL = 0.5
SPIRIT_STROBE = HSBColor(hue=40, saturation=30, brightness=100)


class HauntedSpiritsConfig(ShowConfig):
    base_color: HSBColor = PURPLE
    accent_color: HSBColor = ORANGE
    flicker_intensity: float = Field(default=0.6, ge=0.0, le=1.0)
    pulse_interval: float = Field(default=3.0, ge=1.0, le=10.0)  # seconds
    strobe_chance: float = Field(default=0.2, ge=0.0, le=0.5)


class HauntedSpiritsShow(Show):
    id = "haunted-spirits"
    name = "Haunted Spirits"
    description = "Eerie pulses, ghostly flickers, and spectral strobes"
    icon = "moon.stars"
    config_model = HauntedSpiritsConfig

    def light_color(
        self,
        config: HauntedSpiritsConfig,
        elapsed: float,
        pulse: bool,
        index: int,
        count: int,
    ) -> HSBColor:
        wave = (math.sin((elapsed + normalized_index(index, count)) * math.pi * 2.0) + 1.0) / 2.0
        color = blend(config.base_color, config.accent_color, wave)

        if self.rng.random() < config.flicker_intensity:
            color = color.with_brightness(color.brightness * self.rng.uniform(0.55, 1.0))

        if pulse and index % 2 == 0:
            return HSBColor(hue=config.accent_color.hue, saturation=100, brightness=100)
        if self.rng.random() < config.strobe_chance and index % 5 == 0:
            return SPIRIT_STROBE
        return color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return

        elapsed = 0.0
        last_pulse = time.monotonic()
        count = len(lights)
        while True:
            config = self.config
            now = time.monotonic()
            pulse = now - last_pulse >= max(MIN_PULSE_INTERVAL, config.pulse_interval)
            if pulse:
                last_pulse = now

            await settle(
                self.emit_all(
                    writer,
                    on_update,
                    [
                        (light.id, self.light_color(config, elapsed, pulse, index, count))
                        for index, light in enumerate(lights)
                    ],
                )
            )
            await asyncio.sleep(TICK)
            elapsed += TICK
