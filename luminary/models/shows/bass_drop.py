from __future__ import annotations

import asyncio
import math
from typing import Sequence

from pydantic import Field

from luminary.models.color import BLUE, PINK, HSBColor
from luminary.models.light import LightEndpoint, normalized_index
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle

TICK = 0.1
FLASH_BRIGHTNESS = 100.0
MIN_BUILD_BRIGHTNESS = 15.0


class BassDropConfig(ShowConfig):
    primary: HSBColor = BLUE
    accent: HSBColor = PINK
    drop_interval: float = Field(default=6.0, ge=3.0, le=12.0)  # seconds between drops
    build_up_duration: float = Field(default=3.0, ge=1.0, le=6.0)
    flash_duration: float = Field(default=0.8, ge=0.2, le=1.5)
    shimmer_amount: float = Field(default=0.3, ge=0.0, le=0.8)


class BassDropShow(Show):
    """Shimmering build-up on the primary color, then an accent flash that fades out.

    Time advances by one tick per loop. When ``drop_interval`` is reached the
    drop clock resets and the flash runs for ``flash_duration``.
    """

    id = "bass-drop"
    name = "Bass Drop"
    description = "Build-up pulses and explosive drops for dance floors"
    icon = "speaker.wave.3"
    config_model = BassDropConfig

    @staticmethod
    def light_color(
        config: BassDropConfig,
        since_drop: float,
        flash_left: float,
        index: int,
        count: int,
    ) -> HSBColor:
        if flash_left > 0:
            fade = max(0.0, flash_left / config.flash_duration)
            return HSBColor.clamped(config.accent.hue, config.accent.saturation + 10.0, FLASH_BRIGHTNESS * fade)

        progress = min(1.0, since_drop / config.build_up_duration)
        base_wave = (math.sin(progress * math.pi * 2.0) + 1.0) / 2.0
        shimmer = (math.sin((since_drop + normalized_index(index, count)) * 12.0) + 1.0) / 2.0
        boost = base_wave * 40.0 + shimmer * config.shimmer_amount * 30.0
        brightness = max(MIN_BUILD_BRIGHTNESS, config.primary.brightness + boost)

        if index % 3 == 0:
            return HSBColor.clamped(config.accent.hue, config.accent.saturation, brightness + 10.0)
        return HSBColor.clamped(config.primary.hue, config.primary.saturation, brightness)

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return

        since_drop = 0.0
        flash_left = 0.0
        count = len(lights)
        while True:
            config = self.config
            since_drop += TICK
            flash_left -= TICK
            if since_drop >= config.drop_interval:
                since_drop = 0.0
                flash_left = config.flash_duration

            await settle(
                self.emit_all(
                    writer,
                    on_update,
                    [
                        (light.id, self.light_color(config, since_drop, flash_left, index, count))
                        for index, light in enumerate(lights)
                    ],
                )
            )
            await asyncio.sleep(TICK)
