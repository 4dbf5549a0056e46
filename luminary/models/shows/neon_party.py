from __future__ import annotations

import asyncio
import math
from enum import Enum
from typing import Dict, List, Sequence

from pydantic import Field

from luminary.models.color import HSBColor, clamp
from luminary.models.light import LightEndpoint, normalized_index
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle

TICK = 0.12


def _hsb(hue: float, saturation: float, brightness: float) -> HSBColor:
    return HSBColor(hue=hue, saturation=saturation, brightness=brightness)


class Palette(str, Enum):
    NEON = "neon"
    TROPICAL = "tropical"
    CYBER = "cyber"

    @property
    def label(self) -> str:
        return _PALETTE_INFO[self]["label"]

    @property
    def icon(self) -> str:
        return _PALETTE_INFO[self]["icon"]

    @property
    def tagline(self) -> str:
        return _PALETTE_INFO[self]["tagline"]

    @property
    def colors(self) -> List[HSBColor]:
        return PALETTES[self]


_PALETTE_INFO: Dict[Palette, Dict[str, str]] = {
    Palette.NEON: {"label": "Neon Glow", "icon": "bolt.horizontal.circle", "tagline": "Radiant magentas and laser blues"},
    Palette.TROPICAL: {"label": "Tropical Night", "icon": "sun.max", "tagline": "Warm sunset paired with lagoon greens"},
    Palette.CYBER: {"label": "Cyber Pulse", "icon": "globe", "tagline": "Holographic blues with neon violets"},
}

PALETTES: Dict[Palette, List[HSBColor]] = {
    Palette.NEON: [_hsb(300, 90, 90), _hsb(200, 100, 85), _hsb(130, 90, 80), _hsb(50, 100, 95)],
    Palette.TROPICAL: [_hsb(20, 90, 95), _hsb(45, 100, 90), _hsb(90, 80, 85), _hsb(170, 80, 90)],
    Palette.CYBER: [_hsb(190, 100, 95), _hsb(330, 90, 90), _hsb(130, 80, 85), _hsb(280, 100, 88)],
}


class NeonPartyConfig(ShowConfig):
    palette: Palette = Palette.NEON
    speed: float = Field(default=0.35, ge=0.1, le=0.8)  # palette rotations per second
    sparkle_chance: float = Field(default=0.25, ge=0.0, le=0.6)
    base_brightness: float = Field(default=70.0, ge=40.0, le=90.0)


class NeonPartyShow(Show):
    id = "neon-party"
    name = "Neon Party"
    description = "Electric gradients, sparkles, and rotating neon washes"
    icon = "sparkles"
    config_model = NeonPartyConfig

    def light_color(self, config: NeonPartyConfig, phase: float, index: int, count: int) -> HSBColor:
        colors = config.palette.colors
        color = colors[(int(phase * len(colors)) + index) % len(colors)]

        wave = (math.sin((phase + normalized_index(index, count)) * 2.0 * math.pi) + 1.0) / 2.0
        brightness = config.base_brightness + (100.0 - config.base_brightness) * wave
        color = color.with_brightness(clamp(brightness, 20.0, 100.0))

        if self.rng.random() < config.sparkle_chance:
            color = HSBColor.clamped(
                color.hue,
                color.saturation + self.rng.uniform(0.0, 10.0),
                color.brightness * self.rng.uniform(0.8, 1.0) + 10.0,
            )
        return color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return

        phase = 0.0
        count = len(lights)
        while True:
            config = self.config
            await settle(
                self.emit_all(
                    writer,
                    on_update,
                    [(light.id, self.light_color(config, phase, index, count)) for index, light in enumerate(lights)],
                )
            )

            phase += config.speed * TICK
            if phase > 1.0:
                phase -= 1.0
            await asyncio.sleep(TICK)
