from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum
from typing import Optional, Sequence

from pydantic import Field

from luminary.models.color import HSBColor, wrap_hue
from luminary.models.light import LightEndpoint, normalized_index
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig
from luminary.services.audio import LevelSource

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class Theme(str, Enum):
    SPECTRUM = "spectrum"
    PULSE = "pulse"
    WAVE = "wave"
    ENERGY = "energy"

    @property
    def description(self) -> str:
        return {
            Theme.SPECTRUM: "Rainbow colors based on frequency",
            Theme.PULSE: "Brightness pulses with volume",
            Theme.WAVE: "Color waves flow with rhythm",
            Theme.ENERGY: "High energy colors for loud sounds",
        }[self]

    @property
    def icon(self) -> str:
        return {
            Theme.SPECTRUM: "rainbow",
            Theme.PULSE: "waveform.path.ecg",
            Theme.WAVE: "water.waves",
            Theme.ENERGY: "bolt.fill",
        }[self]


class SoundReactiveConfig(ShowConfig):
    theme: Theme = Theme.SPECTRUM
    sensitivity: float = Field(default=0.5, ge=0.1, le=1.0)
    smoothing: float = Field(default=0.7, ge=0.0, le=0.95)


class SoundReactiveShow(Show):
    """Map a smoothed amplitude/frequency signal onto the lights.

    The show never captures audio itself; it polls a ``LevelSource``. With no
    source, or while the source has nothing to report, it idles on the same
    cadence.
    """

    id = "sound-reactive"
    name = "Sound Reactive"
    description = "Lights respond to music and sound from your microphone"
    icon = "waveform"
    config_model = SoundReactiveConfig

    def __init__(
        self,
        config: Optional[ShowConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        source: Optional[LevelSource] = None,
    ):
        super().__init__(config, rng=rng)
        self.source = source

    def theme_color(self, theme: Theme, amplitude: float, frequency: float, index: int, count: int) -> HSBColor:
        if theme is Theme.SPECTRUM:
            # Low frequency red through high frequency blue.
            return HSBColor.clamped(frequency * 300.0, 90.0, max(20.0, amplitude * 100.0))
        if theme is Theme.PULSE:
            return HSBColor.clamped(280.0, 80.0, max(10.0, amplitude * 100.0))
        if theme is Theme.WAVE:
            hue = wrap_hue((normalized_index(index, count) + amplitude) * 360.0)
            return HSBColor.clamped(hue, 100.0, max(30.0, 50.0 + amplitude * 50.0))

        if amplitude > 0.7:
            hue = self.rng.uniform(0.0, 30.0)
        elif amplitude > 0.4:
            hue = self.rng.uniform(30.0, 60.0)
        else:
            hue = 240.0  # quiet
        return HSBColor.clamped(hue, 100.0, max(20.0, amplitude * 100.0))

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return
        if self.source is None:
            logger.warning("Sound reactive show started without a level source; idling")

        amplitude = 0.0
        frequency = 0.0
        count = len(lights)
        while True:
            level = await self.source.read() if self.source is not None else None
            if level is None:
                await asyncio.sleep(POLL_INTERVAL)
                continue

            config = self.config
            amplitude = amplitude * config.smoothing + level.amplitude * (1.0 - config.smoothing)
            frequency = frequency * config.smoothing + level.frequency * (1.0 - config.smoothing)
            scaled = min(1.0, amplitude * config.sensitivity * 2.0)

            for index, light in enumerate(lights):
                self.emit(writer, on_update, light.id, self.theme_color(config.theme, scaled, frequency, index, count))

            await asyncio.sleep(POLL_INTERVAL)
