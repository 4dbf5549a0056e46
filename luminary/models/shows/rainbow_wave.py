from __future__ import annotations

import asyncio
import logging
from typing import Final, List, Sequence

from pydantic import Field

from luminary.models.color import HSBColor
from luminary.models.light import LightEndpoint
from luminary.models.ordering import SequencingStrategy
from luminary.models.show import ColorWriter, OnUpdate, SequencedShow, ShowConfig, settle

logger = logging.getLogger(__name__)

# Red, orange, yellow, green, cyan, blue, magenta.
RAINBOW: Final[List[HSBColor]] = [
    HSBColor(hue=hue, saturation=100, brightness=100) for hue in (0, 30, 60, 120, 180, 240, 300)
]


class RainbowWaveConfig(ShowConfig):
    speed: float = Field(default=1.0, ge=0.1, le=3.0)  # seconds per light
    ordering_strategy: SequencingStrategy = SequencingStrategy.LEFT_TO_RIGHT


class RainbowWaveShow(SequencedShow):
    id = "rainbow-wave"
    name = "Rainbow Wave"
    description = "Cycle through rainbow colors in sequence"
    icon = "rainbow"
    config_model = RainbowWaveConfig

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        sequence = self.sequence(lights)
        if not sequence:
            return

        while True:
            for index, light_id in enumerate(sequence):
                color_index = index % len(RAINBOW)
                (written,) = await settle([self.emit(writer, on_update, light_id, RAINBOW[color_index])])
                if written:
                    logger.debug("Rainbow wave hit %s with color %d", light_id, color_index)
                await asyncio.sleep(self.config.speed)

            # Pause between passes.
            await asyncio.sleep(self.config.speed)
