from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from pydantic import Field

from luminary.models.color import GREEN, WHITE, HSBColor
from luminary.models.light import LightEndpoint, Position
from luminary.models.ordering import SequencingStrategy
from luminary.models.show import ColorWriter, OnUpdate, SequencedShow, ShowConfig

logger = logging.getLogger(__name__)

SETTLE_DELAY = 0.5  # seconds between the rest fill and the first hit


class WaveColorConfig(ShowConfig):
    wave_color: HSBColor = GREEN
    rest_color: HSBColor = WHITE
    duration_per_light: float = Field(default=1.0, ge=0.1, le=5.0)  # seconds
    ordering_strategy: SequencingStrategy = SequencingStrategy.LEFT_TO_RIGHT


class WaveColorShow(SequencedShow):
    """Walk a single color through the sequence once, returning each light to rest."""

    id = "wave-color"
    name = "Wave Color"
    description = "Wave a color through lights one at a time"
    icon = "waveform"
    config_model = WaveColorConfig

    def preview_color(self, light_id: str, position: Position, t: float) -> Optional[HSBColor]:
        return self.config.rest_color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        sequence = self.sequence(lights)
        if not sequence:
            return

        rest = self.config.rest_color
        for light_id in sequence:
            self.emit(writer, on_update, light_id, rest)

        await asyncio.sleep(SETTLE_DELAY)

        for light_id in sequence:
            config = self.config
            self.emit(writer, on_update, light_id, config.wave_color)
            logger.debug("Wave hit %s", light_id)
            await asyncio.sleep(config.duration_per_light)
            self.emit(writer, on_update, light_id, config.rest_color)
