from __future__ import annotations

import asyncio
from typing import Sequence

from pydantic import Field

from luminary.models.color import GREEN, WHITE, HSBColor
from luminary.models.light import LightEndpoint
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle

MIN_SWITCH_INTERVAL = 0.1


class AlternatingColorsConfig(ShowConfig):
    primary: HSBColor = GREEN
    secondary: HSBColor = WHITE
    switch_interval: float = Field(default=2.0, ge=MIN_SWITCH_INTERVAL, le=10.0)  # seconds


class AlternatingColorsShow(Show):
    """Even lights take one color and odd lights the other; they swap every interval."""

    id = "alternating-colors"
    name = "Alternating Colors"
    description = "Lights alternate between two colors and swap periodically"
    icon = "checkerboard.rectangle"
    config_model = AlternatingColorsConfig

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        if not lights:
            return

        swapped = False
        while True:
            config = self.config
            even, odd = (config.secondary, config.primary) if swapped else (config.primary, config.secondary)

            await settle(
                self.emit_all(
                    writer,
                    on_update,
                    [(light.id, even if index % 2 == 0 else odd) for index, light in enumerate(lights)],
                )
            )

            swapped = not swapped
            await asyncio.sleep(max(MIN_SWITCH_INTERVAL, config.switch_interval))
