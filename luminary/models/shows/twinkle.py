from __future__ import annotations

import asyncio
import contextlib
from typing import Optional, Sequence, Set

from pydantic import Field

from luminary.models.color import WHITE, YELLOW, HSBColor
from luminary.models.light import LightEndpoint, Position
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle

TICK = 0.5
SETTLE_DELAY = 0.5
REVERT_DELAY = 0.2


class TwinkleConfig(ShowConfig):
    base_color: HSBColor = WHITE
    twinkle_color: HSBColor = YELLOW
    frequency: float = Field(default=0.3, ge=0.0, le=1.0)  # chance per light per tick


class TwinkleShow(Show):
    """Random lights flash the twinkle color and fall back to base shortly after.

    Each revert runs as its own task owned by the show; stopping the show
    cancels any that are still waiting.
    """

    id = "twinkle"
    name = "Twinkle"
    description = "Random lights sparkle like stars"
    icon = "sparkles"
    config_model = TwinkleConfig

    def preview_color(self, light_id: str, position: Position, t: float) -> Optional[HSBColor]:
        return self.config.base_color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        reverts: Set[asyncio.Task] = set()
        try:
            base = self.config.base_color
            await settle(self.emit_all(writer, on_update, [(light.id, base) for light in lights]))
            await asyncio.sleep(SETTLE_DELAY)

            while True:
                config = self.config
                for light in lights:
                    if self.rng.random() < config.frequency:
                        self.emit(writer, on_update, light.id, config.twinkle_color)
                        task = asyncio.create_task(self._revert(light.id, config.base_color, writer, on_update))
                        reverts.add(task)
                        task.add_done_callback(reverts.discard)
                await asyncio.sleep(TICK)
        finally:
            for task in list(reverts):
                task.cancel()
            for task in list(reverts):
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    async def _revert(self, light_id: str, base: HSBColor, writer: ColorWriter, on_update: OnUpdate) -> None:
        await asyncio.sleep(REVERT_DELAY)
        self.emit(writer, on_update, light_id, base)
