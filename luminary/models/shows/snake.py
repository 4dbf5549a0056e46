from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque, Sequence

from pydantic import Field

from luminary.models.color import BLACK, GREEN, HSBColor
from luminary.models.light import LightEndpoint
from luminary.models.ordering import SequencingStrategy
from luminary.models.show import ColorWriter, OnUpdate, SequencedShow, ShowConfig, settle

SETTLE_DELAY = 0.5
TURN_EVERY = 12  # moves between direction re-rolls
MIN_TICK = 0.05
MIN_FADE = 0.05
MIN_SEGMENT_BRIGHTNESS = 10.0


class SnakeConfig(ShowConfig):
    snake_color: HSBColor = GREEN
    background_color: HSBColor = BLACK
    speed: float = Field(default=0.5, ge=0.05, le=2.0)  # seconds per move
    tail_length: int = Field(default=5, ge=1, le=10)
    ordering_strategy: SequencingStrategy = SequencingStrategy.NEAREST_NEIGHBOR


def segment_color(color: HSBColor, offset: int, limit: int) -> HSBColor:
    fade = max(MIN_FADE, 1.0 - offset / limit)
    return color.with_brightness(max(MIN_SEGMENT_BRIGHTNESS, color.brightness * fade))


class SnakeShow(SequencedShow):
    """A head walks the ordered lights with a fading tail behind it.

    The body is a deque of unique indices into the ordered list, head first.
    Every ``TURN_EVERY`` moves the direction is re-rolled at random.
    """

    id = "snake"
    name = "Snake"
    description = "A colorful snake slithers across your lights"
    icon = "arrow.turn.up.right"
    config_model = SnakeConfig

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        ordered = self.ordered_lights(lights)
        if not ordered:
            return
        count = len(ordered)

        background = self.config.background_color
        await settle(self.emit_all(writer, on_update, [(light.id, background) for light in ordered]))

        head = 0
        body: Deque[int] = deque([head])
        moves = 0
        forward = True

        await asyncio.sleep(SETTLE_DELAY)

        while True:
            moves += 1
            config = self.config
            limit = min(max(1, config.tail_length), count)

            if count > 1:
                if moves % TURN_EVERY == 0:
                    forward = self.rng.random() < 0.5
                head = (head + (1 if forward else -1)) % count
                if head in body:
                    body.remove(head)
                body.appendleft(head)

            while len(body) > limit:
                dropped = ordered[body.pop()]
                await settle([self.emit(writer, on_update, dropped.id, config.background_color)])

            await settle(
                self.emit_all(
                    writer,
                    on_update,
                    [
                        (ordered[index].id, segment_color(config.snake_color, offset, limit))
                        for offset, index in enumerate(body)
                    ],
                )
            )

            await asyncio.sleep(max(MIN_TICK, config.speed))
