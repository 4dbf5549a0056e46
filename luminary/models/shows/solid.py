from __future__ import annotations

from typing import Optional, Sequence

from luminary.models.color import WHITE, HSBColor
from luminary.models.light import LightEndpoint, Position
from luminary.models.show import ColorWriter, OnUpdate, Show, ShowConfig, settle


class SolidColorConfig(ShowConfig):
    color: HSBColor = WHITE


class SolidColorShow(Show):
    id = "solid-color"
    name = "Solid Color"
    description = "Set all lights to the same color"
    icon = "paintpalette.fill"
    config_model = SolidColorConfig

    def preview_color(self, light_id: str, position: Position, t: float) -> Optional[HSBColor]:
        return self.config.color

    async def run(self, lights: Sequence[LightEndpoint], writer: ColorWriter, on_update: OnUpdate) -> None:
        color = self.config.color
        await settle(self.emit_all(writer, on_update, [(light.id, color) for light in lights]))
