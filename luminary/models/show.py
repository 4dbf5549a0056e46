from __future__ import annotations

import asyncio
import json
import random
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Optional, Protocol, Sequence, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from luminary.errors import ConfigError
from luminary.models.color import HSBColor
from luminary.models.light import LightEndpoint, Position
from luminary.models.ordering import SequencingStrategy, calculate_sequence

OnUpdate = Callable[[str, Optional[HSBColor]], None]


class ColorWriter(Protocol):
    """Where a show submits its colors (normally the write coordinator)."""

    def set_color(self, key: str, color: HSBColor) -> "asyncio.Future[bool]": ...


class ShowConfig(BaseModel):
    """Base for per-show parameters. Instances are replaced, never mutated."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class EmptyConfig(ShowConfig):
    pass


async def settle(writes: Iterable["asyncio.Future[bool]"]) -> List[bool]:
    """Wait for submitted writes without letting a cancelled show cancel them."""

    pending = [asyncio.shield(write) for write in writes]
    if not pending:
        return []
    results = await asyncio.gather(*pending, return_exceptions=True)
    return [result is True for result in results]


class Show(ABC):
    """A color animation over a set of lights.

    Subclasses set the catalog attributes and a ``config_model``; ``run``
    performs the animation and is wrapped into a cancellable session by the
    engine. Loops read ``self.config`` once per tick so configuration changes
    apply live.
    """

    id: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    icon: ClassVar[str]
    config_model: ClassVar[Type[ShowConfig]] = EmptyConfig

    def __init__(self, config: Optional[ShowConfig] = None, *, rng: Optional[random.Random] = None):
        self._config = config if config is not None else self.config_model()
        self.rng = rng or random.Random()

    @property
    def config(self) -> Any:
        return self._config

    def configure(self, **changes: Any) -> ShowConfig:
        """Validate ``changes`` against the current config and swap in the result."""
        merged = {**self._config.model_dump(), **changes}
        try:
            new_config = self.config_model.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(self.id, json.loads(exc.json(include_url=False))) from exc
        self._config = new_config
        return new_config

    def describe(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
        }

    def preview_color(self, light_id: str, position: Position, t: float) -> Optional[HSBColor]:
        """Static color a light would show, for previews that cannot run the loop."""
        return None

    @abstractmethod
    async def run(
        self,
        lights: Sequence[LightEndpoint],
        writer: ColorWriter,
        on_update: OnUpdate,
    ) -> None:
        """Drive the lights until finished or cancelled."""

    @staticmethod
    def emit(writer: ColorWriter, on_update: OnUpdate, light_id: str, color: HSBColor) -> "asyncio.Future[bool]":
        # Preview and write go out together; neither waits for the other.
        on_update(light_id, color)
        return writer.set_color(light_id, color)

    def emit_all(
        self,
        writer: ColorWriter,
        on_update: OnUpdate,
        colors: Iterable[tuple[str, HSBColor]],
    ) -> List["asyncio.Future[bool]"]:
        return [self.emit(writer, on_update, light_id, color) for light_id, color in colors]


class SequencedShow(Show):
    """A show whose effect walks the lights in a spatial order."""

    @property
    def ordering_strategy(self) -> SequencingStrategy:
        return self.config.ordering_strategy

    def sequence(self, lights: Sequence[LightEndpoint]) -> List[str]:
        return calculate_sequence(self.ordering_strategy, lights)

    def ordered_lights(self, lights: Sequence[LightEndpoint]) -> List[LightEndpoint]:
        """Lights in sequence order, each exactly once; anything missing keeps input order."""
        lookup = {light.id: light for light in lights}
        seen = set()
        ordered: List[LightEndpoint] = []
        for light_id in self.sequence(lights):
            if light_id in seen or light_id not in lookup:
                continue
            seen.add(light_id)
            ordered.append(lookup[light_id])
        for light in lights:
            if light.id not in seen:
                seen.add(light.id)
                ordered.append(light)
        return ordered

    def describe(self) -> Dict[str, str]:
        info = super().describe()
        info["ordering"] = self.ordering_strategy.value
        return info


