from __future__ import annotations

import math
from typing import Any, Final, Tuple

from pydantic import BaseModel, ConfigDict, Field

from luminary.errors import InvalidColorError

HUE_RANGE: Final[float] = 360.0
# Largest hue below 360; hue is clamped, never wrapped, at production boundaries.
HUE_MAX: Final[float] = math.nextafter(HUE_RANGE, 0.0)


def clamp(value: float, lo: float, hi: float) -> float:
    if value != value:  # NaN
        return lo
    return lo if value < lo else (hi if value > hi else value)


def wrap_hue(hue: float) -> float:
    """Wrap a hue into [0, 360). Only for explicit phase computations."""
    wrapped = float(hue) % HUE_RANGE
    return min(wrapped, HUE_MAX)


class HSBColor(BaseModel):
    """HSB color as understood by the light controller.

    hue 0-360 (exclusive), saturation 0-100, brightness 0-100.
    """

    model_config = ConfigDict(frozen=True)

    hue: float = Field(default=0.0, ge=0.0, lt=HUE_RANGE)
    saturation: float = Field(default=0.0, ge=0.0, le=100.0)
    brightness: float = Field(default=0.0, ge=0.0, le=100.0)

    @classmethod
    def clamped(cls, hue: float, saturation: float, brightness: float) -> "HSBColor":
        return cls(
            hue=clamp(float(hue), 0.0, HUE_MAX),
            saturation=clamp(float(saturation), 0.0, 100.0),
            brightness=clamp(float(brightness), 0.0, 100.0),
        )

    def with_brightness(self, brightness: float) -> "HSBColor":
        return HSBColor.clamped(self.hue, self.saturation, brightness)

    def with_saturation(self, saturation: float) -> "HSBColor":
        return HSBColor.clamped(self.hue, saturation, self.brightness)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.hue, self.saturation, self.brightness)


def in_bounds(hue: float, saturation: float, brightness: float) -> bool:
    return 0.0 <= hue < HUE_RANGE and 0.0 <= saturation <= 100.0 and 0.0 <= brightness <= 100.0


def check_bounds(hue: float, saturation: float, brightness: float) -> None:
    if not in_bounds(hue, saturation, brightness):
        raise InvalidColorError(hue, saturation, brightness)


def coerce_color(value: Any) -> HSBColor:
    """Accept an HSBColor, a mapping or a (h, s, b) triple and clamp it into range."""

    if isinstance(value, HSBColor):
        return HSBColor.clamped(*value.as_tuple())
    if isinstance(value, dict):
        return HSBColor.clamped(
            float(value.get("hue", 0.0)),
            float(value.get("saturation", 0.0)),
            float(value.get("brightness", 0.0)),
        )
    hue, saturation, brightness = value
    return HSBColor.clamped(hue, saturation, brightness)


def lerp(start: HSBColor, end: HSBColor, t: float) -> HSBColor:
    """Channel-wise linear interpolation. Hue travels the straight path, not the short arc."""
    return HSBColor.clamped(
        start.hue + (end.hue - start.hue) * t,
        start.saturation + (end.saturation - start.saturation) * t,
        start.brightness + (end.brightness - start.brightness) * t,
    )


def blend(base: HSBColor, accent: HSBColor, factor: float) -> HSBColor:
    return lerp(base, accent, clamp(float(factor), 0.0, 1.0))


# Named colors used as show defaults.
WHITE: Final[HSBColor] = HSBColor(hue=0, saturation=0, brightness=100)
BLACK: Final[HSBColor] = HSBColor(hue=0, saturation=0, brightness=0)
RED: Final[HSBColor] = HSBColor(hue=0, saturation=100, brightness=100)
ORANGE: Final[HSBColor] = HSBColor(hue=30, saturation=100, brightness=100)
YELLOW: Final[HSBColor] = HSBColor(hue=55, saturation=100, brightness=100)
GREEN: Final[HSBColor] = HSBColor(hue=120, saturation=100, brightness=100)
BLUE: Final[HSBColor] = HSBColor(hue=220, saturation=100, brightness=100)
PURPLE: Final[HSBColor] = HSBColor(hue=280, saturation=80, brightness=90)
PINK: Final[HSBColor] = HSBColor(hue=330, saturation=75, brightness=100)
