from __future__ import annotations

import math
from enum import Enum
from typing import Dict, List, Sequence

from luminary.models.light import LightEndpoint


class SequencingStrategy(str, Enum):
    """Traversal order over the lights on the canvas."""

    LEFT_TO_RIGHT = "left_to_right"
    RIGHT_TO_LEFT = "right_to_left"
    TOP_TO_BOTTOM = "top_to_bottom"
    BOTTOM_TO_TOP = "bottom_to_top"
    NEAREST_NEIGHBOR = "nearest_neighbor"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def sequence(self, lights: Sequence[LightEndpoint]) -> List[str]:
        return calculate_sequence(self, lights)


_LABELS: Dict[SequencingStrategy, str] = {
    SequencingStrategy.LEFT_TO_RIGHT: "Left to Right",
    SequencingStrategy.RIGHT_TO_LEFT: "Right to Left",
    SequencingStrategy.TOP_TO_BOTTOM: "Top to Bottom",
    SequencingStrategy.BOTTOM_TO_TOP: "Bottom to Top",
    SequencingStrategy.NEAREST_NEIGHBOR: "Nearest Neighbor",
    SequencingStrategy.CUSTOM: "Custom Order",
}

_ICONS: Dict[SequencingStrategy, str] = {
    SequencingStrategy.LEFT_TO_RIGHT: "arrow.right",
    SequencingStrategy.RIGHT_TO_LEFT: "arrow.left",
    SequencingStrategy.TOP_TO_BOTTOM: "arrow.down",
    SequencingStrategy.BOTTOM_TO_TOP: "arrow.up",
    SequencingStrategy.NEAREST_NEIGHBOR: "point.3.connected.trianglepath.dotted",
    SequencingStrategy.CUSTOM: "list.number",
}

_DESCRIPTIONS: Dict[SequencingStrategy, str] = {
    SequencingStrategy.LEFT_TO_RIGHT: "Lights ordered from left to right by X position",
    SequencingStrategy.RIGHT_TO_LEFT: "Lights ordered from right to left by X position",
    SequencingStrategy.TOP_TO_BOTTOM: "Lights ordered from top to bottom by Y position",
    SequencingStrategy.BOTTOM_TO_TOP: "Lights ordered from bottom to top by Y position",
    SequencingStrategy.NEAREST_NEIGHBOR: "Each light travels to its nearest neighbor",
    SequencingStrategy.CUSTOM: "Use the order the lights were supplied in",
}


def calculate_sequence(strategy: SequencingStrategy, lights: Sequence[LightEndpoint]) -> List[str]:
    """Return the light ids in traversal order.

    Every input id appears exactly once. Linear orderings rely on ``sorted``
    being stable, so ties keep input order.
    """

    strategy = SequencingStrategy(strategy)
    if strategy is SequencingStrategy.LEFT_TO_RIGHT:
        ordered = sorted(lights, key=lambda light: light.position.x)
    elif strategy is SequencingStrategy.RIGHT_TO_LEFT:
        ordered = sorted(lights, key=lambda light: -light.position.x)
    elif strategy is SequencingStrategy.TOP_TO_BOTTOM:
        ordered = sorted(lights, key=lambda light: light.position.y)
    elif strategy is SequencingStrategy.BOTTOM_TO_TOP:
        ordered = sorted(lights, key=lambda light: -light.position.y)
    elif strategy is SequencingStrategy.NEAREST_NEIGHBOR:
        ordered = nearest_neighbor_tour(lights)
    else:
        # Extension point: no persisted custom order exists, keep caller order.
        ordered = list(lights)
    return [light.id for light in ordered]


def nearest_neighbor_tour(lights: Sequence[LightEndpoint]) -> List[LightEndpoint]:
    """Greedy tour starting at the leftmost light. O(n^2), not a shortest tour."""

    remaining = list(lights)
    if not remaining:
        return []

    # min() returns the first minimal element, which breaks ties by input order.
    current = min(remaining, key=lambda light: light.position.x)
    remaining.remove(current)
    tour = [current]

    while remaining:
        cx, cy = current.position.x, current.position.y
        current = min(
            remaining,
            key=lambda light: math.hypot(light.position.x - cx, light.position.y - cy),
        )
        remaining.remove(current)
        tour.append(current)

    return tour
