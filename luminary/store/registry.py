from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from luminary.models.show import Show
from luminary.models.shows import BUILTIN_SHOWS, SoundReactiveShow
from luminary.services.audio import LevelSource


class ShowRegistry:
    """Ordered catalog of show prototypes.

    Lookup is a linear scan returning the first match; duplicate ids are
    allowed and shadowed by the earlier registration.
    """

    def __init__(self, shows: Optional[Iterable[Show]] = None):
        self._shows: List[Show] = list(shows) if shows is not None else []

    def register(self, show: Show) -> Show:
        self._shows.append(show)
        return show

    def get(self, show_id: str) -> Optional[Show]:
        return next((show for show in self._shows if show.id == show_id), None)

    def list(self) -> List[Dict[str, str]]:
        return [show.describe() for show in self._shows]

    def __iter__(self) -> Iterator[Show]:
        return iter(self._shows)

    def __len__(self) -> int:
        return len(self._shows)


def default_registry(level_source: Optional[LevelSource] = None) -> ShowRegistry:
    registry = ShowRegistry()
    for show_cls in BUILTIN_SHOWS:
        if show_cls is SoundReactiveShow:
            registry.register(SoundReactiveShow(source=level_source))
        else:
            registry.register(show_cls())
    return registry
