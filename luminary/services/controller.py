import asyncio
import logging
from pathlib import Path
from time import perf_counter
from typing import Dict, Optional, Protocol, Tuple, Union

from luminary.errors import InvalidColorError
from luminary.models.color import check_bounds

logger = logging.getLogger(__name__)


class LightController(Protocol):
    """The device boundary. Returns True when the light accepted the color."""

    async def set_color(self, endpoint_id: str, hue: float, saturation: float, brightness: float) -> bool: ...


class LoggingLightController:
    """Stand-in controller used when no device bridge is bound.

    Every write is validated, remembered per endpoint and logged; with
    ``debug`` on, each accepted write is also dumped as one line to stdout or
    ``debug_file``.
    """

    def __init__(
        self,
        debug: bool = False,
        debug_file: Optional[Union[str, Path]] = None,
        latency: float = 0.0,
    ):
        self.colors: Dict[str, Tuple[float, float, float]] = {}
        self.write_count = 0
        self.latency = latency
        self.debug = bool(debug)
        self.debug_file_path = Path(debug_file) if debug_file else None
        if self.debug_file_path is not None:
            self.debug_file_path.parent.mkdir(parents=True, exist_ok=True)

    async def set_color(self, endpoint_id: str, hue: float, saturation: float, brightness: float) -> bool:
        try:
            check_bounds(hue, saturation, brightness)
        except InvalidColorError as e:
            logger.warning("Rejected write to %s: %s", endpoint_id, e)
            return False

        if self.latency > 0:
            await asyncio.sleep(self.latency)

        self.colors[endpoint_id] = (hue, saturation, brightness)
        self.write_count += 1
        logger.debug("set %s -> h=%.1f s=%.1f b=%.1f", endpoint_id, hue, saturation, brightness)

        if self.debug:
            self._debug_dump(endpoint_id, hue, saturation, brightness)
        return True

    def _debug_dump(self, endpoint_id: str, hue: float, saturation: float, brightness: float) -> None:
        timestamp = perf_counter()
        line = f"[{timestamp:.3f}] light {endpoint_id} hsb {hue:.1f}/{saturation:.1f}/{brightness:.1f}\n"

        if self.debug_file_path is None:
            print(line, end="")
            return

        try:
            with self.debug_file_path.open("a", encoding="utf-8") as debug_file:
                debug_file.write(line)
        except OSError as e:
            logger.error("Light debug write error: %s", e)
