import asyncio
import contextlib
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Union
from uuid import uuid4

from luminary.errors import UnknownShowError
from luminary.models.color import HSBColor
from luminary.models.light import LightEndpoint
from luminary.models.show import OnUpdate, Show, ShowConfig
from luminary.services.write_queue import WriteCoordinator
from luminary.store.registry import ShowRegistry

logger = logging.getLogger(__name__)

LightsLike = Iterable[Union[LightEndpoint, Dict[str, Any]]]


class ShowSession:
    """Handle on one running show."""

    def __init__(self, show: Show, targets: List[LightEndpoint]):
        self.session_id = uuid4().hex
        self.show = show
        self.targets = targets
        self.started_at = time.time()
        self.task: Optional[asyncio.Task] = None
        self.cancelled = False

    @property
    def done(self) -> bool:
        return self.task is None or self.task.done()

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.done

    def cancel(self) -> None:
        self.cancelled = True
        if self.task is not None and not self.task.done():
            self.task.cancel()

    async def wait(self) -> None:
        if self.task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self.task

    def describe(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "show": self.show.describe(),
            "targets": [light.id for light in self.targets],
            "startedAt": self.started_at,
            "active": self.active,
            "done": self.done,
        }


class _SessionWriter:
    """Passes writes through while the session is live; drops them once it is cancelled."""

    def __init__(self, session: ShowSession, writer: WriteCoordinator):
        self._session = session
        self._writer = writer

    def set_color(self, key: str, color: HSBColor) -> "asyncio.Future[bool]":
        if self._session.cancelled:
            dropped = asyncio.get_running_loop().create_future()
            dropped.set_result(False)
            return dropped
        return self._writer.set_color(key, color)


class ShowEngine:
    def __init__(
        self,
        registry: ShowRegistry,
        writer: WriteCoordinator,
        on_update: Optional[OnUpdate] = None,
    ):
        self.registry = registry
        self.writer = writer
        self.lock = asyncio.Lock()
        self.last_colors: Dict[str, Optional[HSBColor]] = {}
        self._session: Optional[ShowSession] = None
        self._listeners: List[OnUpdate] = []
        if on_update is not None:
            self._listeners.append(on_update)

    @property
    def current(self) -> Optional[ShowSession]:
        return self._session

    def add_listener(self, listener: OnUpdate) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: OnUpdate) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    def resolve(self, show_or_id: Union[Show, str]) -> Show:
        if isinstance(show_or_id, Show):
            return show_or_id
        show = self.registry.get(show_or_id)
        if show is None:
            raise UnknownShowError(show_or_id)
        return show

    async def apply(
        self,
        show_or_id: Union[Show, str],
        lights: LightsLike,
        config: Optional[Dict[str, Any]] = None,
    ) -> ShowSession:
        """Start ``show_or_id`` on ``lights``, replacing whatever is running.

        The previous session is cancelled and its task awaited before the new
        one starts. Raises ``UnknownShowError`` or ``ConfigError`` without
        touching the running session.
        """

        show = self.resolve(show_or_id)
        targets = [LightEndpoint.model_validate(light) for light in lights]
        if config:
            show.configure(**config)

        async with self.lock:
            previous = self._session
            if previous is not None:
                previous.cancel()
                await previous.wait()

            session = ShowSession(show, targets)
            session.task = asyncio.create_task(self._run(session), name=f"show:{show.id}")
            self._session = session

        return session

    async def configure(self, show_id: str, changes: Dict[str, Any]) -> ShowConfig:
        show = self.resolve(show_id)
        config = show.configure(**changes)
        logger.info("Updated %s config: %s", show.id, sorted(changes))
        return config

    async def stop(self) -> bool:
        async with self.lock:
            session = self._session
            self._session = None
            if session is None:
                return False
            was_running = not session.done
            session.cancel()
            await session.wait()

        if was_running:
            logger.info("Stopped show %s", session.show.id)
        return was_running

    async def shutdown(self) -> int:
        """Stop the show and drop every write still waiting in the coordinator."""
        await self.stop()
        return self.writer.cancel_all()

    def status(self) -> Dict[str, Any]:
        session = self._session
        return {
            "running": session is not None and session.active,
            "session": session.describe() if session is not None else None,
            "pendingWrites": self.writer.pending_keys(),
            "writeStats": self.writer.stats.to_dict(),
        }

    def _session_update(self, session: ShowSession) -> OnUpdate:
        def on_update(light_id: str, color: Optional[HSBColor]) -> None:
            if session.cancelled:
                return
            self.last_colors[light_id] = color
            for listener in list(self._listeners):
                try:
                    listener(light_id, color)
                except Exception:
                    logger.exception("Preview listener failed for %s", light_id)

        return on_update

    async def _run(self, session: ShowSession) -> None:
        show = session.show
        logger.info("Show %s started on %d lights", show.id, len(session.targets))
        try:
            await show.run(session.targets, _SessionWriter(session, self.writer), self._session_update(session))
        except asyncio.CancelledError:
            logger.debug("Show %s cancelled", show.id)
            raise
        except Exception:
            logger.exception("Show %s crashed", show.id)
        else:
            logger.info("Show %s finished", show.id)


