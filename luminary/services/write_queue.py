"""Debounced, per-endpoint write coordination in front of a LightController.

Every ``set_color`` call replaces whatever is still waiting for that endpoint,
so a burst of updates collapses into one controller write carrying the last
color. The pending map is only touched from synchronous code on the event
loop; controller writes for one endpoint are serialized by a per-key lock.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Set

from luminary.custom_logging import log_throttled
from luminary.errors import WriteFailure
from luminary.models.color import HSBColor, coerce_color
from luminary.services.controller import LightController

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_INTERVAL = 0.1
FAILURE_LOG_INTERVAL = 5.0


@dataclass
class PendingWrite:
    key: str
    color: HSBColor
    deadline: float
    generation: int
    future: "asyncio.Future[bool]"
    task: Optional[asyncio.Task] = None


@dataclass
class WriteStats:
    written: int = 0
    failed: int = 0
    superseded: int = 0
    cancelled: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class WriteCoordinator:
    def __init__(
        self,
        controller: LightController,
        debounce_interval: float = DEFAULT_DEBOUNCE_INTERVAL,
        write_timeout: Optional[float] = None,
    ):
        self.controller = controller
        self.debounce_interval = max(0.0, float(debounce_interval))
        self.write_timeout = write_timeout
        self.stats = WriteStats()
        self.last_failures: Dict[str, WriteFailure] = {}
        self._pending: Dict[str, PendingWrite] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._generation = 0

    def set_color(self, key: str, color: Any) -> "asyncio.Future[bool]":
        """Schedule ``color`` for ``key`` after the debounce interval.

        The returned future resolves to the controller's result, or to False
        if this write is superseded, cancelled, fails or times out. Must be
        called from the event loop thread.
        """

        loop = asyncio.get_running_loop()

        previous = self._pending.pop(key, None)
        if previous is not None:
            self._drop(previous)
            self.stats.superseded += 1

        self._generation += 1
        entry = PendingWrite(
            key=key,
            color=coerce_color(color),
            deadline=loop.time() + self.debounce_interval,
            generation=self._generation,
            future=loop.create_future(),
        )
        entry.task = asyncio.create_task(self._fire(entry), name=f"light-write:{key}")
        self._tasks.add(entry.task)
        entry.task.add_done_callback(self._tasks.discard)
        self._pending[key] = entry
        return entry.future

    async def set_color_and_wait(self, key: str, color: Any) -> bool:
        # Shielded so a cancelled caller does not cancel the shared future.
        return await asyncio.shield(self.set_color(key, color))

    def cancel(self, key: str) -> bool:
        entry = self._pending.pop(key, None)
        if entry is None:
            return False
        self._drop(entry)
        self.stats.cancelled += 1
        return True

    def cancel_all(self) -> int:
        entries = list(self._pending.values())
        self._pending.clear()
        for entry in entries:
            self._drop(entry)
        self.stats.cancelled += len(entries)
        if entries:
            logger.debug("Cancelled %d pending light writes", len(entries))
        return len(entries)

    def pending_keys(self) -> List[str]:
        return list(self._pending)

    def pending_color(self, key: str) -> Optional[HSBColor]:
        entry = self._pending.get(key)
        return entry.color if entry is not None else None

    async def close(self) -> None:
        """Cancel pending and in-flight writes and wait for their tasks to finish."""
        self.cancel_all()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _drop(self, entry: PendingWrite) -> None:
        # The timer task may not have started yet, so settle here as well.
        self._settle(entry.future, False)
        if entry.task is not None:
            entry.task.cancel()

    async def _fire(self, entry: PendingWrite) -> None:
        loop = asyncio.get_running_loop()
        result = False
        try:
            await asyncio.sleep(max(0.0, entry.deadline - loop.time()))
            if self._pending.get(entry.key) is entry:
                del self._pending[entry.key]
            result = await self._write(entry.key, entry.color)
        finally:
            self._settle(entry.future, result)

    async def _write(self, key: str, color: HSBColor) -> bool:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            return await self._write_locked(lock, key, color)
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _write_locked(self, lock: asyncio.Lock, key: str, color: HSBColor) -> bool:
        async with lock:
            try:
                call = self.controller.set_color(key, color.hue, color.saturation, color.brightness)
                if self.write_timeout is not None:
                    ok = await asyncio.wait_for(call, timeout=self.write_timeout)
                else:
                    ok = await call
            except asyncio.TimeoutError:
                self._record_failure(key, f"timed out after {self.write_timeout}s")
                return False
            except Exception as e:
                self._record_failure(key, f"{type(e).__name__}: {e}", exc=e)
                return False

        if not ok:
            self._record_failure(key, "controller rejected the write")
            return False

        self.stats.written += 1
        self.last_failures.pop(key, None)
        return True

    def _record_failure(self, key: str, reason: str, exc: Optional[BaseException] = None) -> None:
        failure = WriteFailure(key, reason)
        self.last_failures[key] = failure
        self.stats.failed += 1
        log_throttled(
            logger,
            f"light-write-failure:{key}",
            interval_s=FAILURE_LOG_INTERVAL,
            level=logging.WARNING,
            msg=str(failure),
            exc=exc,
        )

    @staticmethod
    def _settle(future: "asyncio.Future[bool]", result: bool) -> None:
        if not future.done():
            future.set_result(result)
