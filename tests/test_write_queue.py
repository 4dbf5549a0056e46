import asyncio

import pytest

from conftest import RecordingController
from luminary.errors import WriteFailure
from luminary.models.color import HSBColor
from luminary.services.write_queue import WriteCoordinator

C1 = HSBColor(hue=0, saturation=100, brightness=100)
C2 = HSBColor(hue=120, saturation=100, brightness=100)
C3 = HSBColor(hue=240, saturation=100, brightness=100)


@pytest.mark.asyncio
async def test_burst_collapses_into_one_write_of_last_color(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=0.1)
    loop = asyncio.get_running_loop()
    start = loop.time()

    f1 = coordinator.set_color("A", C1)
    await asyncio.sleep(0.03)
    f2 = coordinator.set_color("A", C2)
    await asyncio.sleep(0.03)
    f3 = coordinator.set_color("A", C3)

    assert await f3 is True
    assert await f1 is False
    assert await f2 is False

    assert len(controller.writes) == 1
    write = controller.writes[0]
    assert write.key == "A"
    assert write.color == C3.as_tuple()
    # Last call at ~60 ms plus the 100 ms debounce.
    assert 0.14 <= write.at - start < 0.35
    assert coordinator.stats.superseded == 2
    assert coordinator.stats.written == 1


@pytest.mark.asyncio
async def test_keys_debounce_independently(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=0.05)

    futures = []
    for color in (C1, C2, C3):
        futures.append(coordinator.set_color("A", color))
        futures.append(coordinator.set_color("B", color))
        await asyncio.sleep(0.01)

    results = await asyncio.gather(*futures)
    assert results.count(True) == 2
    assert sorted(controller.keys()) == ["A", "B"]
    assert all(write.color == C3.as_tuple() for write in controller.writes)


@pytest.mark.asyncio
async def test_at_most_one_pending_entry_per_key(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=0.05)
    for color in (C1, C2, C3):
        coordinator.set_color("A", color)
    assert coordinator.pending_keys() == ["A"]
    assert coordinator.pending_color("A") == C3
    await coordinator.close()


@pytest.mark.asyncio
async def test_cancel_resolves_false_and_never_writes(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=0.05)
    future = coordinator.set_color("A", C1)
    assert coordinator.cancel("A") is True
    assert coordinator.cancel("A") is False
    assert await future is False
    await asyncio.sleep(0.08)
    assert controller.writes == []
    assert coordinator.stats.cancelled == 1


@pytest.mark.asyncio
async def test_cancel_all_drains_every_key(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=0.05)
    futures = [coordinator.set_color(key, C2) for key in ("A", "B", "C")]
    assert coordinator.cancel_all() == 3
    assert await asyncio.gather(*futures) == [False, False, False]
    assert coordinator.pending_keys() == []
    await asyncio.sleep(0.08)
    assert controller.writes == []


@pytest.mark.asyncio
async def test_colors_are_clamped_before_reaching_controller(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=0.0)
    assert await coordinator.set_color_and_wait("A", (400, 120, -10)) is True
    hue, saturation, brightness = controller.writes[0].color
    assert 0 <= hue < 360
    assert saturation == 100
    assert brightness == 0


@pytest.mark.asyncio
async def test_failed_and_raising_writes_resolve_false():
    controller = RecordingController(fail={"bad"}, raise_for={"boom"})
    coordinator = WriteCoordinator(controller, debounce_interval=0.0)

    results = await asyncio.gather(
        coordinator.set_color("bad", C1),
        coordinator.set_color("boom", C1),
        coordinator.set_color("ok", C1),
    )

    assert results == [False, False, True]
    assert coordinator.stats.failed == 2
    assert coordinator.stats.written == 1
    assert isinstance(coordinator.last_failures["boom"], WriteFailure)
    assert "ConnectionError" in coordinator.last_failures["boom"].details["reason"]
    assert "ok" not in coordinator.last_failures


@pytest.mark.asyncio
async def test_write_timeout_counts_as_failure():
    controller = RecordingController(latency=0.3)
    coordinator = WriteCoordinator(controller, debounce_interval=0.0, write_timeout=0.05)
    assert await coordinator.set_color("slow", C1) is False
    assert coordinator.last_failures["slow"].code == "write_failed"


@pytest.mark.asyncio
async def test_in_flight_write_finishes_before_next_starts():
    controller = RecordingController(latency=0.05)
    coordinator = WriteCoordinator(controller, debounce_interval=0.01)

    first = coordinator.set_color("A", C1)
    await asyncio.sleep(0.03)  # first write is now with the controller
    second = coordinator.set_color("A", C2)

    assert await first is True
    assert await second is True
    assert controller.max_in_flight["A"] == 1
    assert [write.color for write in controller.writes] == [C1.as_tuple(), C2.as_tuple()]


@pytest.mark.asyncio
async def test_close_settles_everything(controller):
    coordinator = WriteCoordinator(controller, debounce_interval=1.0)
    future = coordinator.set_color("A", C1)
    await coordinator.close()
    assert future.done()
    assert future.result() is False


@pytest.mark.asyncio
async def test_per_key_locks_are_released_when_idle():
    controller = RecordingController(latency=0.03)
    coordinator = WriteCoordinator(controller, debounce_interval=0.0)

    futures = [coordinator.set_color(key, C1) for key in ("A", "B", "C")]
    await asyncio.sleep(0.01)
    assert set(coordinator._locks) == {"A", "B", "C"}

    assert await asyncio.gather(*futures) == [True, True, True]
    assert coordinator._locks == {}
    assert coordinator._lock_users == {}

    # Failures release their lock too.
    controller.raise_for.add("A")
    assert await coordinator.set_color("A", C2) is False
    assert coordinator._locks == {}
