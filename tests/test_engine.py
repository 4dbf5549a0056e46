import asyncio

import pytest

from conftest import RecordingController
from luminary.errors import ConfigError, UnknownShowError
from luminary.models.shows import AlternatingColorsShow, SolidColorShow
from luminary.services.write_queue import WriteCoordinator
from luminary.store.engine import ShowEngine
from luminary.store.registry import ShowRegistry, default_registry


def _engine(controller, recorder, debounce=0.02):
    coordinator = WriteCoordinator(controller, debounce_interval=debounce)
    registry = ShowRegistry([SolidColorShow(), AlternatingColorsShow()])
    registry.get("alternating-colors").configure(switch_interval=0.1)
    return ShowEngine(registry, coordinator, on_update=recorder)


LIGHTS = [{"id": "A", "position": {"x": 0, "y": 0}}, {"id": "B", "position": [10, 0]}]


@pytest.mark.asyncio
async def test_solid_session_finishes_by_itself(controller, recorder):
    engine = _engine(controller, recorder)
    session = await engine.apply("solid-color", LIGHTS)
    await asyncio.wait_for(session.wait(), timeout=1)

    assert session.done
    assert not session.active
    assert sorted(controller.keys()) == ["A", "B"]
    assert [light_id for light_id, _ in recorder.updates] == ["A", "B"]
    assert engine.status()["running"] is False
    assert await engine.stop() is False


@pytest.mark.asyncio
async def test_stop_halts_updates_and_writes(controller, recorder):
    engine = _engine(controller, recorder, debounce=0.0)
    session = await engine.apply("alternating-colors", LIGHTS)
    await asyncio.sleep(0.15)

    assert engine.status()["running"] is True
    assert await engine.stop() is True
    assert session.done
    assert engine.current is None

    updates, writes = len(recorder.updates), len(controller.writes)
    await asyncio.sleep(0.3)
    assert len(recorder.updates) == updates
    # At most the writes already queued when the show stopped.
    assert len(controller.writes) <= writes + len(LIGHTS)


@pytest.mark.asyncio
async def test_apply_supersedes_previous_session(controller, recorder):
    engine = _engine(controller, recorder)
    first = await engine.apply("alternating-colors", LIGHTS)
    await asyncio.sleep(0.05)
    second = await engine.apply("alternating-colors", LIGHTS)

    assert first.done
    assert first.cancelled
    assert second.active
    assert engine.current is second

    await engine.shutdown()
    assert engine.writer.pending_keys() == []
    await engine.writer.close()


@pytest.mark.asyncio
async def test_reapply_leaks_no_pending_writes(controller, recorder):
    engine = _engine(controller, recorder, debounce=0.05)
    for _ in range(3):
        await engine.apply("alternating-colors", LIGHTS)
        await asyncio.sleep(0.01)
    await engine.stop()

    # Whatever was still debouncing drains on its own.
    await asyncio.sleep(0.1)
    assert engine.writer.pending_keys() == []
    assert engine.writer.stats.written >= 1


@pytest.mark.asyncio
async def test_unknown_show_raises(controller, recorder):
    engine = _engine(controller, recorder)
    with pytest.raises(UnknownShowError) as excinfo:
        await engine.apply("does-not-exist", LIGHTS)
    assert excinfo.value.to_dict() == {
        "code": "unknown_show",
        "message": "Unknown show: does-not-exist",
        "details": {"show_id": "does-not-exist"},
    }


@pytest.mark.asyncio
async def test_invalid_config_leaves_running_session_alone(controller, recorder):
    engine = _engine(controller, recorder)
    session = await engine.apply("alternating-colors", LIGHTS)
    with pytest.raises(ConfigError):
        await engine.apply("alternating-colors", LIGHTS, config={"switch_interval": -1})
    assert engine.current is session
    assert session.active
    await engine.shutdown()


@pytest.mark.asyncio
async def test_failing_listener_does_not_stop_show(controller, recorder):
    engine = _engine(controller, recorder)

    def broken(light_id, color):
        raise RuntimeError("listener exploded")

    engine.add_listener(broken)
    session = await engine.apply("solid-color", LIGHTS)
    await session.wait()
    assert len(recorder.updates) == 2
    assert set(engine.last_colors) == {"A", "B"}
    engine.remove_listener(broken)
    engine.remove_listener(broken)


@pytest.mark.asyncio
async def test_engine_with_default_registry(controller, recorder):
    engine = ShowEngine(default_registry(), WriteCoordinator(controller, debounce_interval=0.0), recorder)
    session = await engine.apply("fire-effect", LIGHTS)
    await asyncio.sleep(0.1)
    status = engine.status()
    assert status["session"]["show"]["id"] == "fire-effect"
    assert status["session"]["targets"] == ["A", "B"]
    await engine.shutdown()
    assert session.done


@pytest.mark.asyncio
async def test_failing_writes_do_not_stop_the_show(recorder):
    controller = RecordingController(fail={"A"}, raise_for={"B"})
    engine = _engine(controller, recorder, debounce=0.0)
    lights = LIGHTS + [{"id": "C", "position": [20, 0]}]
    session = await engine.apply("alternating-colors", lights)

    await asyncio.sleep(0.15)
    failed, healthy = engine.writer.stats.failed, controller.keys().count("C")
    assert session.active
    assert failed >= 2
    assert healthy >= 1

    await asyncio.sleep(0.3)
    assert session.active
    assert engine.status()["running"] is True
    assert engine.writer.stats.failed > failed
    assert controller.keys().count("C") > healthy
    assert set(engine.writer.last_failures) == {"A", "B"}

    await engine.shutdown()
    await engine.writer.close()
    assert session.done
