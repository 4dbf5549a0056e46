import pytest

from luminary.services.controller import LoggingLightController


@pytest.mark.asyncio
async def test_records_last_color_per_endpoint():
    controller = LoggingLightController()
    assert await controller.set_color("A", 10, 20, 30) is True
    assert await controller.set_color("A", 40, 50, 60) is True
    assert controller.colors == {"A": (40, 50, 60)}
    assert controller.write_count == 2


@pytest.mark.asyncio
async def test_rejects_out_of_range_colors():
    controller = LoggingLightController()
    assert await controller.set_color("A", 360, 0, 0) is False
    assert await controller.set_color("A", 0, 0, 101) is False
    assert controller.colors == {}
    assert controller.write_count == 0


@pytest.mark.asyncio
async def test_debug_dump_appends_lines(tmp_path):
    dump = tmp_path / "debug" / "writes.log"
    controller = LoggingLightController(debug=True, debug_file=dump)
    await controller.set_color("porch", 120, 100, 50)
    await controller.set_color("hall", 0, 0, 100)
    lines = dump.read_text().splitlines()
    assert len(lines) == 2
    assert "light porch hsb 120.0/100.0/50.0" in lines[0]
    assert "light hall" in lines[1]
