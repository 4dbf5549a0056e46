import math

import pytest
from pydantic import ValidationError

from luminary.errors import InvalidColorError
from luminary.models.color import (
    HUE_MAX,
    HSBColor,
    blend,
    check_bounds,
    clamp,
    coerce_color,
    in_bounds,
    lerp,
    wrap_hue,
)


def test_clamped_keeps_every_channel_in_range():
    color = HSBColor.clamped(400, -5, 250)
    assert color.hue == HUE_MAX
    assert color.hue < 360
    assert color.saturation == 0
    assert color.brightness == 100


def test_clamped_hue_at_360_does_not_wrap_to_zero():
    assert HSBColor.clamped(360, 50, 50).hue == HUE_MAX


def test_clamp_treats_nan_as_lower_bound():
    assert clamp(math.nan, 0.0, 100.0) == 0.0
    assert HSBColor.clamped(math.nan, math.nan, math.nan).as_tuple() == (0.0, 0.0, 0.0)


def test_strict_construction_rejects_out_of_range():
    with pytest.raises(ValidationError):
        HSBColor(hue=360, saturation=0, brightness=0)
    with pytest.raises(ValidationError):
        HSBColor(hue=0, saturation=101, brightness=0)


def test_check_bounds_raises_invalid_color():
    check_bounds(359.9, 100, 0)
    with pytest.raises(InvalidColorError) as excinfo:
        check_bounds(0, 0, -1)
    assert excinfo.value.to_dict()["code"] == "invalid_color"
    assert not in_bounds(360, 0, 0)


def test_wrap_hue_only_for_phase_math():
    assert wrap_hue(370) == pytest.approx(10)
    assert wrap_hue(-30) == pytest.approx(330)
    assert wrap_hue(720) == 0


def test_coerce_color_accepts_mappings_and_triples():
    assert coerce_color({"hue": 120, "saturation": 50}).as_tuple() == (120, 50, 0)
    assert coerce_color((10, 200, 50)).as_tuple() == (10, 100, 50)
    assert coerce_color(HSBColor(hue=1, saturation=2, brightness=3)).as_tuple() == (1, 2, 3)


def test_lerp_endpoints_and_midpoint():
    start = HSBColor(hue=200, saturation=100, brightness=20)
    end = HSBColor(hue=0, saturation=50, brightness=100)
    assert lerp(start, end, 0).as_tuple() == start.as_tuple()
    assert lerp(start, end, 1).as_tuple() == end.as_tuple()
    assert lerp(start, end, 0.5).as_tuple() == pytest.approx((100, 75, 60))


def test_blend_clamps_factor():
    base = HSBColor(hue=280, saturation=80, brightness=90)
    accent = HSBColor(hue=30, saturation=100, brightness=100)
    assert blend(base, accent, 5).as_tuple() == accent.as_tuple()
    assert blend(base, accent, -1).as_tuple() == base.as_tuple()


def test_with_brightness_clamps():
    color = HSBColor(hue=10, saturation=20, brightness=30)
    assert color.with_brightness(130).brightness == 100
    assert color.with_saturation(-3).saturation == 0
