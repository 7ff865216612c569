import math

import pytest

from qknob.core.angle_math import (
    AngleScale,
    distance,
    normalize_angle,
    offset_from,
    point_angle,
)


@pytest.mark.parametrize("dx, dy, expected", [
    (0, -10, 0.0),     # up
    (10, 0, 90.0),     # right
    (0, 10, 180.0),    # down
    (-10, 0, 270.0),   # left
    (10, -10, 45.0),
    (-10, -10, 315.0),
])
def test_point_angle_up_is_zero_and_clockwise(dx, dy, expected):
    assert point_angle(dx, dy) == pytest.approx(expected)


def test_point_angle_is_defined_at_the_center():
    assert point_angle(0, 0) == 0.0
    assert point_angle(0.0, 0.0) == 0.0
    assert point_angle(-0.0, 0.0) == 0.0


def test_point_angle_stays_in_range_just_left_of_up():
    angle = point_angle(-1e-9, -10)
    assert 0.0 <= angle < 360.0
    assert angle == pytest.approx(360.0, abs=1e-6)


@pytest.mark.parametrize("angle", [
    0.0, 359.999, 360.0, 361.5, -0.5, -360.0, -725.25, 1085.0, 7200.0, -1e-20, 1e-12,
])
def test_normalize_angle_range_and_congruence(angle):
    result = normalize_angle(angle)
    assert 0.0 <= result < 360.0
    turns = (angle - result) / 360.0
    assert turns == pytest.approx(round(turns), abs=1e-9)


def test_normalize_angle_handles_multiple_turns():
    assert normalize_angle(-725.0) == pytest.approx(355.0)
    assert normalize_angle(1090.0) == pytest.approx(10.0)


def test_distance_and_offset():
    assert distance(3, -4) == 5.0
    assert offset_from((130, 60), (100, 100)) == (30, -40)


def test_scale_maps_domain_to_full_turn(scale):
    assert scale.to_angle(0) == 0.0
    assert scale.to_angle(50) == pytest.approx(180.0)
    assert scale.to_angle(100) == pytest.approx(360.0)
    assert scale.to_value(180.0) == pytest.approx(50.0)


@pytest.mark.parametrize("domain_min, domain_max", [(0, 100), (-20, 20), (0.5, 0.75), (1000, 5000)])
def test_scale_round_trip(domain_min, domain_max):
    s = AngleScale(domain_min, domain_max)
    for i in range(11):
        value = domain_min + (domain_max - domain_min) * i / 10
        assert s.to_value(s.to_angle(value)) == pytest.approx(value, abs=1e-9)


def test_scale_does_not_clamp(scale):
    assert scale.to_angle(150) == pytest.approx(540.0)
    assert scale.to_value(-36.0) == pytest.approx(-10.0)
    assert scale.clamp_value(150) == 100.0
    assert scale.clamp_value(-1) == 0.0
    assert not scale.contains(100.5)


@pytest.mark.parametrize("domain_min, domain_max", [(10, 10), (10, 5), (0, math.inf), (math.nan, 1)])
def test_scale_rejects_malformed_domain(domain_min, domain_max):
    with pytest.raises(ValueError):
        AngleScale(domain_min, domain_max)


def test_with_domain_keeps_angle_range():
    s = AngleScale(0, 10, 0, 270).with_domain(-5, 5)
    assert (s.domain_min, s.domain_max) == (-5, 5)
    assert s.to_angle(5) == pytest.approx(270.0)
