from __future__ import annotations

import math

import pytest

from holland.model.timeline import TimePoint, Timeline, lerp, wrap


def _timeline(*pairs: tuple[float, float], period: float | None = None) -> Timeline[float]:
    return Timeline([TimePoint(mins, val) for mins, val in pairs], period=period)


def test_lerp() -> None:
    assert lerp(0, 100, 0.25) == 25
    assert lerp(10, -10, 0.5) == 0


def test_two_points_interpolate() -> None:
    timeline = _timeline((0, 0), (10, 100))

    assert timeline.at(5) == 50
    assert timeline.at(0) == 0
    assert timeline.at(10) == 100


def test_non_periodic_clamps_outside_keyframes() -> None:
    timeline = _timeline((5, 10), (10, 20))

    assert timeline.at(-100) == 10
    assert timeline.at(4.99) == 10
    assert timeline.at(10.01) == 20
    assert timeline.at(1000) == 20


def test_periodic_wraps_last_to_first() -> None:
    timeline = _timeline((0, 0), (50, 100), (59, 200), period=60)

    assert timeline.at(59.5) == pytest.approx(100)
    assert timeline.at(60) == 0
    assert timeline.at(61) == pytest.approx(2)


def test_periodic_wrap_segment_from_high_value() -> None:
    timeline = _timeline((0, 100), (55, 200), (59, 300), period=60)

    assert timeline.at(59.5) == pytest.approx(200)
    assert timeline.at(59.75) == pytest.approx(150)


def test_periodic_negative_minutes() -> None:
    timeline = _timeline((0, 0), (50, 100), (59, 200), period=60)

    assert timeline.at(-1) == timeline.at(59) == 200
    assert timeline.at(-60) == 0
    assert timeline.at(-10) == timeline.at(50)


def test_periodic_before_first_keyframe_uses_wrap_segment() -> None:
    timeline = _timeline((10, 0), (40, 300), period=60)

    # 40 -> 70 carries 300 -> 0.
    assert timeline.at(55) == pytest.approx(150)
    assert timeline.at(5) == pytest.approx(50)


def test_exact_values_at_keyframes() -> None:
    values = [(0, 0.1), (7, 0.3), (13.25, 1 / 3), (42, 9.7)]
    timeline = _timeline(*values, period=60)

    for mins, val in values:
        assert timeline.at(mins) == val


def test_single_point_is_constant() -> None:
    assert _timeline((3, 7)).at(100) == 7
    assert _timeline((3, 7), period=60).at(-12.5) == 7


def test_custom_interp_holds_left_value() -> None:
    timeline = Timeline(
        [TimePoint(0, "a"), TimePoint(10, "b")],
        period=20,
        interp=lambda start, end, ratio: start,
    )

    assert timeline.at(9.99) == "a"
    assert timeline.at(10) == "b"
    assert timeline.at(19.99) == "b"
    assert timeline.at(20) == "a"


def test_rejects_empty_points() -> None:
    with pytest.raises(ValueError, match="at least one point"):
        Timeline([])


def test_rejects_non_ascending_points() -> None:
    with pytest.raises(ValueError, match="strictly ascending"):
        _timeline((0, 0), (5, 1), (5, 2))
    with pytest.raises(ValueError, match="strictly ascending"):
        _timeline((5, 0), (1, 1))


def test_rejects_periodic_points_outside_period() -> None:
    with pytest.raises(ValueError):
        _timeline((0, 0), (60, 1), period=60)
    with pytest.raises(ValueError):
        _timeline((-1, 0), (10, 1), period=60)


def test_rejects_non_finite_time() -> None:
    timeline = _timeline((0, 0), (10, 1), period=60)

    with pytest.raises(ValueError):
        timeline.at(math.nan)
    with pytest.raises(ValueError):
        timeline.at(math.inf)


def test_wrap_is_a_true_modulo() -> None:
    assert wrap(-1, 60) == 59
    assert wrap(125, 60) == 5
    assert wrap(-1e-18, 60) == 0.0
    assert 0 <= wrap(-1e-18, 60) < 60
