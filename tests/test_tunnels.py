from __future__ import annotations

import math

import pytest

from holland.config import default_tunnels_config
from holland.model.tunnels import TunnelPhases, Tunnels
from holland.model.types import BIKE, BIKES_ENTER, CAR, NORMAL, PACE, SWEEP


@pytest.fixture(scope="module")
def tunnels() -> Tunnels:
    return Tunnels()


def test_default_config_is_used(tunnels: Tunnels) -> None:
    assert tunnels.config == default_tunnels_config()
    assert tunnels.period == 60


def test_get_phases(tunnels: Tunnels) -> None:
    assert tunnels.get_phases(45) == TunnelPhases(east=BIKES_ENTER, west=NORMAL)
    assert tunnels.get_phases(15) == TunnelPhases(east=NORMAL, west=BIKES_ENTER)
    assert tunnels.get_phases(105) == tunnels.get_phases(45)


def test_all_vehicles_order_and_kinds(tunnels: Tunnels) -> None:
    views = tunnels.get_all_vehicles(47)
    kinds = [view.kind for view in views]

    assert kinds[-2:] == [SWEEP, PACE]
    assert set(kinds[:-2]) == {CAR, BIKE}
    directions = [view.direction for view in views[:-2]]
    assert directions == sorted(directions)  # east before west
    assert all(view.pos.opacity > 0 for view in views)


def test_vehicle_count_matches_across_cycle_boundary(tunnels: Tunnels) -> None:
    assert len(tunnels.get_all_vehicles(0)) == len(tunnels.get_all_vehicles(60))


@pytest.mark.parametrize("minute", [0, 7.5, 14.25, 33.25, 45, 51.75, 59.5])
def test_queries_are_deterministic(tunnels: Tunnels, minute: float) -> None:
    assert tunnels.get_all_vehicles(minute) == tunnels.get_all_vehicles(minute)
    assert tunnels.get_color_rectangles(minute) == tunnels.get_color_rectangles(minute)
    assert tunnels.get_phases(minute) == tunnels.get_phases(minute)


@pytest.mark.parametrize("minute", [0, 7.5, 14.25, 33.25, 45, 51.75, 59.5])
def test_queries_are_periodic(tunnels: Tunnels, minute: float) -> None:
    for shifted in (minute + 60, minute - 60, minute + 600):
        assert tunnels.get_all_vehicles(shifted) == tunnels.get_all_vehicles(minute)
        assert tunnels.get_color_rectangles(shifted) == tunnels.get_color_rectangles(minute)
        assert tunnels.get_phases(shifted) == tunnels.get_phases(minute)


def test_fresh_model_gives_same_answers(tunnels: Tunnels) -> None:
    other = Tunnels(default_tunnels_config())

    for minute in (3.5, 46.25, 55):
        assert other.get_all_vehicles(minute) == tunnels.get_all_vehicles(minute)


def test_color_rectangles_concatenate_bores(tunnels: Tunnels) -> None:
    east_only = tunnels.get_color_rectangles(55)
    west_only = tunnels.get_color_rectangles(25)

    assert [rect.direction for rect in east_only] == ["east", "east"]
    assert [rect.direction for rect in west_only] == ["west", "west"]
    assert tunnels.get_color_rectangles(40) == []


def test_vehicle_paths_are_continuous(tunnels: Tunnels) -> None:
    step = 0.05
    epsilon = 1e-4
    vehicles = tunnels.eb.cars + tunnels.eb.bikes + tunnels.wb.cars + tunnels.wb.bikes
    for vehicle in vehicles:
        timeline = vehicle.timeline
        minute = timeline.first.min
        while minute < timeline.last.min:
            here = timeline.at(minute)
            there = timeline.at(minute + epsilon)
            assert abs(there.x - here.x) < 1, vehicle.id
            assert abs(there.y - here.y) < 1, vehicle.id
            minute += step
    for escort in tunnels.escorts:
        for idx in range(1200):
            minute = idx * step
            here = escort.pos(minute)
            there = escort.pos(minute + epsilon)
            assert abs(there.x - here.x) < 1, escort.kind
            assert abs(there.y - here.y) < 1, escort.kind


def test_queued_cars_release_in_spawn_order(tunnels: Tunnels) -> None:
    for tunnel in (tunnels.eb, tunnels.wb):
        shared = [car for car in tunnel.cars if car.metadata["lane"] == "R"]
        by_entry = sorted(shared, key=lambda car: car.metadata["entry_min"])
        assert by_entry == shared


def test_no_bike_is_dropped(tunnels: Tunnels) -> None:
    for tunnel in (tunnels.eb, tunnels.wb):
        release = sorted(bike.metadata["release_index"] for bike in tunnel.bikes)
        assert release == list(range(len(tunnel.bikes)))
        entries = [bike.metadata["entry_min"] for bike in tunnel.bikes]
        assert all(0 <= entry < tunnel.config.sweep_start_min for entry in entries)


def test_space_time_shares(tunnels: Tunnels) -> None:
    shares = tunnels.space_time_shares("east")

    assert shares.bikes == pytest.approx(6000 / 48000, abs=1e-3)
    assert shares.buffer == pytest.approx(2000 / 48000, abs=1e-3)
    assert shares.bikes + shares.buffer + shares.cars == pytest.approx(1)
    assert tunnels.space_time_shares("west").bikes == pytest.approx(shares.bikes)


def test_non_finite_minute_rejected(tunnels: Tunnels) -> None:
    with pytest.raises(ValueError):
        tunnels.get_all_vehicles(math.nan)
    with pytest.raises(ValueError):
        tunnels.get_phases(math.inf)
    with pytest.raises(ValueError):
        tunnels.tunnel("north")
