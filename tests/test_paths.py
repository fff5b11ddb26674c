"""Tests for elevation path synthesis."""

from __future__ import annotations

import pytest

from ridestamp.models import ElevPoint
from ridestamp.template.paths import PathDescriptor, build_elevation_path


def test_parse_relative_descriptor() -> None:
    descriptor = PathDescriptor.parse("m 2.64583,169.33333 10.583337,-31.75")
    assert descriptor.prefix == "m"
    assert not descriptor.is_absolute
    assert descriptor.start_point == "2.64583,169.33333"
    assert descriptor.length_units == pytest.approx(10.583337)
    assert descriptor.height_units == pytest.approx(-31.75)


def test_parse_absolute_descriptor_is_relative_to_start() -> None:
    descriptor = PathDescriptor.parse("M 10,276 275.75,236")
    assert descriptor.is_absolute
    assert descriptor.length_units == pytest.approx(265.75)
    assert descriptor.height_units == pytest.approx(-40.0)


def test_parse_single_point_has_empty_box() -> None:
    descriptor = PathDescriptor.parse("m 5,5")
    assert (descriptor.length_units, descriptor.height_units) == (0.0, 0.0)


@pytest.mark.parametrize("data", ["", "m", "L 0,0 1,1", "m 0;0 1,1", "m 0,0 a,b"])
def test_parse_rejects_unexpected_data(data: str) -> None:
    with pytest.raises(ValueError):
        PathDescriptor.parse(data)


def test_profile_fills_box_and_returns_to_baseline() -> None:
    descriptor = PathDescriptor.parse("m 0,100 100,-50")
    profile = [ElevPoint(0, 10), ElevPoint(500, 60), ElevPoint(1000, 110)]
    assert (
        build_elevation_path(profile, descriptor, 1000)
        == "m 0,100 l 0 0 l 50 -25 l 50 -25 l 0 50"
    )


def test_flat_profile_uses_minimum_range() -> None:
    descriptor = PathDescriptor.parse("m 0,100 100,-50")
    profile = [ElevPoint(0, 200), ElevPoint(500, 225), ElevPoint(1000, 250)]
    # 50 m of relief over a 100 m floor only reaches half the box height.
    assert (
        build_elevation_path(profile, descriptor, 1000)
        == "m 0,100 l 0 0 l 50 -12.5 l 50 -12.5 l 0 25"
    )


def test_absolute_prefix_is_kept() -> None:
    descriptor = PathDescriptor.parse("M 10,276 275.75,236")
    path = build_elevation_path([ElevPoint(100, 5)], descriptor, 100)
    assert path.startswith("M 10,276 l ")
    assert path.endswith("l 0 0")


def test_target_box_overrides_descriptor() -> None:
    descriptor = PathDescriptor.parse("m 0,0 1,1")
    profile = [ElevPoint(0, 0), ElevPoint(10, 100)]
    assert build_elevation_path(profile, descriptor, 10, (20, -10)) == "m 0,0 l 0 0 l 20 -10 l 0 10"


def test_empty_profile_is_a_closed_baseline() -> None:
    descriptor = PathDescriptor.parse("m 3,4 10,-5")
    assert build_elevation_path([], descriptor, 1000) == "m 3,4 l 0 0"


@pytest.mark.parametrize("distance", [0, -1])
def test_non_positive_distance_is_rejected(distance: float) -> None:
    descriptor = PathDescriptor.parse("m 0,0 1,1")
    with pytest.raises(ValueError):
        build_elevation_path([ElevPoint(0, 1)], descriptor, distance)
