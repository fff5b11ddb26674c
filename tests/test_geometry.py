"""Tests for geodesic distance and timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ridestamp.geometry import elapsed_seconds, geodesic_distance, polyline_length
from ridestamp.models import TrackPoint

from conftest import make_segment


def test_geodesic_distance_one_degree_of_latitude_at_equator() -> None:
    a = TrackPoint(lat=0.0, lon=0.0)
    b = TrackPoint(lat=1.0, lon=0.0)
    assert geodesic_distance(a, b) == pytest.approx(110574.4, abs=1.0)


def test_geodesic_distance_is_symmetric_and_zero_for_same_point() -> None:
    a = TrackPoint(lat=45.0, lon=10.0)
    b = TrackPoint(lat=45.01, lon=10.02)
    assert geodesic_distance(a, b) == pytest.approx(geodesic_distance(b, a))
    assert geodesic_distance(a, a) == pytest.approx(0.0)


def test_polyline_length_sums_consecutive_distances() -> None:
    points = make_segment(7, lat_step=0.001)
    expected = sum(geodesic_distance(p, q) for p, q in zip(points, points[1:]))
    assert polyline_length(points) == pytest.approx(expected)


@pytest.mark.parametrize("count", [0, 1])
def test_polyline_length_of_degenerate_lines_is_zero(count: int) -> None:
    assert polyline_length(make_segment(count)) == 0.0


def test_elapsed_seconds_truncates_to_whole_seconds() -> None:
    t1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert elapsed_seconds(t1, t1 + timedelta(seconds=1.9)) == 1
    assert elapsed_seconds(t1, t1 + timedelta(seconds=-0.5)) == 0
    assert elapsed_seconds(t1, t1 - timedelta(seconds=3)) == -3


def test_elapsed_seconds_requires_both_timestamps() -> None:
    t1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert elapsed_seconds(None, t1) is None
    assert elapsed_seconds(t1, None) is None
