"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable track factories so analyzer,
context and template tests build their inputs the same way.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ridestamp.models import ElevPoint, Track, TrackPoint, TrackStats


START = datetime(2024, 5, 4, 8, 30, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_segment(
    count: int,
    *,
    lat0: float = 45.0,
    lon0: float = 10.0,
    lat_step: float = 0.0001,
    seconds_step: Optional[float] = 10.0,
    elevation: Optional[Callable[[int], Optional[float]]] = None,
    start: datetime = START,
) -> List[TrackPoint]:
    """Points heading north along a meridian at a constant pace."""

    points = []
    for i in range(count):
        points.append(
            TrackPoint(
                lat=lat0 + i * lat_step,
                lon=lon0,
                elevation=elevation(i) if elevation is not None else None,
                time=start + timedelta(seconds=i * seconds_step)
                if seconds_step is not None
                else None,
            )
        )
    return points


def make_gpx(tracks: Sequence[Track]) -> str:
    """Serialise tracks as minimal GPX 1.1 text."""

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">',
    ]
    for track in tracks:
        lines.append("  <trk>")
        if track.name is not None:
            lines.append(f"    <name>{track.name}</name>")
        for segment in track.segments:
            lines.append("    <trkseg>")
            for p in segment:
                lines.append(f'      <trkpt lat="{p.lat}" lon="{p.lon}">')
                if p.elevation is not None:
                    lines.append(f"        <ele>{p.elevation}</ele>")
                if p.time is not None:
                    lines.append(
                        f"        <time>{p.time.strftime('%Y-%m-%dT%H:%M:%SZ')}</time>"
                    )
                lines.append("      </trkpt>")
            lines.append("    </trkseg>")
        lines.append("  </trk>")
    lines.append("</gpx>")
    return "\n".join(lines) + "\n"


def make_stats(**overrides) -> TrackStats:
    values = dict(
        track_name="Morning Ride",
        total_distance_m=22000.4,
        total_time=timedelta(hours=1, minutes=2, seconds=3),
        moving_time=timedelta(minutes=58, seconds=7),
        speed_avg_kmh=21.28,
        speed_avg_moving_kmh=22.71,
        speed_max_kmh=48.04,
        uphill_m=312.6,
        downhill_m=298.2,
        elevation_min_m=21.4,
        elevation_max_m=187.5,
        elevation_profile=(
            ElevPoint(0.0, 21.4),
            ElevPoint(11000.0, 187.5),
            ElevPoint(22000.4, 40.0),
        ),
        coords=((10.0, 45.0), (10.0, 45.1), (10.1, 45.1)),
        start_time=START,
    )
    values.update(overrides)
    return TrackStats(**values)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def hilly_track() -> Track:
    """101 points climbing 5 m per point for 50 points, then descending."""

    def _elevation(i: int) -> float:
        return 100.0 + 5.0 * i if i <= 50 else 350.0 - 5.0 * (i - 50)

    return Track(name="Hill Repeats", segments=[make_segment(101, elevation=_elevation)])


@pytest.fixture
def stats() -> TrackStats:
    return make_stats()


@pytest.fixture
def gpx_file(tmp_path, hilly_track):
    path = tmp_path / "evening_loop.gpx"
    path.write_text(make_gpx([hilly_track]), encoding="utf-8")
    return path
