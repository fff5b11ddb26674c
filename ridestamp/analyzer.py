"""Ride statistics and elevation profile extraction.

Total distance is measured on every recorded point. Everything else (time,
speed, climbing, elevation extremes and the profile) is computed on decimated
pairs: points ``i * stride`` and ``(i + 1) * stride`` of each segment. GPS
jitter between consecutive fixes would otherwise inflate instantaneous speed
and accumulated climbing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from itertools import accumulate
import logging
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from .config import DECIMATION_STRIDE, MOVING_SPEED_THRESHOLD_KMH
from .geometry import elapsed_seconds, geodesic_distance, polyline_length
from .models import ElevPoint, Track, TrackPoint, TrackStats
from .naming import resolve_track_name
from .utils import round_half_away

LOGGER = logging.getLogger(__name__)

PointPair = Tuple[TrackPoint, TrackPoint]


def decimated_pairs(
    segment: Sequence[TrackPoint], stride: int = DECIMATION_STRIDE
) -> Iterator[PointPair]:
    """Yield consecutive pairs of every ``stride``-th point of a segment."""

    sampled = segment[::stride]
    return zip(sampled, sampled[1:])


def speed_kmh(distance_m: float, seconds: float) -> float:
    """Speed over a pair; distance is rounded to whole metres first."""

    if seconds <= 0:
        return 0.0
    return round_half_away(distance_m) / seconds * 3.6


@dataclass(frozen=True, slots=True)
class _PairTotals:
    """Running totals folded over the decimated pairs of a whole document."""

    distance_m: float = 0.0
    total_s: int = 0
    moving_s: int = 0
    speed_max_kmh: float = 0.0
    uphill_m: float = 0.0
    downhill_m: float = 0.0
    elevation_min_m: Optional[float] = None
    elevation_max_m: Optional[float] = None
    sample: Optional[ElevPoint] = None

    def step(self, pair: PointPair, moving_threshold_kmh: float) -> "_PairTotals":
        first, second = pair
        distance_m = geodesic_distance(first, second)
        cumulative = self.distance_m + distance_m
        totals = replace(self, distance_m=cumulative, sample=None)

        seconds = elapsed_seconds(first.time, second.time)
        if seconds is not None and seconds > 0:
            speed = speed_kmh(distance_m, seconds)
            totals = replace(
                totals,
                total_s=totals.total_s + seconds,
                moving_s=totals.moving_s
                + (seconds if speed > moving_threshold_kmh else 0),
                speed_max_kmh=max(totals.speed_max_kmh, speed),
            )

        if first.elevation is not None and second.elevation is not None:
            e1 = first.elevation
            delta = second.elevation - e1
            totals = replace(
                totals,
                uphill_m=totals.uphill_m + max(delta, 0.0),
                downhill_m=totals.downhill_m + max(-delta, 0.0),
                # Extremes only look at the first point of each pair.
                elevation_min_m=e1
                if totals.elevation_min_m is None
                else min(totals.elevation_min_m, e1),
                elevation_max_m=e1
                if totals.elevation_max_m is None
                else max(totals.elevation_max_m, e1),
                sample=ElevPoint(cumulative, e1),
            )
        return totals


def _iter_segments(tracks: Iterable[Track]) -> Iterator[Sequence[TrackPoint]]:
    for track in tracks:
        yield from track.segments


def _first_timestamp(tracks: Sequence[Track]) -> Optional[datetime]:
    for segment in _iter_segments(tracks):
        for point in segment:
            if point.time is not None:
                return point.time
    return None


def _or_zero(value: Optional[float]) -> float:
    return 0.0 if value is None else value


def analyze(
    tracks: Sequence[Track],
    filename: Optional[str] = None,
    *,
    stride: int = DECIMATION_STRIDE,
    moving_threshold_kmh: float = MOVING_SPEED_THRESHOLD_KMH,
) -> TrackStats:
    """Compute :class:`TrackStats` for every track and segment of a document.

    Args:
        tracks: Tracks in document order, each holding ordered segments.
        filename: Source file name; its stem names the result when no track
            carries a usable name.
        stride: Decimation stride used for the pair statistics.
        moving_threshold_kmh: Pair speed above which time counts as moving.

    Returns:
        Immutable statistics. An empty document yields zero values and empty
        profile/coordinate sequences.
    """

    stride = max(1, stride)
    segments = list(_iter_segments(tracks))

    total_distance_m = sum(polyline_length(segment) for segment in segments)
    coords = tuple((p.lon, p.lat) for segment in segments for p in segment)

    pairs = (pair for segment in segments for pair in decimated_pairs(segment, stride))
    states = list(
        accumulate(
            pairs,
            lambda acc, pair: acc.step(pair, moving_threshold_kmh),
            initial=_PairTotals(),
        )
    )
    totals = states[-1]
    profile = tuple(state.sample for state in states if state.sample is not None)

    rounded_distance = round_half_away(total_distance_m)
    speed_avg = rounded_distance / totals.total_s * 3.6 if totals.total_s > 0 else 0.0
    speed_moving = (
        rounded_distance / totals.moving_s * 3.6 if totals.moving_s > 0 else 0.0
    )

    stats = TrackStats(
        track_name=resolve_track_name(tracks, filename),
        total_distance_m=total_distance_m,
        total_time=timedelta(seconds=totals.total_s),
        moving_time=timedelta(seconds=totals.moving_s),
        speed_avg_kmh=speed_avg,
        speed_avg_moving_kmh=speed_moving,
        speed_max_kmh=totals.speed_max_kmh,
        uphill_m=totals.uphill_m,
        downhill_m=totals.downhill_m,
        elevation_min_m=_or_zero(totals.elevation_min_m),
        elevation_max_m=_or_zero(totals.elevation_max_m),
        elevation_profile=profile,
        coords=coords,
        start_time=_first_timestamp(tracks),
    )
    LOGGER.debug(
        "Analyzed %d segments / %d points: %.0f m, %d profile samples",
        len(segments),
        len(coords),
        total_distance_m,
        len(profile),
    )
    return stats
