"""Geodesic distance and timestamp helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import numpy as np
from pyproj import Geod

from .models import TrackPoint

# Karney geodesics on the WGS84 ellipsoid.
WGS84 = Geod(ellps="WGS84")


def geodesic_distance(p1: TrackPoint, p2: TrackPoint) -> float:
    """Return the ellipsoidal distance in metres between two points."""

    _fwd, _back, distance = WGS84.inv(p1.lon, p1.lat, p2.lon, p2.lat)
    return float(distance)


def polyline_length(points: Sequence[TrackPoint]) -> float:
    """Return the summed geodesic length of consecutive points."""

    if len(points) < 2:
        return 0.0
    lons = np.asarray([p.lon for p in points], dtype=float)
    lats = np.asarray([p.lat for p in points], dtype=float)
    return float(WGS84.line_length(lons, lats))


def elapsed_seconds(t1: Optional[datetime], t2: Optional[datetime]) -> Optional[int]:
    """Return whole seconds from ``t1`` to ``t2`` (truncated), or ``None``."""

    if t1 is None or t2 is None:
        return None
    return int((t2 - t1).total_seconds())
