"""Dataclasses describing track inputs, computed statistics and render requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

LonLat = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """Single recorded fix: WGS84 degrees, optional elevation (m) and time."""

    lat: float
    lon: float
    elevation: Optional[float] = None
    time: Optional[datetime] = None


@dataclass(slots=True)
class Track:
    """One recorded track: optional metadata name plus ordered segments."""

    name: Optional[str] = None
    segments: List[List[TrackPoint]] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ElevPoint:
    """Elevation profile sample at a cumulative (decimated) distance."""

    cumulative_distance_m: float
    elevation_m: float


@dataclass(frozen=True, slots=True)
class TrackStats:
    """Aggregate ride statistics computed once per loaded track."""

    track_name: str
    total_distance_m: float = 0.0
    total_time: timedelta = timedelta(0)
    moving_time: timedelta = timedelta(0)
    speed_avg_kmh: float = 0.0
    speed_avg_moving_kmh: float = 0.0
    speed_max_kmh: float = 0.0
    uphill_m: float = 0.0
    downhill_m: float = 0.0
    elevation_min_m: float = 0.0
    elevation_max_m: float = 0.0
    elevation_profile: Tuple[ElevPoint, ...] = ()
    coords: Tuple[LonLat, ...] = ()
    start_time: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class RgbaColor:
    """8-bit RGBA color parsed from a ``#RRGGBB`` or ``#RRGGBBAA`` literal."""

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, value: str) -> "RgbaColor":
        digits = value[1:] if value.startswith("#") else value
        if len(digits) not in (6, 8):
            raise ValueError(f"Expected 6 or 8 hex digits, got {value!r}")
        try:
            channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError as exc:
            raise ValueError(f"Invalid hex color {value!r}") from exc
        return cls(*channels)

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"

    def as_unit_rgba(self) -> Tuple[float, float, float, float]:
        """Return channels scaled to 0..1, as matplotlib expects them."""

        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)


@dataclass(frozen=True, slots=True)
class ImageRequest:
    """Pixel size and overlay color requested for an image placeholder."""

    identifier: str
    width_px: int
    height_px: int
    color: Optional[RgbaColor] = None
