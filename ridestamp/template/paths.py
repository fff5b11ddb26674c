"""Elevation profile path synthesis.

A template marks the profile area with a two-point path such as
``m 2.64583,169.33333 10.583337,-31.75``: the first point anchors the
profile's baseline start and the second (relative for ``m``, absolute for
``M``) spans its length and height. The generated path starts at the same
anchor, follows the profile with relative ``l`` segments and drops back to
the baseline so it can be filled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import ELEVATION_PROFILE_MIN_RANGE_M
from ..models import ElevPoint
from ..utils import format_number


@dataclass(frozen=True, slots=True)
class PathDescriptor:
    prefix: str
    start_point: str
    length_units: float
    height_units: float

    @property
    def is_absolute(self) -> bool:
        return self.prefix == "M"

    @classmethod
    def parse(cls, path_data: str) -> "PathDescriptor":
        """Parse the leading move command of a ``d`` attribute.

        Raises:
            ValueError: If the data does not start with ``m``/``M`` followed
                by an ``x,y`` start point.
        """

        tokens = path_data.split()
        if len(tokens) < 2 or tokens[0] not in ("m", "M"):
            raise ValueError(f"Path data does not start with a move command: {path_data!r}")
        prefix, start_point = tokens[0], tokens[1]
        start_x, start_y = _parse_pair(start_point)

        length = height = 0.0
        if len(tokens) > 2:
            x, y = _parse_pair(tokens[2])
            if prefix == "M":
                length, height = x - start_x, y - start_y
            else:
                length, height = x, y
        return cls(prefix, start_point, length, height)


def _parse_pair(token: str) -> Tuple[float, float]:
    parts = token.split(",")
    if len(parts) != 2:
        raise ValueError(f"Expected an 'x,y' coordinate pair, got {token!r}")
    return float(parts[0]), float(parts[1])


def build_elevation_path(
    profile: Sequence[ElevPoint],
    descriptor: PathDescriptor,
    total_distance_m: float,
    target_box: Optional[Tuple[float, float]] = None,
    *,
    min_range_m: float = ELEVATION_PROFILE_MIN_RANGE_M,
) -> str:
    """Return path data drawing ``profile`` inside the descriptor's box.

    Args:
        profile: Samples in track order.
        descriptor: Anchor and box parsed from the template path.
        total_distance_m: Distance mapped onto the full box width.
        target_box: ``(width, height)`` in template units; defaults to the
            descriptor's length and height.
        min_range_m: Floor for the elevation range mapped onto the height.

    Raises:
        ValueError: If ``total_distance_m`` is not positive.
    """

    if total_distance_m <= 0:
        raise ValueError("total_distance_m must be greater than zero")
    width, height = target_box or (descriptor.length_units, descriptor.height_units)

    elevations = [sample.elevation_m for sample in profile]
    offset = min(elevations) if elevations else 0.0
    elevation_range = max(max(elevations) - offset, min_range_m) if elevations else min_range_m
    x_factor = width / total_distance_m
    y_factor = height / elevation_range

    commands: List[str] = [descriptor.prefix, descriptor.start_point]
    prev_x = prev_y = 0.0
    for sample in profile:
        x = sample.cumulative_distance_m * x_factor
        y = (sample.elevation_m - offset) * y_factor
        commands.append(f"l {format_number(x - prev_x)} {format_number(y - prev_y)}")
        prev_x, prev_y = x, y
    commands.append(f"l 0 {format_number(-prev_y)}")
    return " ".join(commands)
