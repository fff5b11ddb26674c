"""Per-track substitution context: statistics, formatted values and map asset."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import RLock
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from cachetools import LRUCache

from .analyzer import analyze
from .config import ELEVATION_PATH_ID, MAP_IMAGE_ID
from .errors import MapRenderError
from .gpx_loader import load_tracks
from .models import LonLat, RgbaColor, Track, TrackStats
from .template.paths import PathDescriptor, build_elevation_path
from .utils import format_hhmmss

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]
MapRenderer = Callable[[Sequence[LonLat], int, int, Optional[RgbaColor]], str]
_AssetKey = Tuple[int, int, Optional[RgbaColor]]


def _default_renderer(
    coords: Sequence[LonLat], width_px: int, height_px: int, color: Optional[RgbaColor]
) -> str:
    # Imported lazily: matplotlib is only needed once a map is requested.
    from .map_render import render_track_map_href

    return render_track_map_href(coords, width_px, height_px, color)


def _value_formatters() -> Dict[str, Callable[[TrackStats], str]]:
    return {
        "value_track_name": lambda s: s.track_name,
        "value_distance": lambda s: f"{s.total_distance_m / 1000.0:.0f}km",
        "value_speed": lambda s: f"{s.speed_avg_kmh:.1f}km/h",
        "value_speed_max": lambda s: f"{s.speed_max_kmh:.1f}km/h",
        "value_speed_moving": lambda s: f"{s.speed_avg_moving_kmh:.1f}km/h",
        "value_uphill": lambda s: f"{s.uphill_m:.0f}m",
        "value_downhill": lambda s: f"{s.downhill_m:.0f}m",
        "value_elevation_max": lambda s: f"{s.elevation_max_m:.0f}m",
        "value_elevation_min": lambda s: f"{s.elevation_min_m:.0f}m",
        "value_time": lambda s: format_hhmmss(s.total_time),
        "value_moving_time": lambda s: format_hhmmss(s.moving_time),
    }


_VALUE_FORMATTERS = _value_formatters()


class Context:
    """Statistics of one loaded track plus a memoized map image.

    The map image is cached for a single ``(width, height, color)`` key; a
    request for any other key renders again and replaces the entry. Access to
    the cache is serialised so a context may be shared across threads.
    """

    def __init__(self, stats: TrackStats, renderer: Optional[MapRenderer] = None) -> None:
        self.stats = stats
        self._renderer = renderer or _default_renderer
        self._lock = RLock()
        self._assets: LRUCache[_AssetKey, str] = LRUCache(maxsize=1)

    @classmethod
    def from_tracks(
        cls,
        tracks: Sequence[Track],
        filename: Optional[str] = None,
        renderer: Optional[MapRenderer] = None,
    ) -> "Context":
        return cls(analyze(tracks, filename), renderer=renderer)

    @classmethod
    def load(cls, path: PathLike, renderer: Optional[MapRenderer] = None) -> "Context":
        """Load a GPX file. Raises :class:`~ridestamp.errors.LoadError`."""

        tracks = load_tracks(path)
        return cls.from_tracks(tracks, str(path), renderer=renderer)

    def get_string(self, identifier: str) -> Optional[str]:
        """Formatted value for a ``value_*`` identifier, ``None`` if unknown."""

        if identifier == "value_date":
            start = self.stats.start_time
            return start.strftime("%Y-%m-%d") if start is not None else None
        formatter = _VALUE_FORMATTERS.get(identifier)
        if formatter is None:
            return None
        return formatter(self.stats)

    def get_path(self, identifier: str, descriptor: PathDescriptor) -> Optional[str]:
        """Path data for a ``path_*`` identifier, ``None`` if it cannot be drawn."""

        if identifier != ELEVATION_PATH_ID:
            return None
        stats = self.stats
        if not stats.elevation_profile or stats.total_distance_m <= 0:
            LOGGER.debug("No elevation profile available for %s", identifier)
            return None
        return build_elevation_path(
            stats.elevation_profile, descriptor, stats.total_distance_m
        )

    def get_image(
        self,
        identifier: str,
        width_px: int,
        height_px: int,
        color: Optional[RgbaColor] = None,
    ) -> Optional[str]:
        """Image reference for an ``image_*`` identifier, ``None`` if unavailable."""

        if identifier != MAP_IMAGE_ID:
            return None
        key: _AssetKey = (width_px, height_px, color)
        with self._lock:
            cached = self._assets.get(key)
            if cached is not None:
                return cached
            try:
                href = self._renderer(self.stats.coords, width_px, height_px, color)
            except (MapRenderError, ValueError) as exc:
                LOGGER.warning(
                    "Map image %dx%d unavailable: %s", width_px, height_px, exc
                )
                return None
            self._assets.clear()
            self._assets[key] = href
            LOGGER.debug("Rendered map image %dx%d", width_px, height_px)
            return href

    def clear_assets(self) -> None:
        """Drop the memoized map image."""

        with self._lock:
            self._assets.clear()


class StaticAssetProvider:
    """Asset provider serving a map image rendered ahead of time."""

    def __init__(self, map_href: Optional[str]) -> None:
        self.map_href = map_href

    def get_image(
        self,
        identifier: str,
        width_px: int,
        height_px: int,
        color: Optional[RgbaColor] = None,
    ) -> Optional[str]:
        if identifier == MAP_IMAGE_ID:
            return self.map_href
        return None
