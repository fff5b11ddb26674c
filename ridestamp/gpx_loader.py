"""Read GPX files into :class:`~ridestamp.models.Track` objects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import gpxpy
from gpxpy.gpx import GPX, GPXException

from .errors import LoadError
from .models import Track, TrackPoint

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def tracks_from_gpx(gpx: GPX) -> List[Track]:
    """Convert a parsed gpxpy document, keeping track and segment order."""

    tracks: List[Track] = []
    for gpx_track in gpx.tracks:
        segments = [
            [
                TrackPoint(
                    lat=float(point.latitude),
                    lon=float(point.longitude),
                    elevation=None if point.elevation is None else float(point.elevation),
                    time=point.time,
                )
                for point in segment.points
            ]
            for segment in gpx_track.segments
        ]
        tracks.append(Track(name=gpx_track.name, segments=segments))
    return tracks


def parse_tracks(xml: str, source: str = "GPX data") -> List[Track]:
    """Parse GPX text. Raises :class:`LoadError` naming ``source`` on malformed input."""

    try:
        gpx = gpxpy.parse(xml)
    except (GPXException, ValueError) as exc:
        raise LoadError(f"Unable to parse {source}: {exc}") from exc
    return tracks_from_gpx(gpx)


def load_tracks(path: PathLike) -> List[Track]:
    """Read and parse a GPX file. Raises :class:`LoadError` on any failure."""

    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Unable to read track file '{file_path}': {exc}") from exc
    tracks = parse_tracks(text, source=f"track file '{file_path}'")
    LOGGER.info(
        "Loaded %d tracks (%d points) from %s",
        len(tracks),
        sum(len(seg) for track in tracks for seg in track.segments),
        file_path,
    )
    return tracks
