"""Ride statistics card generator."""

from .analyzer import analyze
from .context import Context, StaticAssetProvider
from .errors import LoadError, MapRenderError, TemplateParseError
from .models import ElevPoint, Track, TrackPoint, TrackStats
from .template import Template, substitute

__all__ = [
    "analyze",
    "Context",
    "StaticAssetProvider",
    "LoadError",
    "MapRenderError",
    "TemplateParseError",
    "ElevPoint",
    "Track",
    "TrackPoint",
    "TrackStats",
    "Template",
    "substitute",
]
