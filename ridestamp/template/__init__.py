"""SVG template parsing and placeholder substitution."""

from .colors import extract_track_color, parse_hex_color, stroke_from_style
from .engine import (
    AssetProvider,
    Template,
    TemplateInfo,
    ValueSource,
    scan_template,
    substitute,
)
from .events import Event, EventKind, tokenize
from .metrics import SvgMetrics, parse_length_px, parse_viewbox, resolve_metrics
from .paths import PathDescriptor, build_elevation_path

__all__ = [
    "AssetProvider",
    "Event",
    "EventKind",
    "PathDescriptor",
    "SvgMetrics",
    "Template",
    "TemplateInfo",
    "ValueSource",
    "build_elevation_path",
    "extract_track_color",
    "parse_hex_color",
    "parse_length_px",
    "parse_viewbox",
    "resolve_metrics",
    "scan_template",
    "stroke_from_style",
    "substitute",
    "tokenize",
]
