"""Document size metrics used to size raster placeholders.

SVG templates commonly declare a pixel viewport (``width="1080"``) over a
millimetre-like user space (``viewBox="0 0 285.75 285.75"``). Embedded
bitmaps must be rendered at the pixel size they occupy in the final export,
so element sizes in user units are scaled by viewport / viewBox.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Optional, Tuple

from ..config import IMAGE_FALLBACK_WIDTH_PX
from ..utils import round_half_away

# CSS absolute units anchored at 96 px per inch.
_UNIT_TO_PX = {
    "": 1.0,
    "px": 1.0,
    "mm": 96.0 / 25.4,
    "cm": 96.0 / 2.54,
    "in": 96.0,
    "pt": 96.0 / 72.0,
}

_NUMERIC_PREFIX = re.compile(r"[0-9.\-]+")
_VIEWBOX_SPLIT = re.compile(r"[\s,]+")

ViewBox = Tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class SvgMetrics:
    doc_px_width: float
    doc_px_height: float
    viewbox_width: float
    viewbox_height: float

    @property
    def scale(self) -> Tuple[float, float]:
        return (
            self.doc_px_width / self.viewbox_width,
            self.doc_px_height / self.viewbox_height,
        )

    def image_pixels(self, width_units: float, height_units: float) -> Tuple[int, int]:
        """Convert a user-space size to whole output pixels (at least 1x1).

        Raises:
            ValueError: If the scaled size overflows to a non-finite value.
        """

        scale_x, scale_y = self.scale
        width_px = width_units * scale_x
        height_px = height_units * scale_y
        if not (math.isfinite(width_px) and math.isfinite(height_px)):
            raise ValueError("Image size is not a finite number of pixels")
        width = max(round_half_away(width_px), 1)
        height = max(round_half_away(height_px), 1)
        return int(width), int(height)


def parse_length_px(value: str) -> Optional[float]:
    """Parse an SVG length such as ``"210mm"`` into pixels; ``None`` if unparsable."""

    trimmed = value.strip()
    match = _NUMERIC_PREFIX.match(trimmed)
    if match is None:
        return None
    try:
        number = float(match.group(0))
    except ValueError:
        return None
    factor = _UNIT_TO_PX.get(trimmed[match.end() :].strip())
    if factor is None:
        return None
    pixels = number * factor
    return pixels if math.isfinite(pixels) else None


def parse_viewbox(value: str) -> Optional[ViewBox]:
    """Parse ``min-x min-y width height`` (comma and/or whitespace separated)."""

    parts = [part for part in _VIEWBOX_SPLIT.split(value.strip()) if part]
    if len(parts) != 4:
        return None
    try:
        min_x, min_y, width, height = (float(part) for part in parts)
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in (min_x, min_y, width, height)):
        return None
    return min_x, min_y, width, height


def resolve_metrics(
    width: Optional[str], height: Optional[str], viewbox: Optional[str]
) -> Optional[SvgMetrics]:
    """Build metrics from the root ``<svg>`` attributes.

    Without a viewBox the user space is already pixel sized. Returns ``None``
    when the declared size is missing, unparsable or not finite, or when a
    declared viewBox is unparsable or degenerate.
    """

    if width is None or height is None:
        return None
    px_width = parse_length_px(width)
    px_height = parse_length_px(height)
    if px_width is None or px_height is None:
        return None

    if viewbox is None:
        parsed: Optional[ViewBox] = (0.0, 0.0, px_width, px_height)
    else:
        parsed = parse_viewbox(viewbox)
    if parsed is None:
        return None
    _min_x, _min_y, vb_width, vb_height = parsed
    if vb_width <= 0 or vb_height <= 0:
        return None
    return SvgMetrics(px_width, px_height, vb_width, vb_height)


def fallback_pixels(
    width_units: float,
    height_units: float,
    base_width_px: int = IMAGE_FALLBACK_WIDTH_PX,
) -> Tuple[int, int]:
    """Size an image from a fixed base width, preserving its aspect ratio."""

    aspect = max(width_units / height_units, 0.0001)
    height = max(round_half_away(base_width_px / aspect), 1)
    return base_width_px, int(height)
