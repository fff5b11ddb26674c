"""Render the track overlay image embedded into ``image_map`` placeholders.

The track is projected to Web Mercator, simplified under a point budget and
drawn as a "cased" line (dark outline below a colored stroke) on a canvas of
the exact requested pixel size. Basemap tiles are not drawn.
"""

from __future__ import annotations

import base64
from io import BytesIO
import logging
from typing import List, Optional, Sequence, Tuple

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Transformer
from shapely.geometry import LineString

from .config import (
    MAP_BACKGROUND_COLOR,
    MAP_DEFAULT_TRACK_COLOR,
    MAP_MAX_POINTS,
    MAP_OUTLINE_COLOR,
    MAP_OUTLINE_WIDTH_PX,
    MAP_RENDER_DPI,
    MAP_TRACK_WIDTH_PX,
    MAP_TRANSPARENT_BACKGROUND,
    MAP_VIEW_PADDING,
)
from .errors import MapRenderError
from .models import LonLat, RgbaColor

LOGGER = logging.getLogger(__name__)

MetricArray = NDArray[np.float64]

_TO_WEB_MERCATOR = Transformer.from_crs(
    CRS.from_epsg(4326), CRS.from_epsg(3857), always_xy=True
)

# Web Mercator resolution (m/px) at zoom 17; short tracks are not zoomed further.
MIN_RESOLUTION_M_PER_PX = 156543.03392804097 / 2**17

# Tolerances (metres) tried in order until the line fits the point budget.
_SIMPLIFY_TOLERANCES_M = (0.0, 1.0, 3.0, 5.0, 10.0, 20.0)


def dedupe_consecutive(coords: Sequence[LonLat]) -> List[LonLat]:
    """Drop points repeating their predecessor."""

    out: List[LonLat] = []
    for point in coords:
        if out and out[-1] == point:
            continue
        out.append((float(point[0]), float(point[1])))
    return out


def project_web_mercator(coords: Sequence[LonLat]) -> MetricArray:
    """Project (lon, lat) pairs to EPSG:3857 metres."""

    if not coords:
        return np.empty((0, 2), dtype=float)
    lons = np.asarray([c[0] for c in coords], dtype=float)
    lats = np.asarray([c[1] for c in coords], dtype=float)
    xs, ys = _TO_WEB_MERCATOR.transform(lons, lats)
    return np.column_stack((xs, ys)).astype(float, copy=False)


def simplify_with_budget(points: MetricArray, max_points: int) -> MetricArray:
    """Simplify a polyline with growing tolerance until it has ``max_points`` or fewer.

    Endpoints are always kept. The last candidate is returned if no tolerance
    gets under budget.
    """

    if len(points) < 3:
        return points
    line = LineString(points)
    simplified = points
    for tolerance in _SIMPLIFY_TOLERANCES_M:
        candidate = np.asarray(
            line.simplify(tolerance, preserve_topology=False).coords, dtype=float
        )
        if len(candidate) >= 2:
            simplified = candidate
        if len(simplified) <= max_points:
            break
    return simplified


def _view_bounds(
    points: MetricArray, width_px: int, height_px: int, padding: float
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    min_x, min_y = points.min(axis=0)
    max_x, max_y = points.max(axis=0)
    center_x = (min_x + max_x) / 2.0
    center_y = (min_y + max_y) / 2.0
    resolution = max(
        (max_x - min_x) / width_px * padding,
        (max_y - min_y) / height_px * padding,
        MIN_RESOLUTION_M_PER_PX,
    )
    half_w = resolution * width_px / 2.0
    half_h = resolution * height_px / 2.0
    return (center_x - half_w, center_x + half_w), (center_y - half_h, center_y + half_h)


def render_track_map_png(
    coords: Sequence[LonLat],
    width_px: int,
    height_px: int,
    track_color: Optional[RgbaColor] = None,
) -> bytes:
    """Render the track overlay as PNG bytes of exactly ``width_px`` x ``height_px``.

    Raises:
        MapRenderError: If there are no coordinates or the size is not positive.
    """

    if not coords:
        raise MapRenderError("error building map: no coordinates")
    if width_px <= 0 or height_px <= 0:
        raise MapRenderError("error building map: invalid image size")

    projected = project_web_mercator(dedupe_consecutive(coords))
    line = simplify_with_budget(projected, MAP_MAX_POINTS)
    x_limits, y_limits = _view_bounds(line, width_px, height_px, MAP_VIEW_PADDING)

    dpi = MAP_RENDER_DPI
    # Agg truncates the canvas size to whole pixels; half a pixel of slack
    # keeps float error from dropping a row or column.
    figure = Figure(figsize=((width_px + 0.5) / dpi, (height_px + 0.5) / dpi), dpi=dpi)
    canvas = FigureCanvasAgg(figure)
    axes = figure.add_axes((0.0, 0.0, 1.0, 1.0))
    axes.set_axis_off()
    axes.set_xlim(*x_limits)
    axes.set_ylim(*y_limits)

    px_to_pt = 72.0 / dpi
    inner = (track_color or RgbaColor.from_hex(MAP_DEFAULT_TRACK_COLOR)).as_unit_rgba()
    outline = RgbaColor.from_hex(MAP_OUTLINE_COLOR).as_unit_rgba()
    for color, width in ((outline, MAP_OUTLINE_WIDTH_PX), (inner, MAP_TRACK_WIDTH_PX)):
        axes.plot(
            line[:, 0],
            line[:, 1],
            color=color,
            linewidth=width * px_to_pt,
            solid_capstyle="round",
            solid_joinstyle="round",
        )

    if MAP_TRANSPARENT_BACKGROUND:
        figure.patch.set_alpha(0.0)
        axes.patch.set_alpha(0.0)
    else:
        figure.patch.set_facecolor(MAP_BACKGROUND_COLOR)

    buffer = BytesIO()
    canvas.print_png(buffer)
    LOGGER.debug(
        "Rendered %d track points (of %d) at %dx%d px",
        len(line),
        len(coords),
        width_px,
        height_px,
    )
    return buffer.getvalue()


def render_track_map_href(
    coords: Sequence[LonLat],
    width_px: int,
    height_px: int,
    track_color: Optional[RgbaColor] = None,
) -> str:
    """Render the overlay and return a ``data:image/png;base64,...`` reference."""

    png = render_track_map_png(coords, width_px, height_px, track_color)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
