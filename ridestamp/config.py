"""Central configuration for the ridestamp track card generator.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Every value can be overridden through environment
variables (optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Track naming
# ---------------------------------------------------------------------------
# Longest track name printed on a card; longer names end with an ellipsis.
TRACK_NAME_MAX_CHARS = _env_int("RIDESTAMP_TRACK_NAME_MAX_CHARS", 32)

# Used when neither the GPX metadata nor the file name yield a usable name.
DEFAULT_TRACK_NAME = os.getenv("RIDESTAMP_DEFAULT_TRACK_NAME", "track")

ELLIPSIS = "…"


# ---------------------------------------------------------------------------
# Track statistics
# ---------------------------------------------------------------------------
# Only every Nth point of a segment feeds speed and elevation statistics.
# Consecutive GPS fixes are too noisy for instantaneous speed/climb values.
DECIMATION_STRIDE = max(1, _env_int("RIDESTAMP_DECIMATION_STRIDE", 10))

# A decimated pair faster than this (km/h) counts towards moving time.
MOVING_SPEED_THRESHOLD_KMH = _env_float("RIDESTAMP_MOVING_SPEED_KMH", 0.5)

# Smallest elevation range (metres) mapped onto the profile height. Keeps flat
# rides from being drawn as mountain ranges.
ELEVATION_PROFILE_MIN_RANGE_M = _env_float("RIDESTAMP_ELEVATION_MIN_RANGE_M", 100.0)


# ---------------------------------------------------------------------------
# Template placeholders
# ---------------------------------------------------------------------------
VALUE_PREFIX = "value_"
PATH_PREFIX = "path_"
IMAGE_PREFIX = "image_"

ELEVATION_PATH_ID = "path_elevation"
MAP_IMAGE_ID = "image_map"

# Pixel width used for image placeholders when the root <svg> element does not
# declare a usable width/height. Height follows the element's aspect ratio.
IMAGE_FALLBACK_WIDTH_PX = _env_int("RIDESTAMP_IMAGE_FALLBACK_WIDTH_PX", 1000)

# Embedded template used by the CLI when --template is omitted.
DEFAULT_TEMPLATE = os.getenv("RIDESTAMP_DEFAULT_TEMPLATE", "story_split")


# ---------------------------------------------------------------------------
# Map rendering
# ---------------------------------------------------------------------------
MAP_DEFAULT_TRACK_COLOR = os.getenv("RIDESTAMP_MAP_TRACK_COLOR", "#FF2D55")
MAP_OUTLINE_COLOR = os.getenv("RIDESTAMP_MAP_OUTLINE_COLOR", "#000000C8")

# Stroke widths in output pixels.
MAP_TRACK_WIDTH_PX = _env_float("RIDESTAMP_MAP_TRACK_WIDTH_PX", 6.0)
MAP_OUTLINE_WIDTH_PX = _env_float("RIDESTAMP_MAP_OUTLINE_WIDTH_PX", 10.0)

# Safety cap on the simplified overlay polyline.
MAP_MAX_POINTS = _env_int("RIDESTAMP_MAP_MAX_POINTS", 2000)

# Extent multiplier applied around the track bounds (1.1 = 10% margin).
MAP_VIEW_PADDING = _env_float("RIDESTAMP_MAP_VIEW_PADDING", 1.1)

# Transparent background lets the template artwork show through the overlay.
MAP_TRANSPARENT_BACKGROUND = _env_bool("RIDESTAMP_MAP_TRANSPARENT", True)
MAP_BACKGROUND_COLOR = os.getenv("RIDESTAMP_MAP_BACKGROUND_COLOR", "#F2EFE9")

MAP_RENDER_DPI = 100
