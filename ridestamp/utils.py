"""General utility helpers shared across modules."""

from __future__ import annotations

import math
from datetime import timedelta


def round_half_away(value: float) -> float:
    """Round to the nearest integer, ties away from zero (not banker's rounding)."""

    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def format_hhmmss(duration: timedelta) -> str:
    """Format a duration as zero padded ``HH:MM:SS``."""

    total = int(duration.total_seconds())
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_number(value: float) -> str:
    """Shortest round-tripping text for a coordinate, without a trailing ``.0``."""

    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))
