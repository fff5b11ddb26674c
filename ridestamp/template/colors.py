"""Track line color lookup in template markup."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from ..config import ELEVATION_PATH_ID
from ..models import RgbaColor
from .events import Event

_HEX_RUN = re.compile(r"#([0-9A-Fa-f]*)")
_STYLE_STROKE = re.compile(r"(?:^|[;\s])stroke\s*:\s*")


def parse_hex_color(token: str) -> Optional[RgbaColor]:
    """Parse a leading ``#RRGGBB``/``#RRGGBBAA`` literal; trailing text is ignored."""

    match = _HEX_RUN.match(token.strip())
    if match is None or len(match.group(1)) not in (6, 8):
        return None
    return RgbaColor.from_hex(match.group(1))


def stroke_from_style(style: str) -> Optional[RgbaColor]:
    """Return the color of the first ``stroke:`` declaration in an inline style."""

    match = _STYLE_STROKE.search(style)
    if match is None:
        return None
    return parse_hex_color(style[match.end() :])


def stroke_color(event: Event) -> Optional[RgbaColor]:
    """Stroke color of a tag: the ``stroke`` attribute first, then ``style``."""

    stroke = event.get("stroke")
    if stroke is not None:
        color = parse_hex_color(stroke)
        if color is not None:
            return color
    style = event.get("style")
    if style is not None:
        return stroke_from_style(style)
    return None


def extract_track_color(
    events: Iterable[Event], element_id: str = ELEVATION_PATH_ID
) -> Optional[RgbaColor]:
    """Return the stroke color of the first ``element_id`` tag that declares one."""

    for event in events:
        if event.is_tag and event.get("id") == element_id:
            color = stroke_color(event)
            if color is not None:
                return color
    return None
