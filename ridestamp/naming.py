"""Display-name resolution for loaded tracks."""

from __future__ import annotations

from pathlib import PurePath
from typing import Iterable, Optional

from .config import DEFAULT_TRACK_NAME, ELLIPSIS, TRACK_NAME_MAX_CHARS
from .models import Track


def truncate_ellipsis(text: str, max_chars: int) -> str:
    """Clip ``text`` to ``max_chars`` characters, ending with an ellipsis if cut."""

    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + ELLIPSIS


def resolve_track_name(
    tracks: Iterable[Track],
    filename: Optional[str] = None,
    *,
    max_chars: int = TRACK_NAME_MAX_CHARS,
    default: str = DEFAULT_TRACK_NAME,
) -> str:
    """Return the first non-blank track name, else the file stem, else ``default``."""

    for track in tracks:
        trimmed = (track.name or "").strip()
        if trimmed:
            return truncate_ellipsis(trimmed, max_chars)

    stem = PurePath(filename).stem if filename else ""
    return stem or default
