"""Placeholder substitution for designer-authored SVG templates.

Elements are matched by their ``id``:

* ``<tspan id="value_*">``: the following text is replaced by the formatted
  value.
* ``<path id="path_*">``: ``d`` is replaced by generated path data.
* ``<image id="image_*">``: the image reference is replaced by an asset
  rendered at the element's output pixel size.

Anything that does not resolve is copied through untouched, as is every byte
outside the rewritten tags and texts.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from ..config import (
    IMAGE_PREFIX,
    MAP_IMAGE_ID,
    PATH_PREFIX,
    VALUE_PREFIX,
)
from ..models import ImageRequest, RgbaColor
from .colors import extract_track_color
from .events import Event, EventKind, escape_text, rewrite_tag, tokenize
from .metrics import SvgMetrics, fallback_pixels, resolve_metrics
from .paths import PathDescriptor

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

_IMAGE_HREF_DROP = ("sodipodi:absref",)


class ValueSource(Protocol):
    def get_string(self, identifier: str) -> Optional[str]: ...

    def get_path(self, identifier: str, descriptor: PathDescriptor) -> Optional[str]: ...


class AssetProvider(Protocol):
    def get_image(
        self,
        identifier: str,
        width_px: int,
        height_px: int,
        color: Optional[RgbaColor] = None,
    ) -> Optional[str]: ...


@dataclass(frozen=True, slots=True)
class TemplateInfo:
    """Document-wide facts gathered before substitution."""

    metrics: Optional[SvgMetrics] = None
    track_color: Optional[RgbaColor] = None


def scan_template(events: Sequence[Event]) -> TemplateInfo:
    """Collect root metrics and the elevation path stroke color."""

    metrics: Optional[SvgMetrics] = None
    for event in events:
        if event.is_tag and event.local_name == "svg":
            metrics = resolve_metrics(
                event.get("width"), event.get("height"), event.get("viewBox")
            )
            break
    return TemplateInfo(metrics=metrics, track_color=extract_track_color(events))


class _TextSlot:
    """Pending replacement for the next text inside an armed element.

    Idle until a ``tspan`` placeholder resolves; armed until the next
    non-blank text is consumed, another ``tspan`` opens, or the arming
    element closes.
    """

    def __init__(self) -> None:
        self._value: Optional[str] = None
        self._depth = 0

    @property
    def armed(self) -> bool:
        return self._value is not None

    def arm(self, value: str, depth: int) -> None:
        self._value = value
        self._depth = depth

    def disarm(self) -> None:
        self._value = None

    def closes_at(self, depth: int) -> bool:
        return self.armed and depth == self._depth

    def take(self) -> str:
        value = self._value or ""
        self._value = None
        return value


def _replace_text(raw: str, value: str) -> str:
    # Surrounding whitespace stays in place; only the text itself changes.
    start = len(raw) - len(raw.lstrip())
    end = len(raw.rstrip())
    return raw[:start] + escape_text(value) + raw[end:]


def _image_size(
    event: Event, metrics: Optional[SvgMetrics]
) -> Optional[Tuple[int, int]]:
    width_attr = event.get("width")
    height_attr = event.get("height")
    if width_attr is None or height_attr is None:
        return None
    try:
        width_units = float(width_attr)
        height_units = float(height_attr)
    except ValueError:
        return None
    if not (math.isfinite(width_units) and math.isfinite(height_units)):
        return None
    if width_units <= 0 or height_units <= 0:
        return None
    if metrics is not None:
        try:
            return metrics.image_pixels(width_units, height_units)
        except ValueError:
            return None
    return fallback_pixels(width_units, height_units)


class _Substitution:
    """One substitution pass over a tokenized document."""

    def __init__(
        self,
        events: Sequence[Event],
        values: ValueSource,
        assets: AssetProvider,
    ) -> None:
        self.events = events
        self.values = values
        self.assets = assets
        self.info = scan_template(events)

    def run(self) -> str:
        out: List[str] = []
        slot = _TextSlot()
        depth = 0
        for event in self.events:
            kind = event.kind
            if kind is EventKind.START:
                depth += 1
                if event.local_name == "tspan":
                    slot.disarm()
                    value = self._resolve_value(event)
                    if value is not None:
                        slot.arm(value, depth)
                    out.append(event.raw)
                else:
                    out.append(self._rewrite(event))
            elif kind is EventKind.EMPTY:
                out.append(self._rewrite(event))
            elif kind is EventKind.END:
                if slot.closes_at(depth):
                    slot.disarm()
                depth -= 1
                out.append(event.raw)
            elif kind in (EventKind.TEXT, EventKind.CDATA) and slot.armed and event.raw.strip():
                value = slot.take()
                if kind is EventKind.CDATA:
                    out.append(escape_text(value))
                else:
                    out.append(_replace_text(event.raw, value))
            else:
                out.append(event.raw)
        return "".join(out)

    def _rewrite(self, event: Event) -> str:
        name = event.local_name
        if name == "path":
            rewritten = self._resolve_path(event)
        elif name == "image":
            rewritten = self._resolve_image(event)
        else:
            rewritten = None
        return event.raw if rewritten is None else rewritten

    def _resolve_value(self, event: Event) -> Optional[str]:
        identifier = event.get("id")
        if identifier is None or not identifier.startswith(VALUE_PREFIX):
            return None
        value = self.values.get_string(identifier)
        if value is None:
            LOGGER.debug("Unresolved value placeholder %s", identifier)
        return value

    def _resolve_path(self, event: Event) -> Optional[str]:
        identifier = event.get("id")
        path_data = event.get("d")
        if identifier is None or not identifier.startswith(PATH_PREFIX) or path_data is None:
            return None
        try:
            descriptor = PathDescriptor.parse(path_data)
        except ValueError as exc:
            LOGGER.debug("Unresolved path placeholder %s: %s", identifier, exc)
            return None
        generated = self.values.get_path(identifier, descriptor)
        if generated is None:
            LOGGER.debug("Unresolved path placeholder %s", identifier)
            return None
        return rewrite_tag(event, {"d": generated})

    def _resolve_image(self, event: Event) -> Optional[str]:
        identifier = event.get("id")
        if identifier is None or not identifier.startswith(IMAGE_PREFIX):
            return None
        size = _image_size(event, self.info.metrics)
        if size is None:
            LOGGER.debug("Image placeholder %s has no usable width/height", identifier)
            return None
        width_px, height_px = size
        color = self.info.track_color if identifier == MAP_IMAGE_ID else None
        href = self.assets.get_image(identifier, width_px, height_px, color)
        if href is None:
            LOGGER.debug("No asset for image placeholder %s", identifier)
            return None
        href_attr = "href" if event.has("href") and not event.has("xlink:href") else "xlink:href"
        return rewrite_tag(event, {href_attr: href}, drop=_IMAGE_HREF_DROP)


def substitute(
    template_text: str,
    context: ValueSource,
    assets: Optional[AssetProvider] = None,
) -> str:
    """Return ``template_text`` with every resolvable placeholder filled in.

    Args:
        template_text: SVG markup following the ``value_*``/``path_*``/
            ``image_*`` id convention.
        context: Source of formatted values and generated paths.
        assets: Image provider; defaults to ``context`` when it provides
            ``get_image``.

    Raises:
        TemplateParseError: If the markup is malformed.
    """

    if assets is None:
        assets = context  # type: ignore[assignment]
    events = tokenize(template_text)
    return _Substitution(events, context, assets).run()


class Template:
    """SVG template text with helpers for substitution."""

    def __init__(self, text: str) -> None:
        self.text = text

    @classmethod
    def from_file(cls, path: PathLike) -> "Template":
        return cls(Path(path).read_text(encoding="utf-8"))

    def apply(self, context: ValueSource, assets: Optional[AssetProvider] = None) -> str:
        return substitute(self.text, context, assets)

    def info(self) -> TemplateInfo:
        return scan_template(tokenize(self.text))

    def map_image_request(self) -> Optional[ImageRequest]:
        """Pixel size and track color wanted for the map image, if any.

        Lets callers render the map ahead of substitution and hand it in
        through a static asset provider.
        """

        events = tokenize(self.text)
        info = scan_template(events)
        for event in events:
            if event.is_tag and event.local_name == "image" and event.get("id") == MAP_IMAGE_ID:
                size = _image_size(event, info.metrics)
                if size is None:
                    return None
                return ImageRequest(MAP_IMAGE_ID, size[0], size[1], info.track_color)
        return None
