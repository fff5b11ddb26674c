"""Lossless structural tokenizer for SVG/XML templates.

``tokenize`` splits a document into events whose ``raw`` texts concatenate back
to the exact input. Rewrites therefore only touch the events (and, within a
tag, the attributes) that are actually substituted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import html
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from xml.sax.saxutils import escape

from ..errors import TemplateParseError

Span = Tuple[int, int]

# XML names: any Unicode letter, "_" or ":" first, then word characters, "-", "." or ":".
_NAME = r"(?:[^\W\d]|:)[\w\-.:]*"
_TAG_RE = re.compile(
    rf"<(?P<name>{_NAME})"
    r"(?P<attrs>(?:\s+[^\s=/>\"']+\s*=\s*(?:\"[^\"]*\"|'[^']*'))*)"
    r"(?P<tail>\s*)(?P<slash>/?)>"
)
_ATTR_RE = re.compile(
    r"(?P<lead>\s+)(?P<name>[^\s=/>\"']+)\s*=\s*"
    r"(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')"
)
_END_RE = re.compile(rf"</(?P<name>{_NAME})\s*>")
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_CDATA_RE = re.compile(r"<!\[CDATA\[.*?\]\]>", re.DOTALL)
_PI_RE = re.compile(r"<\?.*?\?>", re.DOTALL)
_DOCTYPE_RE = re.compile(r"<!DOCTYPE(?:[^>\[]|\[.*?\])*>", re.DOTALL)


class EventKind(Enum):
    START = "start"
    END = "end"
    EMPTY = "empty"
    TEXT = "text"
    CDATA = "cdata"
    COMMENT = "comment"
    PI = "pi"
    DOCTYPE = "doctype"


@dataclass(frozen=True, slots=True)
class Attribute:
    """Attribute of a tag. Spans index into the owning event's ``raw``."""

    name: str
    value: str
    quote: str
    value_span: Span
    full_span: Span


@dataclass(frozen=True, slots=True)
class Event:
    kind: EventKind
    raw: str
    offset: int
    name: Optional[str] = None
    attributes: Tuple[Attribute, ...] = ()

    @property
    def is_tag(self) -> bool:
        return self.kind in (EventKind.START, EventKind.EMPTY)

    @property
    def local_name(self) -> Optional[str]:
        if self.name is None:
            return None
        return self.name.rsplit(":", 1)[-1]

    def get(self, name: str) -> Optional[str]:
        """Return the unescaped value of attribute ``name``, if present."""

        for attr in self.attributes:
            if attr.name == name:
                return attr.value
        return None

    def has(self, name: str) -> bool:
        return any(attr.name == name for attr in self.attributes)


def rewrite_tag(
    event: Event,
    set_attrs: Optional[Mapping[str, str]] = None,
    drop: Iterable[str] = (),
) -> str:
    """Return ``event.raw`` with attributes replaced, appended or removed.

    Replaced values keep their position and quote style. New attributes are
    appended before the closing ``>``/``/>`` using double quotes.
    """

    if not event.is_tag:
        raise ValueError("Only start or empty-element tags can be rewritten")
    set_attrs = dict(set_attrs or {})
    drop_names = set(drop)
    edits: List[Tuple[Span, str]] = []
    for attr in event.attributes:
        if attr.name in drop_names:
            edits.append((attr.full_span, ""))
        elif attr.name in set_attrs:
            new_value = _escape_attr(set_attrs.pop(attr.name), attr.quote)
            edits.append((attr.value_span, new_value))

    raw = event.raw
    for (start, end), replacement in sorted(edits, key=lambda e: e[0][0], reverse=True):
        raw = raw[:start] + replacement + raw[end:]

    if set_attrs:
        closing = 2 if raw.endswith("/>") else 1
        appended = "".join(
            f' {name}="{_escape_attr(value, chr(34))}"' for name, value in set_attrs.items()
        )
        raw = raw[:-closing] + appended + raw[-closing:]
    return raw


def escape_text(text: str) -> str:
    return escape(text)


def _escape_attr(value: str, quote: str) -> str:
    entities: Dict[str, str] = {'"': "&quot;"} if quote == '"' else {"'": "&apos;"}
    return escape(value, entities)


def _position(text: str, pos: int) -> Tuple[int, int]:
    line = text.count("\n", 0, pos) + 1
    column = pos - (text.rfind("\n", 0, pos) + 1) + 1
    return line, column


def _parse_attributes(attrs_start: int, attrs_text: str) -> Tuple[Attribute, ...]:
    attributes: List[Attribute] = []
    for match in _ATTR_RE.finditer(attrs_text):
        if match.group("dq") is not None:
            group, quote = "dq", '"'
        else:
            group, quote = "sq", "'"
        value_span = (
            attrs_start + match.start(group),
            attrs_start + match.end(group),
        )
        full_span = (attrs_start + match.start(), attrs_start + match.end())
        attributes.append(
            Attribute(
                name=match.group("name"),
                value=html.unescape(match.group(group)),
                quote=quote,
                value_span=value_span,
                full_span=full_span,
            )
        )
    return tuple(attributes)


def _tag_event(text: str, pos: int) -> Optional[Event]:
    match = _TAG_RE.match(text, pos)
    if match is None:
        return None
    raw = match.group(0)
    attrs_start = match.start("attrs") - pos
    attributes = _parse_attributes(attrs_start, match.group("attrs"))
    kind = EventKind.EMPTY if match.group("slash") else EventKind.START
    return Event(kind, raw, pos, name=match.group("name"), attributes=attributes)


def tokenize(text: str) -> List[Event]:
    """Split ``text`` into structural events.

    Raises:
        TemplateParseError: On markup that cannot be tokenized, on an end tag
            that does not close the innermost open element, and on elements
            still open at end of input.
    """

    events: List[Event] = []
    open_tags: List[Tuple[str, int]] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos] != "<":
            end = text.find("<", pos)
            if end == -1:
                end = length
            events.append(Event(EventKind.TEXT, text[pos:end], pos))
            pos = end
            continue

        event: Optional[Event] = None
        if text.startswith("</", pos):
            match = _END_RE.match(text, pos)
            if match is not None:
                name = match.group("name")
                if not open_tags:
                    raise TemplateParseError(
                        f"Unexpected end tag </{name}>", *_position(text, pos)
                    )
                expected, _ = open_tags.pop()
                if expected != name:
                    raise TemplateParseError(
                        f"End tag </{name}> does not match <{expected}>",
                        *_position(text, pos),
                    )
                event = Event(EventKind.END, match.group(0), pos, name=name)
        elif text.startswith("<!--", pos):
            event = _simple_event(_COMMENT_RE, EventKind.COMMENT, text, pos)
        elif text.startswith("<![CDATA[", pos):
            event = _simple_event(_CDATA_RE, EventKind.CDATA, text, pos)
        elif text.startswith("<?", pos):
            event = _simple_event(_PI_RE, EventKind.PI, text, pos)
        elif text.startswith("<!DOCTYPE", pos):
            event = _simple_event(_DOCTYPE_RE, EventKind.DOCTYPE, text, pos)
        else:
            event = _tag_event(text, pos)
            if event is not None and event.kind is EventKind.START:
                open_tags.append((event.name or "", pos))

        if event is None:
            raise TemplateParseError("Malformed markup", *_position(text, pos))
        events.append(event)
        pos += len(event.raw)

    if open_tags:
        name, start = open_tags[-1]
        raise TemplateParseError(f"Unclosed tag <{name}>", *_position(text, start))
    return events


def _simple_event(pattern: re.Pattern[str], kind: EventKind, text: str, pos: int) -> Optional[Event]:
    match = pattern.match(text, pos)
    if match is None:
        return None
    return Event(kind, match.group(0), pos)
