"""SVG templates shipped with the package.

Every ``*.svg`` file in this directory is a template named after its stem.
Files whose name starts with ``dev`` are design scratch files and are not
listed.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class EmbeddedTemplate:
    name: str
    content: str


def get_templates() -> List[EmbeddedTemplate]:
    """Return embedded templates sorted by name."""

    templates: List[EmbeddedTemplate] = []
    for entry in resources.files(__name__).iterdir():
        filename = entry.name
        if not filename.endswith(".svg") or filename.startswith("dev"):
            continue
        templates.append(
            EmbeddedTemplate(
                name=filename[: -len(".svg")],
                content=entry.read_text(encoding="utf-8"),
            )
        )
    return sorted(templates, key=lambda t: t.name)


def get_template_by_name(name: str) -> Optional[EmbeddedTemplate]:
    for template in get_templates():
        if template.name == name:
            return template
    return None
