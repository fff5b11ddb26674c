"""Command line entry point: GPX track + SVG template -> filled SVG."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_TEMPLATE
from .context import Context
from .errors import LoadError, TemplateParseError
from .template import Template
from .templates import get_template_by_name, get_templates


def _setup_logging(verbose: bool) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _resolve_template(name_or_path: str) -> Template:
    """Embedded template by name first, then a template file path."""

    embedded = get_template_by_name(name_or_path)
    if embedded is not None:
        logging.info("Using embedded template '%s'", embedded.name)
        return Template(embedded.content)
    logging.info("Using template file '%s'", name_or_path)
    return Template.from_file(name_or_path)


def _resolve_output_path(datafile: str, outfile: Optional[str]) -> Path:
    """Return ``<base>.svg``; the base defaults to the data file's stem."""

    if outfile:
        base = Path(outfile)
        if base.suffix:
            base = base.with_suffix("")
    else:
        base = Path(Path(datafile).stem or "output")
    return base.with_suffix(".svg")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Stamp ride statistics, an elevation profile and a track map into"
            " an SVG template."
        )
    )
    parser.add_argument("-d", "--datafile", help="Path to the GPX track file")
    parser.add_argument(
        "-t",
        "--template",
        default=DEFAULT_TEMPLATE,
        help=f"Embedded template name or path to an SVG file (default: {DEFAULT_TEMPLATE})",
    )
    parser.add_argument(
        "-o",
        "--outfile",
        help="Output base name; defaults to the GPX file's stem",
    )
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List embedded templates and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``ridestamp`` or ``python -m ridestamp``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.list_templates:
        for embedded in get_templates():
            print(embedded.name)
        return 0
    if not args.datafile:
        parser.error("--datafile is required")

    output_path = _resolve_output_path(args.datafile, args.outfile)
    try:
        template = _resolve_template(args.template)
        context = Context.load(args.datafile)
        svg = template.apply(context)
    except (LoadError, TemplateParseError, OSError) as exc:
        logging.error("Failed to render '%s': %s", args.datafile, exc)
        return 1

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(svg, encoding="utf-8")
    except OSError as exc:
        logging.error("Failed to write '%s': %s", output_path, exc)
        return 1
    finally:
        context.clear_assets()

    stats = context.stats
    logging.info(
        "%s: %.1f km, %s moving, %.0f m climbing -> %s",
        stats.track_name,
        stats.total_distance_m / 1000.0,
        context.get_string("value_moving_time"),
        stats.uphill_m,
        output_path,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
