"""Tests for the embedded templates and the command line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from ridestamp import main as cli
from ridestamp.template import Template
from ridestamp.templates import get_template_by_name, get_templates


def _fake_href(coords, width_px, height_px, color):
    return f"data:image/png;base64,{width_px}x{height_px}"


@pytest.fixture(autouse=True)
def no_map_rendering(monkeypatch):
    monkeypatch.setattr("ridestamp.context._default_renderer", _fake_href)


def test_embedded_templates_are_listed_by_name() -> None:
    names = [t.name for t in get_templates()]
    assert names == sorted(names)
    assert {"story_split", "square_stats"} <= set(names)
    assert not any(name.startswith("dev") for name in names)


def test_embedded_template_lookup() -> None:
    template = get_template_by_name("square_stats")
    assert template is not None
    assert template.content.lstrip().startswith("<?xml")
    assert get_template_by_name("nope") is None


def test_square_template_requests_map_at_output_size() -> None:
    template = Template(get_template_by_name("square_stats").content)
    request = template.map_image_request()
    assert (request.width_px, request.height_px) == (600, 720)
    assert request.color.hex == "#22C55EFF"


def test_resolve_output_path() -> None:
    assert cli._resolve_output_path("rides/lunch.gpx", None) == Path("lunch.svg")
    assert cli._resolve_output_path("lunch.gpx", "out/card") == Path("out/card.svg")
    assert cli._resolve_output_path("lunch.gpx", "out/card.png") == Path("out/card.svg")


def test_cli_writes_filled_svg(tmp_path, gpx_file) -> None:
    base = tmp_path / "out" / "card"
    exit_code = cli.main(
        ["--datafile", str(gpx_file), "--template", "square_stats", "--outfile", str(base)]
    )
    assert exit_code == 0
    svg = (tmp_path / "out" / "card.svg").read_text(encoding="utf-8")
    assert "Hill Repeats" in svg
    assert ">250m<" in svg
    assert "data:image/png;base64,600x720" in svg


def test_cli_accepts_template_file(tmp_path, gpx_file) -> None:
    template = tmp_path / "mine.svg"
    template.write_text(
        '<svg><text><tspan id="value_distance">0</tspan></text></svg>', encoding="utf-8"
    )
    base = tmp_path / "result"
    assert cli.main(["-d", str(gpx_file), "-t", str(template), "-o", str(base)]) == 0
    assert (tmp_path / "result.svg").read_text(encoding="utf-8") == (
        '<svg><text><tspan id="value_distance">1km</tspan></text></svg>'
    )


def test_cli_fails_on_unreadable_track(tmp_path) -> None:
    broken = tmp_path / "broken.gpx"
    broken.write_text("not a gpx file", encoding="utf-8")
    assert cli.main(["-d", str(broken), "-o", str(tmp_path / "x")]) == 1
    assert not (tmp_path / "x.svg").exists()


def test_cli_fails_on_malformed_template(tmp_path, gpx_file) -> None:
    template = tmp_path / "bad.svg"
    template.write_text("<svg><text></svg>", encoding="utf-8")
    assert cli.main(["-d", str(gpx_file), "-t", str(template), "-o", str(tmp_path / "x")]) == 1


def test_cli_fails_on_missing_template_file(tmp_path, gpx_file) -> None:
    assert cli.main(["-d", str(gpx_file), "-t", str(tmp_path / "none.svg")]) == 1


def test_cli_lists_templates(capsys) -> None:
    assert cli.main(["--list-templates"]) == 0
    out = capsys.readouterr().out.split()
    assert "story_split" in out


def test_cli_requires_datafile() -> None:
    with pytest.raises(SystemExit):
        cli.main([])
