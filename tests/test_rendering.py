from __future__ import annotations

import pytest

from penturtle.colors import Color, to_color
from penturtle.rendering import preview_strokes, render_preview_svg
from penturtle.surface import RecordingSurface


@pytest.mark.parametrize(
    "value, expected",
    [
        ("red", Color(255, 0, 0)),
        ("Dark Gray", Color(0, 0, 0)),
        ("#0a0B0c", Color(10, 11, 12)),
        ("#f80", Color(255, 136, 0)),
        ("00ff00", Color(0, 255, 0)),
        ((1, 2, 3), Color(1, 2, 3)),
        ((1, 2, 3, 0.5), Color(1, 2, 3, 0.5)),
        ((999, -1, 12.6), Color(255, 0, 13)),
        (("x", 2), Color(0, 2, 0)),
        (42, Color(0, 0, 0)),
    ],
)
def test_to_color(value, expected):
    assert to_color(value) == expected


def test_color_formats():
    color = Color(255, 0, 128, 0.25)
    assert color.to_hex() == "#ff0080"
    assert color.to_hex(hashtag=False) == "ff0080"
    assert color.to_rgb() == "rgb(255, 0, 128)"
    assert color.to_rgba() == "rgba(255, 0, 128, 0.25)"
    assert color.with_alpha(3).a == 1.0


def test_surface_keeps_only_paintable_subpaths():
    surface = RecordingSurface(100, 100)
    surface.begin_path()
    surface.move_to(0, 0)
    surface.move_to(1, 1)
    surface.line_to(2, 2)
    surface.stroke()

    [command] = surface.commands
    assert command.subpaths == (((1.0, 1.0), (2.0, 2.0)),)

    surface.fill()
    assert len(surface.commands) == 1


def test_snapshot_and_restore():
    surface = RecordingSurface(100, 100)
    saved = surface.snapshot()
    surface.begin_path()
    surface.move_to(0, 0)
    surface.line_to(5, 5)
    surface.stroke()

    surface.restore(saved)
    assert surface.commands == []


def test_svg_flips_y_and_uses_hairline_for_zero_width():
    surface = RecordingSurface(100, 100)
    surface.line_width = 0
    surface.stroke_style = "red"
    surface.begin_path()
    surface.move_to(0, 0)
    surface.line_to(10, 20)
    surface.stroke()

    svg = render_preview_svg(surface)

    assert 'd="M 50.00 50.00 L 60.00 30.00"' in svg
    assert 'stroke-width="0.5"' in svg
    assert 'viewBox="0 0 100 100"' in svg


def test_svg_escapes_styles():
    surface = RecordingSurface(10, 10)
    surface.line_cap = '"><script>'
    surface.begin_path()
    surface.move_to(0, 0)
    surface.line_to(1, 1)
    surface.stroke()

    assert "<script>" not in render_preview_svg(surface)


def test_preview_strokes_is_json_friendly():
    surface = RecordingSurface(10, 20)
    surface.fill_style = "#00ff00"
    surface.begin_path()
    surface.move_to(0, 0)
    surface.line_to(1, 0)
    surface.line_to(0, 1)
    surface.close_path()
    surface.fill()

    data = preview_strokes(surface)
    assert data["width"] == 10 and data["height"] == 20
    [fill] = data["strokes"]
    assert fill["kind"] == "fill"
    assert fill["style"] == "#00ff00"
    assert fill["paths"] == [[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]]
