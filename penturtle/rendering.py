"""Preview helpers for a :class:`penturtle.surface.RecordingSurface`.

The preview is for display in the browser UI and the HTTP API only; the
surface display list is the drawing.
"""
from __future__ import annotations

from html import escape
from typing import Any, Dict, List

from .surface import DrawCommand, RecordingSurface

# widths at or below zero are drawn as a hairline
HAIRLINE = 0.5


def _path_data(command: DrawCommand, surface: RecordingSurface) -> str:
    parts: List[str] = []
    for subpath in command.subpaths:
        x0, y0 = surface.to_canvas(*subpath[0])
        parts.append(f"M {x0:.2f} {y0:.2f}")
        for x, y in subpath[1:]:
            cx, cy = surface.to_canvas(x, y)
            parts.append(f"L {cx:.2f} {cy:.2f}")
    return " ".join(parts)


def render_preview_svg(surface: RecordingSurface, *, background: str = "#ffffff") -> str:
    width = max(1.0, surface.width)
    height = max(1.0, surface.height)
    elements = [f'<rect x="0" y="0" width="{width:g}" height="{height:g}" fill="{background}" />']
    for command in surface.commands:
        d = _path_data(command, surface)
        if command.kind == "fill":
            elements.append(f'<path d="{d}" fill="{escape(command.style)}" stroke="none" />')
        else:
            stroke_width = command.line_width if command.line_width > 0 else HAIRLINE
            elements.append(
                f'<path d="{d}" fill="none" stroke="{escape(command.style)}" stroke-width="{stroke_width:g}" '
                f'stroke-linecap="{escape(command.line_cap)}" stroke-linejoin="round" />'
            )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width:g} {height:g}" '
        f'preserveAspectRatio="xMidYMid meet">' + "".join(elements) + "</svg>"
    )


def preview_strokes(surface: RecordingSurface) -> Dict[str, Any]:
    """Return the display list in a JSON friendly form."""
    strokes = []
    for command in surface.commands:
        strokes.append(
            {
                "kind": command.kind,
                "paths": [[[float(x), float(y)] for x, y in sp] for sp in command.subpaths],
                "style": command.style,
                "width": command.line_width,
                "line_cap": command.line_cap,
            }
        )
    return {"width": surface.width, "height": surface.height, "strokes": strokes}


__all__ = ["render_preview_svg", "preview_strokes", "HAIRLINE"]
