"""Configuration models for turtles, canvases and the control server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .colors import ColorResolvable
from .geometry import XY
from .shapes import BuiltInShapes, Shape


@dataclass
class CanvasSettings:
    """Size of the drawing surface in canvas units (pixels)."""

    width: float = 800.0
    height: float = 800.0

    def as_tuple(self) -> tuple[float, float]:
        return self.width, self.height

    @property
    def half_extents(self) -> tuple[float, float]:
        return self.width / 2.0, self.height / 2.0


@dataclass
class TurtleOptions:
    """Initial state of a turtle.

    ``disable_wrapping`` only affects the turtle until its first ``reset``;
    ``reset`` always turns wrapping back on.  ``auto_draw`` arms the step timer
    whenever the speed is changed; without it use :meth:`Turtle.start_drawing`.
    """

    hidden: bool = False
    disable_wrapping: bool = False
    default_color: ColorResolvable = (255, 0, 255)
    width: float = 1.0
    start_position: XY = (0.0, 0.0)
    start_angle: float = 0.0
    shape: Shape = BuiltInShapes.DEFAULT
    line_cap: str = "round"
    turtle_size_modifier: float = 1.0
    auto_draw: bool = True


@dataclass
class ServerSettings:
    """Aggregate settings for the HTTP control server and the UI."""

    host: str = "127.0.0.1"
    port: int = 8000
    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    options: TurtleOptions = field(default_factory=TurtleOptions)
    initial_speed: Optional[float] = None


def parse_canvas_size(value: str) -> CanvasSettings:
    """Parse ``WIDTHxHEIGHT`` into :class:`CanvasSettings`."""
    raw = value.strip().lower().replace("px", "")
    try:
        width_str, height_str = raw.split("x", 1)
        width = float(width_str)
        height = float(height_str)
    except (ValueError, TypeError) as exc:
        raise ValueError("Canvas size must be in WIDTHxHEIGHT format, e.g. 800x600") from exc
    if width <= 0 or height <= 0:
        raise ValueError("Canvas dimensions must be positive numbers.")
    return CanvasSettings(width=width, height=height)
