"""Drawing surfaces the turtle renders onto.

:class:`Surface` is the small canvas-like API the turtle needs.  Coordinates
passed to a surface are turtle coordinates (origin in the centre, ``+Y`` up);
mapping them to device pixels is the surface's business.

:class:`RecordingSurface` is an in-memory implementation that keeps every
committed stroke and fill as a display list.  It backs the HTTP API, the UI
preview and the unit tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Tuple

from .geometry import XY

Path = Tuple[Tuple[XY, ...], ...]


class Surface(Protocol):
    width: float
    height: float
    stroke_style: str
    fill_style: str
    line_width: float
    line_cap: str

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def stroke(self) -> None: ...

    def fill(self) -> None: ...

    def clear(self) -> None: ...

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...


@dataclass(frozen=True)
class DrawCommand:
    """One committed stroke or fill."""

    kind: str  # stroke | fill
    subpaths: Path
    style: str
    line_width: float = 1.0
    line_cap: str = "butt"


@dataclass
class RecordingSurface:
    """Display-list surface with canvas-like path semantics."""

    width: float = 800.0
    height: float = 800.0

    def __post_init__(self) -> None:
        self.stroke_style: str = "black"
        self.fill_style: str = "black"
        self.line_width: float = 1.0
        self.line_cap: str = "butt"
        self.commands: List[DrawCommand] = []
        self._path: List[List[XY]] = []

    # Path building -------------------------------------------------------
    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append([(float(x), float(y))])

    def line_to(self, x: float, y: float) -> None:
        if not self._path:
            self._path.append([])
        self._path[-1].append((float(x), float(y)))

    def close_path(self) -> None:
        if self._path and self._path[-1]:
            first = self._path[-1][0]
            self._path[-1].append(first)
            self._path.append([first])

    def _current_path(self, min_points: int) -> Path:
        return tuple(tuple(sp) for sp in self._path if len(sp) >= min_points)

    # Painting ------------------------------------------------------------
    def stroke(self) -> None:
        subpaths = self._current_path(2)
        if subpaths:
            self.commands.append(
                DrawCommand("stroke", subpaths, self.stroke_style, self.line_width, self.line_cap)
            )

    def fill(self) -> None:
        subpaths = self._current_path(3)
        if subpaths:
            self.commands.append(DrawCommand("fill", subpaths, self.fill_style, self.line_width, self.line_cap))

    def clear(self) -> None:
        self.commands = []

    # Pixel buffer --------------------------------------------------------
    def snapshot(self) -> Tuple[DrawCommand, ...]:
        return tuple(self.commands)

    def restore(self, snapshot: Optional[Tuple[DrawCommand, ...]]) -> None:
        if snapshot is not None:
            self.commands = list(snapshot)

    # Introspection -------------------------------------------------------
    def strokes(self) -> List[DrawCommand]:
        return [c for c in self.commands if c.kind == "stroke"]

    def fills(self) -> List[DrawCommand]:
        return [c for c in self.commands if c.kind == "fill"]

    def to_canvas(self, x: float, y: float) -> XY:
        """Map turtle coordinates to top-left based pixel coordinates."""
        return x + self.width / 2.0, self.height / 2.0 - y


__all__ = ["Surface", "DrawCommand", "RecordingSurface"]
