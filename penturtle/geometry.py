"""Straight-line motion on a finite, optionally toroidal canvas.

The turtle lives in canvas-centred coordinates: the origin is the middle of the
canvas, ``+Y`` points up and headings are measured in degrees clockwise from
``+Y``.  :func:`wrap_line` splits a single ``forward``/``backward`` move into the
on-canvas pieces that have to be stroked when the path leaves one edge and
re-enters through the opposite one.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

XY = Tuple[float, float]

# relative slack for a carried coordinate that rounds past the edge it heads to
EDGE_TOLERANCE = 1e-9


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Segment:
    """Two point line segment in turtle coordinates."""

    start: XY
    end: XY

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])


@dataclass(frozen=True)
class WrapResult:
    """Segments to stroke for one move and the point where the turtle ends up."""

    segments: List[Segment] = field(default_factory=list)
    end: XY = (0.0, 0.0)

    def total_length(self) -> float:
        return sum(seg.length for seg in self.segments)


def heading_vector(degrees: float) -> XY:
    """Unit direction for a heading (0 deg is up, angles grow clockwise)."""
    theta = math.radians(degrees)
    return math.sin(theta), math.cos(theta)


def _edge_distance(pos: float, direction: float, half_extent: float) -> float:
    # Distance along the path to the edge the path is heading toward.  An axis
    # the path does not move along, or an edge already behind the path, is
    # unreachable.  A position a rounding error past the edge counts as on it.
    if direction == 0.0 or half_extent <= 0.0:
        return math.inf
    edge = half_extent if direction > 0 else -half_extent
    dist = (edge - pos) / direction
    if dist >= 0.0:
        return dist
    if abs(edge - pos) <= EDGE_TOLERANCE * max(1.0, half_extent):
        return 0.0
    return math.inf


def wrap_line(
    start: XY,
    heading: float,
    distance: float,
    half_width: float,
    half_height: float,
    *,
    wrap: bool = True,
) -> WrapResult:
    """Decompose a straight move into on-canvas segments.

    ``distance`` is signed: a negative value walks backwards along ``heading``.
    When ``wrap`` is enabled every crossing of a canvas edge emits the segment up
    to the edge and teleports the pen to the opposite edge; the X edge wins when
    both edges are reached at the same distance.  With wrapping disabled the
    move is a single segment that may leave the canvas.

    Zero-length pieces (a zero distance, or a crossing that starts exactly on an
    edge) are not emitted, so the segment lengths always add up to ``|distance|``.
    """

    if not math.isfinite(distance):
        return WrapResult(segments=[], end=(float(start[0]), float(start[1])))

    dx, dy = heading_vector(heading)
    if distance < 0:
        dx, dy = -dx, -dy
    remaining = abs(distance)

    x, y = float(start[0]), float(start[1])
    segments: List[Segment] = []

    while remaining > 0:
        to_edge_x = _edge_distance(x, dx, half_width)
        to_edge_y = _edge_distance(y, dy, half_height)

        if wrap and to_edge_x < remaining and to_edge_x <= to_edge_y:
            # crossing a vertical edge
            cross_x = half_width if dx > 0 else -half_width
            cross_y = y + dy * to_edge_x
            if to_edge_x > 0:
                segments.append(Segment((x, y), (cross_x, cross_y)))
            x, y = -cross_x, cross_y
            remaining -= to_edge_x
        elif wrap and to_edge_y < remaining:
            # crossing a horizontal edge
            cross_x = x + dx * to_edge_y
            cross_y = half_height if dy > 0 else -half_height
            if to_edge_y > 0:
                segments.append(Segment((x, y), (cross_x, cross_y)))
            x, y = cross_x, -cross_y
            remaining -= to_edge_y
        else:
            end = (x + dx * remaining, y + dy * remaining)
            segments.append(Segment((x, y), end))
            x, y = end
            remaining = 0.0

    return WrapResult(segments=segments, end=(x, y))


__all__ = ["XY", "Segment", "WrapResult", "heading_vector", "wrap_line"]
