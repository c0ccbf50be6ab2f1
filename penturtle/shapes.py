"""Glyph shapes for drawing the turtle itself.

A shape is a sequence of vertices relative to the turtle position, drawn as a
closed polygon that starts at the turtle position.  Shapes are defined pointing
up (heading 0) at unit size.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

from .geometry import XY

Shape = Tuple[XY, ...]


class BuiltInShapes:
    DEFAULT: Shape = ((-5.0, -5.0), (0.0, 10.0), (5.0, -5.0))
    TRIANGLE: Shape = ((-6.0, -4.0), (0.0, 8.0), (6.0, -4.0), (-6.0, -4.0))
    SQUARE: Shape = ((-4.0, -4.0), (-4.0, 4.0), (4.0, 4.0), (4.0, -4.0), (-4.0, -4.0))


def as_shape(vertices: Sequence[Sequence[float]]) -> Shape:
    """Freeze any sequence of ``(x, y)`` pairs into a shape tuple."""
    return tuple((float(v[0]), float(v[1])) for v in vertices)


def resize_shape(shape: Sequence[XY], factor: float) -> Shape:
    return tuple((x * factor, y * factor) for x, y in shape)


def rotate_shape(shape: Sequence[XY], degrees: float) -> Shape:
    """Rotate clockwise, matching the turtle heading convention."""
    theta = math.radians(degrees)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    return tuple((x * cos_t + y * sin_t, -x * sin_t + y * cos_t) for x, y in shape)


__all__ = ["Shape", "BuiltInShapes", "as_shape", "resize_shape", "rotate_shape"]
