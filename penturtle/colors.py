"""Color values used for turtle strokes and the turtle glyph."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

NAMED_COLORS = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "lime": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
    "orange": "#ffa500",
    "purple": "#800080",
    "pink": "#ffc0cb",
    "brown": "#a52a2a",
    "gray": "#808080",
    "grey": "#808080",
}


@dataclass(frozen=True)
class Color:
    """RGBA color with integer channels and a float alpha in ``[0, 1]``."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: float = 1.0

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    def with_alpha(self, a: float) -> "Color":
        return Color(self.r, self.g, self.b, _clamp_alpha(a))

    def to_hex(self, *, hashtag: bool = True) -> str:
        prefix = "#" if hashtag else ""
        return f"{prefix}{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_rgb(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    def to_rgba(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a:g})"


ColorResolvable = Union[Color, str, Sequence[float]]


def _clamp_channel(value) -> int:
    try:
        v = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(255, v))


def _clamp_alpha(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 1.0
    if v != v:  # NaN
        return 1.0
    return max(0.0, min(1.0, v))


def _parse_hex(text: str) -> Tuple[int, int, int]:
    digits = text[1:] if text.startswith("#") else text
    try:
        if len(digits) >= 6:
            return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
        if len(digits) == 3:
            return tuple(int(ch * 2, 16) for ch in digits)  # type: ignore[return-value]
    except ValueError:
        pass
    return 0, 0, 0


def to_color(value: ColorResolvable) -> Color:
    """Resolve ``value`` to a :class:`Color`.

    Accepts a :class:`Color`, a named color, a ``#rrggbb``/``#rgb`` hex string or
    an ``(r, g, b[, a])`` sequence.  Anything that cannot be parsed resolves to
    black instead of raising, and channels are clamped to ``0..255``.
    """

    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        text = value.replace(" ", "").lower()
        text = NAMED_COLORS.get(text, text)
        r, g, b = _parse_hex(text)
        return Color(r, g, b)
    try:
        parts = list(value)
    except TypeError:
        return Color()
    channels = [_clamp_channel(p) for p in parts[:3]]
    channels += [0] * (3 - len(channels))
    alpha = _clamp_alpha(parts[3]) if len(parts) > 3 else 1.0
    return Color(channels[0], channels[1], channels[2], alpha)


__all__ = ["Color", "ColorResolvable", "NAMED_COLORS", "to_color"]
