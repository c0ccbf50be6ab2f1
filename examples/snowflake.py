"""Koch snowflake drawn with a local turtle, printed as an SVG preview."""
from __future__ import annotations

from penturtle import CanvasSettings, RecordingSurface, Turtle, TurtleOptions
from penturtle.rendering import render_preview_svg


def koch(turtle: Turtle, length: float, depth: int) -> None:
    if depth <= 0:
        turtle.forward(length)
        return
    third = length / 3.0
    for turn in (-60, 120, -60, 0):
        koch(turtle, third, depth - 1)
        turtle.right(turn)


def main() -> None:
    canvas = CanvasSettings(400, 400)
    surface = RecordingSurface(canvas.width, canvas.height)
    turtle = Turtle(surface, TurtleOptions(default_color="blue", hidden=True))
    turtle.pen_up().goto(-150, 90).set_angle(90).pen_down()
    for _ in range(3):
        koch(turtle, 300, 3)
        turtle.right(120)
    print(render_preview_svg(surface))


if __name__ == "__main__":
    main()
