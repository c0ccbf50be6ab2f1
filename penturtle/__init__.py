"""Top-level package for the penturtle toolkit.

This package exposes a LOGO style turtle that draws on a centred, optionally
wrapping canvas, either immediately or one step per timer tick, together with
an in-memory drawing surface, an HTTP control server and a browser playground.
"""

from .colors import Color, to_color
from .config import CanvasSettings, ServerSettings, TurtleOptions
from .geometry import XY, Segment, WrapResult, wrap_line
from .scheduler import ManualTimerFactory, Scheduler, ThreadTimer
from .shapes import BuiltInShapes
from .steps import Step, StepQueue, step_from_dict, step_from_text
from .surface import RecordingSurface, Surface
from .turtle import Turtle, TurtleListener, TurtleState

__all__ = [
    "Color",
    "to_color",
    "CanvasSettings",
    "ServerSettings",
    "TurtleOptions",
    "XY",
    "Segment",
    "WrapResult",
    "wrap_line",
    "ManualTimerFactory",
    "Scheduler",
    "ThreadTimer",
    "BuiltInShapes",
    "Step",
    "StepQueue",
    "step_from_dict",
    "step_from_text",
    "RecordingSurface",
    "Surface",
    "Turtle",
    "TurtleListener",
    "TurtleState",
]
