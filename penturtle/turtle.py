"""The turtle: a pen-carrying cursor on a centred, optionally wrapping canvas.

Every motion and style operation goes through the same dispatch rule.  When
the turtle is in immediate mode (no speed set) or the scheduler is replaying a
step, the operation runs right away; otherwise it is queued as a
:mod:`~penturtle.steps` object and replayed later, one step per timer tick.
The same sequence of calls therefore either draws at once or animates,
depending only on :meth:`Turtle.set_speed`.

Drawing the turtle glyph uses the surface snapshot/restore pair: before the
glyph is painted the surface is snapshotted, and every state change restores
that snapshot first, so the glyph never becomes part of the drawing.
"""
from __future__ import annotations

import functools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .colors import Color, ColorResolvable, to_color
from .config import TurtleOptions
from .geometry import XY, wrap_line
from .scheduler import Scheduler, ThreadTimer, TimerFactory
from .shapes import Shape, as_shape, resize_shape, rotate_shape
from .steps import (
    Backward,
    Clear,
    Forward,
    Goto,
    Hide,
    Left,
    PenDown,
    PenToggle,
    PenUp,
    Reset,
    Right,
    SetAngle,
    SetColor,
    SetLineCap,
    SetShape,
    SetSpeed,
    SetWidth,
    Show,
    Step,
    StepQueue,
)
from .surface import Surface

logger = logging.getLogger(__name__)

GLYPH_OUTLINE = "black"


@dataclass
class TurtleState:
    """All mutable state of one turtle.

    ``angle`` is never normalised: repeated turns may take it outside
    ``[0, 360)``.  ``speed`` is the replay interval in milliseconds; unset or
    non-positive means immediate mode.
    """

    position: XY = (0.0, 0.0)
    angle: float = 0.0
    pen_down: bool = True
    hidden: bool = False
    wrap_enabled: bool = True
    color: Color = field(default_factory=lambda: Color(255, 0, 255))
    width: float = 1.0
    line_cap: str = "round"
    shape: Shape = ()
    speed: Optional[float] = None
    in_step: bool = False

    @property
    def step_by_step(self) -> bool:
        return self.speed is not None and self.speed > 0


class TurtleListener:
    """Synchronous change notifications, one hook per operation.

    Subclass and override the hooks you care about, then register with
    :meth:`Turtle.add_listener`.  Hooks run after the effect has been applied.
    """

    def on_step(self, step: Step) -> None: ...

    def on_forward(self, distance: float) -> None: ...

    def on_backward(self, distance: float) -> None: ...

    def on_left(self, degrees: float) -> None: ...

    def on_right(self, degrees: float) -> None: ...

    def on_set_angle(self, degrees: float) -> None: ...

    def on_goto(self, x: float, y: float) -> None: ...

    def on_hide(self) -> None: ...

    def on_show(self) -> None: ...

    def on_pen_up(self) -> None: ...

    def on_pen_down(self) -> None: ...

    def on_pen_toggle(self, pen_down: bool) -> None: ...

    def on_reset(self) -> None: ...

    def on_clear(self) -> None: ...

    def on_set_color(self, color: Color) -> None: ...

    def on_set_width(self, width: float) -> None: ...

    def on_set_shape(self, shape: Shape) -> None: ...

    def on_set_speed(self, ms: float) -> None: ...

    def on_set_line_cap(self, cap: str) -> None: ...


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)

    return wrapper


class Turtle:
    """A turtle drawing on a :class:`~penturtle.surface.Surface`."""

    def __init__(
        self,
        surface: Surface,
        options: Optional[TurtleOptions] = None,
        *,
        timer_factory: TimerFactory = ThreadTimer,
    ) -> None:
        options = options or TurtleOptions()
        self.surface = surface
        self.lock = threading.RLock()
        self._listeners: List[TurtleListener] = []
        self._default_color = to_color(options.default_color)
        self._size_modifier = float(options.turtle_size_modifier)
        self._auto_draw = bool(options.auto_draw)
        self._paused = False
        self._pre_draw: Any = None

        self.state = TurtleState(
            position=(float(options.start_position[0]), float(options.start_position[1])),
            angle=float(options.start_angle),
            hidden=bool(options.hidden),
            wrap_enabled=not options.disable_wrapping,
            color=self._default_color,
            width=float(options.width),
            line_cap=options.line_cap,
            shape=as_shape(options.shape),
        )
        self._steps = StepQueue()
        self._scheduler = Scheduler(self._steps, self._replay, timer_factory=timer_factory, lock=self.lock)

        self.surface.line_cap = self.state.line_cap
        self.draw_turtle()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def position(self) -> XY:
        return self.state.position

    @property
    def angle(self) -> float:
        return self.state.angle

    @property
    def is_pen_down(self) -> bool:
        return self.state.pen_down

    @property
    def hidden(self) -> bool:
        return self.state.hidden

    @property
    def wrap_enabled(self) -> bool:
        return self.state.wrap_enabled

    @property
    def color(self) -> Color:
        return self.state.color

    @property
    def width(self) -> float:
        return self.state.width

    @property
    def line_cap(self) -> str:
        return self.state.line_cap

    @property
    def shape(self) -> Shape:
        return self.state.shape

    @property
    def speed(self) -> Optional[float]:
        return self.state.speed

    @property
    def step_by_step(self) -> bool:
        return self.state.step_by_step

    @property
    def in_step(self) -> bool:
        return self.state.in_step

    @property
    def is_in_step(self) -> bool:
        """Whether a call made now would run immediately."""
        return not self.state.step_by_step or self.state.in_step

    @property
    def pending_steps(self) -> StepQueue:
        return self._steps

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, listener: TurtleListener) -> "Turtle":
        self._listeners.append(listener)
        return self

    def remove_listener(self, listener: TurtleListener) -> "Turtle":
        if listener in self._listeners:
            self._listeners.remove(listener)
        return self

    def _emit(self, hook: str, *args: Any) -> None:
        for listener in list(self._listeners):
            getattr(listener, hook)(*args)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def _run_now(self, step: Step) -> bool:
        if self.is_in_step:
            return True
        self._steps.push(step)
        logger.debug("Queued %s (%d pending)", step.op, len(self._steps))
        if self._auto_draw and not self._paused:
            # re-arm after the timer went idle on an empty queue
            self._scheduler.start(self.state.speed)
        return False

    def _replay(self, step: Step) -> None:
        self.state.in_step = True
        try:
            self._emit("on_step", step)
            self.apply(step)
        finally:
            self.state.in_step = False

    def apply(self, step: Step) -> "Turtle":
        """Issue ``step`` as if the matching operation had been called."""
        match step:
            case Forward(distance=distance):
                return self.forward(distance)
            case Backward(distance=distance):
                return self.backward(distance)
            case Left(degrees=degrees):
                return self.left(degrees)
            case Right(degrees=degrees):
                return self.right(degrees)
            case SetAngle(degrees=degrees):
                return self.set_angle(degrees)
            case Goto(x=x, y=y):
                return self.goto(x, y)
            case Hide():
                return self.hide()
            case Show():
                return self.show()
            case PenUp():
                return self.pen_up()
            case PenDown():
                return self.pen_down()
            case PenToggle():
                return self.pen_toggle()
            case Reset():
                return self.reset()
            case Clear():
                return self.clear()
            case SetColor(color=color):
                return self.set_color(color)
            case SetWidth(width=width):
                return self.set_width(width)
            case SetShape(shape=shape):
                return self.set_shape(shape)
            case SetSpeed(ms=ms):
                return self.set_speed(ms)
            case SetLineCap(cap=cap):
                return self.set_line_cap(cap)
        raise TypeError(f"Unsupported step: {step!r}")

    # ------------------------------------------------------------------
    # Step timer
    # ------------------------------------------------------------------
    @_locked
    def start_drawing(self) -> "Turtle":
        """Arm the step timer at the current speed.  No-op without a positive speed."""
        self._paused = False
        self._scheduler.start(self.state.speed)
        return self

    @_locked
    def stop_drawing(self) -> "Turtle":
        """Release the step timer.  Queued steps are kept and new calls keep queueing
        until :meth:`start_drawing`.
        """
        self._paused = True
        self._scheduler.stop()
        return self

    def next_step(self) -> bool:
        """Replay the next queued step now, skipping the interval."""
        return self._scheduler.tick()

    def drain(self) -> int:
        """Replay every queued step synchronously.  Returns how many ran."""
        count = 0
        while self._scheduler.tick():
            count += 1
        return count

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------
    @_locked
    def forward(self, distance: float) -> "Turtle":
        if self._run_now(Forward(distance)):
            self._straight_line(distance)
            self._emit("on_forward", distance)
        return self

    @_locked
    def backward(self, distance: float) -> "Turtle":
        if self._run_now(Backward(distance)):
            self._straight_line(-distance)
            self._emit("on_backward", distance)
        return self

    @_locked
    def left(self, degrees: float) -> "Turtle":
        if self._run_now(Left(degrees)):
            self._turn(-degrees)
            self._emit("on_left", degrees)
        return self

    @_locked
    def right(self, degrees: float) -> "Turtle":
        if self._run_now(Right(degrees)):
            self._turn(degrees)
            self._emit("on_right", degrees)
        return self

    @_locked
    def set_angle(self, degrees: float) -> "Turtle":
        if self._run_now(SetAngle(degrees)):
            self._set_angle(degrees)
            self._emit("on_set_angle", degrees)
        return self

    @_locked
    def goto(self, x: float, y: float) -> "Turtle":
        if self._run_now(Goto(x, y)):
            self._goto(x, y)
            self._emit("on_goto", x, y)
        return self

    # ------------------------------------------------------------------
    # Visibility and pen
    # ------------------------------------------------------------------
    @_locked
    def hide(self) -> "Turtle":
        if self._run_now(Hide()):
            self.state.hidden = True
            self.restore_image_data()
            self.draw_turtle()
            self._emit("on_hide")
        return self

    @_locked
    def show(self) -> "Turtle":
        if self._run_now(Show()):
            self.state.hidden = False
            self.restore_image_data()
            self.draw_turtle()
            self._emit("on_show")
        return self

    @_locked
    def pen_up(self) -> "Turtle":
        if self._run_now(PenUp()):
            self.state.pen_down = False
            self._emit("on_pen_up")
        return self

    @_locked
    def pen_down(self) -> "Turtle":
        if self._run_now(PenDown()):
            self.state.pen_down = True
            self._emit("on_pen_down")
        return self

    @_locked
    def pen_toggle(self) -> "Turtle":
        if self._run_now(PenToggle()):
            self.state.pen_down = not self.state.pen_down
            self._emit("on_pen_toggle", self.state.pen_down)
        return self

    # ------------------------------------------------------------------
    # Canvas
    # ------------------------------------------------------------------
    @_locked
    def clear(self) -> "Turtle":
        """Wipe every stroke.  The glyph is redrawn on the empty canvas."""
        if self._run_now(Clear()):
            self._clear()
            self._emit("on_clear")
        return self

    @_locked
    def reset(self) -> "Turtle":
        """Reset the turtle and the canvas."""
        if self._run_now(Reset()):
            self._reset()
            self._emit("on_reset")
        return self

    @_locked
    def instant_reset(self) -> "Turtle":
        """Reset right away without going through the step queue.

        Queued steps are left alone and will still be replayed if the timer
        is running.
        """
        self._reset()
        self._emit("on_reset")
        return self

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------
    @_locked
    def set_color(self, color: ColorResolvable) -> "Turtle":
        if isinstance(color, list):
            color = tuple(color)
        if self._run_now(SetColor(color)):
            self._set_color(color)
            self._emit("on_set_color", self.state.color)
        return self

    @_locked
    def set_width(self, width: float) -> "Turtle":
        if self._run_now(SetWidth(width)):
            self._set_width(width)
            self._emit("on_set_width", width)
        return self

    @_locked
    def set_shape(self, shape: Sequence[Sequence[float]]) -> "Turtle":
        frozen = as_shape(shape)
        if self._run_now(SetShape(frozen)):
            self.state.shape = frozen
            self.restore_image_data()
            self.draw_turtle()
            self._emit("on_set_shape", frozen)
        return self

    @_locked
    def set_line_cap(self, cap: str) -> "Turtle":
        if self._run_now(SetLineCap(cap)):
            # passed through as given, the surface decides what it accepts
            self.state.line_cap = cap
            self.surface.line_cap = cap
            self._emit("on_set_line_cap", cap)
        return self

    @_locked
    def set_speed(self, ms: float) -> "Turtle":
        """Set the delay between replayed steps; ``ms > 0`` enables step-by-step mode."""
        if self._run_now(SetSpeed(ms)):
            self.state.speed = ms
            self._scheduler.stop()
            self._paused = False
            if self._auto_draw:
                self._scheduler.start(ms)
            logger.debug("Speed set to %s ms (step-by-step=%s)", ms, self.state.step_by_step)
            self._emit("on_set_speed", ms)
        return self

    # ------------------------------------------------------------------
    # Immediate effects
    # ------------------------------------------------------------------
    def _straight_line(self, distance: float) -> None:
        st = self.state
        self.restore_image_data()
        half_w = self.surface.width / 2.0
        half_h = self.surface.height / 2.0
        result = wrap_line(st.position, st.angle, distance, half_w, half_h, wrap=st.wrap_enabled)

        if st.pen_down and result.segments:
            s = self.surface
            s.line_width = st.width
            s.stroke_style = st.color.to_rgba()
            s.line_cap = st.line_cap
            s.begin_path()
            for seg in result.segments:
                s.move_to(*seg.start)
                s.line_to(*seg.end)
            s.stroke()

        self.save_image_data()
        self._goto(*result.end)

    def _turn(self, degrees: float) -> None:
        self.state.angle += degrees
        self.restore_image_data()
        self.draw_turtle()

    def _set_angle(self, degrees: float) -> None:
        self.state.angle = degrees
        self.restore_image_data()
        self.draw_turtle()

    def _goto(self, x: float, y: float) -> None:
        self.state.position = (x, y)
        self.restore_image_data()
        self.draw_turtle()

    def _set_color(self, color: ColorResolvable) -> None:
        self.state.color = to_color(color)
        self.restore_image_data()
        self.draw_turtle()

    def _set_width(self, width: float) -> None:
        self.state.width = width
        self.restore_image_data()
        self.draw_turtle()

    def _clear(self) -> None:
        self.surface.clear()
        self.draw_turtle()

    def _reset(self) -> None:
        st = self.state
        st.hidden = False
        st.wrap_enabled = True
        st.pen_down = True
        st.speed = None
        self._set_width(1.0)
        self._set_color(self._default_color)
        self._set_angle(0.0)
        self._goto(0.0, 0.0)
        self._clear()
        logger.debug("Turtle reset (%d step(s) still queued)", len(self._steps))

    # ------------------------------------------------------------------
    # Glyph and helpers
    # ------------------------------------------------------------------
    def draw_turtle(self) -> "Turtle":
        """Snapshot the drawing, then paint the glyph on top unless hidden."""
        self.save_image_data()
        st = self.state
        if st.hidden or not st.shape:
            return self

        size = max(st.width / 2.0, 1.0) * self._size_modifier
        shape = rotate_shape(resize_shape(st.shape, size), st.angle)
        x, y = st.position

        s = self.surface
        s.begin_path()
        s.move_to(x, y)
        for vx, vy in shape:
            s.line_to(x + vx, y + vy)
        s.close_path()
        s.fill_style = st.color.to_hex()
        s.fill()
        s.line_width = max(st.width / 4.0, 1.0)
        s.stroke_style = GLYPH_OUTLINE
        s.stroke()
        return self

    def save_image_data(self) -> "Turtle":
        self._pre_draw = self.surface.snapshot()
        return self

    def restore_image_data(self) -> "Turtle":
        if self._pre_draw is not None:
            self.surface.restore(self._pre_draw)
        return self

    @_locked
    def draw_grid(self, width: float = 40.0, height: Optional[float] = None) -> "Turtle":
        """Draw a grid under the turtle, with cells ``width`` x ``height`` units.

        Thin lines use the current color at 20% opacity, the two axes through
        the origin 3 units wide at 50%.  Runs immediately, it is not a step.
        """
        width = max(width or 40.0, 2.0)
        height = max(height or width, 2.0)

        self.restore_image_data()
        s = self.surface
        half_w = s.width / 2.0
        half_h = s.height / 2.0
        main_color = self.state.color.with_alpha(0.5).to_rgba()
        sec_color = self.state.color.with_alpha(0.2).to_rgba()

        s.begin_path()
        pos = width
        while pos <= half_w:
            for gx in (pos, -pos):
                s.move_to(gx, -half_h)
                s.line_to(gx, half_h)
            pos += width
        pos = height
        while pos <= half_h:
            for gy in (pos, -pos):
                s.move_to(-half_w, gy)
                s.line_to(half_w, gy)
            pos += height
        s.line_width = 1.0
        s.stroke_style = sec_color
        s.stroke()

        s.begin_path()
        s.move_to(0.0, -half_h)
        s.line_to(0.0, half_h)
        s.move_to(-half_w, 0.0)
        s.line_to(half_w, 0.0)
        s.line_width = 3.0
        s.stroke_style = main_color
        s.stroke()

        self.save_image_data()
        self.draw_turtle()
        return self


__all__ = ["Turtle", "TurtleState", "TurtleListener"]
