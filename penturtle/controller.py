"""High level orchestration for the turtle server and UI."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .config import CanvasSettings, TurtleOptions
from .rendering import preview_strokes, render_preview_svg
from .scheduler import ThreadTimer, TimerFactory
from .steps import Step, step_from_dict, step_from_text
from .surface import RecordingSurface
from .turtle import Turtle, TurtleListener

logger = logging.getLogger(__name__)


@dataclass
class ControllerState:
    commands_received: int = 0
    steps_replayed: int = 0
    last_step: Optional[str] = None
    last_error: Optional[str] = None
    status_lines: List[str] = field(default_factory=list)

    def log(self, message: str) -> None:
        self.status_lines.append(message)
        if len(self.status_lines) > 200:
            del self.status_lines[: len(self.status_lines) - 200]


class _ReplayRecorder(TurtleListener):
    def __init__(self, state: ControllerState, lock: threading.Lock) -> None:
        self.state = state
        self.lock = lock

    def on_step(self, step: Step) -> None:
        with self.lock:
            self.state.steps_replayed += 1
            self.state.last_step = step.op

    def on_reset(self) -> None:
        with self.lock:
            self.state.log("Turtle reset")


@dataclass
class TurtleController:
    """Own one turtle and its recording surface, and serialise access to them."""

    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    options: TurtleOptions = field(default_factory=TurtleOptions)
    timer_factory: TimerFactory = ThreadTimer

    def __post_init__(self) -> None:
        self.surface = RecordingSurface(width=self.canvas.width, height=self.canvas.height)
        self.turtle = Turtle(self.surface, self.options, timer_factory=self.timer_factory)
        self._lock = threading.Lock()
        self._state = ControllerState()
        self.turtle.add_listener(_ReplayRecorder(self._state, self._lock))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def parse_commands(self, commands: Iterable[Dict[str, Any]]) -> List[Step]:
        """Parse every command first so a bad one rejects the whole batch."""
        return [step_from_dict(cmd) for cmd in commands]

    def parse_script(self, script: str) -> List[Step]:
        steps: List[Step] = []
        for lineno, line in enumerate(script.splitlines(), start=1):
            try:
                step = step_from_text(line)
            except ValueError as exc:
                raise ValueError(f"line {lineno}: {exc}") from exc
            if step is not None:
                steps.append(step)
        return steps

    def run_steps(self, steps: Iterable[Step]) -> int:
        count = 0
        with self.turtle.lock:
            for step in steps:
                self.turtle.apply(step)
                count += 1
        with self._lock:
            self._state.commands_received += count
        logger.debug("Applied %d command(s), %d pending", count, len(self.turtle.pending_steps))
        return count

    def run_commands(self, commands: Iterable[Dict[str, Any]]) -> int:
        try:
            steps = self.parse_commands(commands)
        except ValueError as exc:
            self._record_error(str(exc))
            raise
        return self.run_steps(steps)

    def run_script(self, script: str) -> int:
        try:
            steps = self.parse_script(script)
        except ValueError as exc:
            self._record_error(str(exc))
            raise
        return self.run_steps(steps)

    def _record_error(self, message: str) -> None:
        logger.warning("Rejected commands: %s", message)
        with self._lock:
            self._state.last_error = message
            self._state.log(f"Error: {message}")

    # ------------------------------------------------------------------
    # Replay control
    # ------------------------------------------------------------------
    def set_speed(self, ms: float) -> None:
        self.turtle.set_speed(ms)

    def start_drawing(self) -> None:
        self.turtle.start_drawing()

    def stop_drawing(self) -> None:
        self.turtle.stop_drawing()

    def next_step(self) -> bool:
        return self.turtle.next_step()

    def drain(self) -> int:
        return self.turtle.drain()

    def reset(self) -> None:
        self.turtle.instant_reset()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def turtle_status(self) -> Dict[str, Any]:
        with self.turtle.lock:
            st = self.turtle.state
            x, y = st.position
            return {
                "position": [x, y],
                "angle": st.angle,
                "pen_down": st.pen_down,
                "hidden": st.hidden,
                "wrap_enabled": st.wrap_enabled,
                "color": st.color.to_hex(),
                "width": st.width,
                "line_cap": st.line_cap,
                "speed": st.speed,
                "step_by_step": st.step_by_step,
                "pending_steps": len(self.turtle.pending_steps),
                "timer_running": self.turtle.scheduler.is_running,
            }

    def status(self) -> Dict[str, Any]:
        with self._lock:
            state = self._state
            controller = {
                "commands_received": state.commands_received,
                "steps_replayed": state.steps_replayed,
                "last_step": state.last_step,
                "last_error": state.last_error,
            }
        return {"turtle": self.turtle_status(), "controller": controller}

    def status_lines(self, limit: int = 50) -> List[str]:
        with self._lock:
            return list(self._state.status_lines[-limit:])

    def log(self, message: str) -> None:
        with self._lock:
            self._state.log(message)

    def strokes(self) -> Dict[str, Any]:
        with self.turtle.lock:
            return preview_strokes(self.surface)

    def preview_svg(self) -> str:
        with self.turtle.lock:
            return render_preview_svg(self.surface)


__all__ = ["TurtleController", "ControllerState"]
