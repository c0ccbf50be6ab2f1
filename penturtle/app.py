"""NiceGUI playground for driving a turtle from the browser."""

from __future__ import annotations

import time
from typing import Dict, Optional

from nicegui import app, ui

from .config import ServerSettings
from .controller import TurtleController
from .server.app import create_controller

DEFAULT_SCRIPT = """# one command per line
set_color red
set_width 2
goto -100 0
forward 100
right 120
forward 100
right 120
forward 100
"""

# ---------------------------------------------------------------------------
# Global state shared between UI and backend
# ---------------------------------------------------------------------------
settings = ServerSettings()
controller: TurtleController = create_controller(settings)

# UI element references (populated in create_ui)
preview_html: Optional[ui.html] = None  # type: ignore[assignment]
script_area: Optional[ui.textarea] = None  # type: ignore[assignment]
speed_input: Optional[ui.number] = None  # type: ignore[assignment]
state_label: Optional[ui.label] = None  # type: ignore[assignment]
status_area: Optional[ui.textarea] = None  # type: ignore[assignment]

_last_preview: str = ""


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _append_status(message: str) -> None:
    timestamp = time.strftime("%H:%M:%S")
    controller.log(f"[{timestamp}] {message}")


def _sync_to_ui() -> None:
    global _last_preview
    if preview_html is not None:
        svg = controller.preview_svg()
        if svg != _last_preview:
            preview_html.content = svg
            _last_preview = svg
    if state_label is not None:
        st = controller.turtle_status()
        x, y = st["position"]
        state_label.text = (
            f"x={x:.1f} y={y:.1f} angle={st['angle']:.1f} pen={'down' if st['pen_down'] else 'up'} "
            f"pending={st['pending_steps']} timer={'on' if st['timer_running'] else 'off'}"
        )
    if status_area is not None:
        status_area.value = "\n".join(controller.status_lines(250))


def _run_script() -> None:
    script = script_area.value if script_area is not None else ""
    try:
        count = controller.run_script(script or "")
    except ValueError as exc:
        _append_status(f"Script rejected: {exc}")
        return
    _append_status(f"Accepted {count} command(s)")


def _apply_speed(value) -> None:
    try:
        ms = float(value or 0)
    except (TypeError, ValueError):
        return
    controller.set_speed(ms)
    _append_status(f"Speed set to {ms:g} ms" if ms > 0 else "Immediate mode")


def _next_step() -> None:
    if not controller.next_step():
        _append_status("No pending steps")


def _drain() -> None:
    _append_status(f"Replayed {controller.drain()} step(s)")


def _start() -> None:
    controller.start_drawing()


def _stop() -> None:
    controller.stop_drawing()
    _append_status("Drawing paused")


def _reset() -> None:
    controller.reset()


def _draw_grid() -> None:
    controller.turtle.draw_grid(50)


# ---------------------------------------------------------------------------
# UI construction
# ---------------------------------------------------------------------------

def create_ui() -> None:
    global preview_html, script_area, speed_input, state_label, status_area

    ui.page_title("Turtle Playground")
    ui.markdown("# Turtle Playground")

    with ui.row().classes("w-full gap-6"):
        with ui.column().classes("w-1/3 gap-4"):
            with ui.card().classes("w-full"):
                ui.label("Commands").classes("text-lg font-semibold")
                script_area = ui.textarea(value=DEFAULT_SCRIPT).props("rows=14").classes("w-full font-mono")
                with ui.row().classes("gap-2"):
                    ui.button("Run", on_click=_run_script)
                    ui.button("Grid", on_click=_draw_grid)
                    ui.button("Reset", on_click=_reset)

            with ui.card().classes("w-full"):
                ui.label("Replay").classes("text-lg font-semibold")
                speed_input = ui.number(
                    label="Speed (ms per step, 0 = immediate)", value=0, min=0, step=10,
                    on_change=lambda e: _apply_speed(e.value),
                )
                with ui.row().classes("gap-2"):
                    ui.button("Start", on_click=_start)
                    ui.button("Stop", on_click=_stop)
                    ui.button("Step", on_click=_next_step)
                    ui.button("Finish", on_click=_drain)

            with ui.card().classes("w-full"):
                ui.label("Status log").classes("text-lg font-semibold")
                status_area = ui.textarea(value="").classes("w-full")
                status_area.props("readonly")

        with ui.column().classes("w-3/5 gap-4"):
            with ui.card().classes("w-full"):
                ui.label("Canvas").classes("text-lg font-semibold")
                preview_html = ui.html(controller.preview_svg()).classes("w-full")
                state_label = ui.label("").classes("text-sm text-gray-500 font-mono")

    ui.timer(0.1, _sync_to_ui)


@app.get("/api/status")
def api_status() -> Dict:
    return controller.status()


def run(**kwargs) -> None:
    ui.run(**kwargs)


@ui.page("/")
def index() -> None:
    create_ui()
