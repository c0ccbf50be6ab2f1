from __future__ import annotations

import pytest

from penturtle.config import CanvasSettings, TurtleOptions
from penturtle.controller import TurtleController
from penturtle.scheduler import ManualTimerFactory


@pytest.fixture()
def controller(timers: ManualTimerFactory) -> TurtleController:
    return TurtleController(canvas=CanvasSettings(200, 200), timer_factory=timers)


def test_run_commands_draws_immediately(controller: TurtleController):
    count = controller.run_commands(
        [
            {"op": "set_color", "args": ["red"]},
            {"op": "forward", "args": [40]},
            {"op": "right", "args": [90]},
            {"op": "forward", "args": [10]},
        ]
    )

    assert count == 4
    status = controller.turtle_status()
    assert status["position"] == pytest.approx([10.0, 40.0])
    assert status["angle"] == 90.0
    assert status["color"] == "#ff0000"
    assert status["pending_steps"] == 0
    assert controller.status()["controller"]["commands_received"] == 4


def test_bad_batch_is_rejected_whole(controller: TurtleController):
    with pytest.raises(ValueError):
        controller.run_commands([{"op": "forward", "args": [10]}, {"op": "jump"}])

    assert controller.turtle_status()["position"] == [0.0, 0.0]
    state = controller.status()["controller"]
    assert state["commands_received"] == 0
    assert "jump" in state["last_error"]


def test_script_errors_name_the_line(controller: TurtleController):
    with pytest.raises(ValueError, match="line 3"):
        controller.run_script("forward 10\n\nforward ten\n")

    assert controller.status_lines()[-1].startswith("Error: line 3")


def test_script_skips_comments(controller: TurtleController):
    assert controller.run_script("# square\nforward 10\nright 90\n\nforward 10\n") == 3


def test_step_mode_counts_replays(controller: TurtleController, timers: ManualTimerFactory):
    controller.set_speed(20)
    controller.run_script("forward 10\nleft 90\nforward 10")

    status = controller.turtle_status()
    assert status["step_by_step"] is True
    assert status["timer_running"] is True
    assert status["pending_steps"] == 3

    timers.tick()
    assert controller.status()["controller"]["steps_replayed"] == 1
    assert controller.status()["controller"]["last_step"] == "forward"

    assert controller.drain() == 2
    assert controller.turtle_status()["position"] == pytest.approx([-10.0, 10.0])
    assert controller.status()["controller"]["steps_replayed"] == 3


def test_next_step_and_stop(controller: TurtleController, timers: ManualTimerFactory):
    controller.set_speed(20)
    controller.run_script("forward 1\nforward 2")
    controller.stop_drawing()

    assert controller.turtle_status()["timer_running"] is False
    assert controller.next_step() is True
    assert controller.turtle_status()["pending_steps"] == 1

    controller.start_drawing()
    timers.tick(2)
    assert controller.turtle_status()["timer_running"] is False
    assert controller.turtle_status()["position"] == pytest.approx([0.0, 3.0])


def test_reset_is_immediate_and_logged(controller: TurtleController):
    controller.run_script("set_width 5\nforward 30")
    controller.reset()

    status = controller.turtle_status()
    assert status["position"] == [0.0, 0.0]
    assert status["width"] == 1.0
    assert controller.status_lines()[-1] == "Turtle reset"


def test_strokes_and_preview(controller: TurtleController):
    controller.run_script("set_color blue\nforward 20")

    data = controller.strokes()
    assert data["width"] == 200
    kinds = [s["kind"] for s in data["strokes"]]
    assert kinds == ["stroke", "fill", "stroke"]
    assert data["strokes"][0]["style"] == "rgba(0, 0, 255, 1)"
    assert data["strokes"][0]["paths"] == [[[0.0, 0.0], [0.0, 20.0]]]

    svg = controller.preview_svg()
    assert svg.startswith("<svg")
    assert 'stroke="rgba(0, 0, 255, 1)"' in svg


def test_options_are_passed_to_the_turtle(timers: ManualTimerFactory):
    controller = TurtleController(
        canvas=CanvasSettings(100, 100),
        options=TurtleOptions(hidden=True, default_color="green"),
        timer_factory=timers,
    )

    assert controller.strokes()["strokes"] == []
    assert controller.turtle_status()["color"] == "#008000"
