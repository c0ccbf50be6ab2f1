from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from penturtle.config import CanvasSettings
from penturtle.controller import TurtleController
from penturtle.scheduler import ManualTimerFactory
from penturtle.server.app import create_app


@pytest.fixture()
def client(timers: ManualTimerFactory) -> TestClient:
    controller = TurtleController(canvas=CanvasSettings(200, 200), timer_factory=timers)
    return TestClient(create_app(controller))


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_post_commands(client: TestClient):
    response = client.post("/api/commands", json={"commands": [{"op": "forward", "args": [25]}]})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "accepted": 1, "pending": 0}
    state = client.get("/api/state").json()
    assert state["turtle"]["position"] == pytest.approx([0.0, 25.0])


def test_post_script(client: TestClient):
    response = client.post("/api/commands", json={"script": "right 90\nforward 5"})

    assert response.json()["accepted"] == 2
    assert client.get("/api/state").json()["turtle"]["angle"] == 90.0


def test_bad_commands_are_400(client: TestClient):
    assert client.post("/api/commands", json={"commands": [{"op": "fly"}]}).status_code == 400
    assert client.post("/api/commands", json={"script": "forward"}).status_code == 400
    assert client.post("/api/commands", json={}).status_code == 400
    assert client.post("/api/speed", json={}).status_code == 400


def test_speed_step_and_drain(client: TestClient, timers: ManualTimerFactory):
    response = client.post("/api/speed", json={"ms": 50})
    assert response.json()["turtle"]["step_by_step"] is True

    accepted = client.post("/api/commands", json={"script": "forward 1\nforward 2\nforward 3"}).json()
    assert accepted["pending"] == 3

    step = client.post("/api/step").json()
    assert step == {"ok": True, "ran": True, "pending": 2}

    client.post("/api/drawing/stop")
    assert client.get("/api/state").json()["turtle"]["timer_running"] is False
    assert client.post("/api/drawing/start").json()["timer_running"] is True
    timers.tick()

    assert client.post("/api/drain").json() == {"ok": True, "replayed": 1}
    assert client.get("/api/state").json()["turtle"]["position"] == pytest.approx([0.0, 6.0])


def test_reset(client: TestClient):
    client.post("/api/commands", json={"script": "forward 40"})
    assert client.post("/api/reset").json() == {"ok": True}
    assert client.get("/api/state").json()["turtle"]["position"] == [0.0, 0.0]


def test_strokes_and_preview(client: TestClient):
    client.post("/api/commands", json={"script": "forward 10"})

    strokes = client.get("/api/strokes").json()
    assert strokes["height"] == 200
    assert len(strokes["strokes"]) == 3

    preview = client.get("/api/preview.svg")
    assert preview.headers["content-type"].startswith("image/svg+xml")
    assert preview.text.startswith("<svg")

    index = client.get("/")
    assert index.status_code == 200
    assert "<svg" in index.text


@pytest.mark.parametrize(
    "body",
    [
        {"commands": [{"op": "forward", "args": 5}]},
        {"commands": [5]},
        {"commands": [{"op": ["forward"], "args": [5]}]},
    ],
)
def test_malformed_command_shapes_are_400(client: TestClient, body):
    response = client.post("/api/commands", json=body)

    assert response.status_code == 400
    assert client.get("/api/state").json()["turtle"]["position"] == [0.0, 0.0]


def test_non_finite_speed_is_400(client: TestClient):
    response = client.post("/api/speed", json={"ms": "inf"})

    assert response.status_code == 400
    assert client.get("/api/state").json()["turtle"]["step_by_step"] is False
