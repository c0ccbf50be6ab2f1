"""FastAPI application exposing a turtle over HTTP."""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response

from ..config import ServerSettings
from ..controller import TurtleController

logger = logging.getLogger(__name__)


def create_controller(settings: Optional[ServerSettings] = None) -> TurtleController:
    settings = settings or ServerSettings()
    controller = TurtleController(canvas=settings.canvas, options=settings.options)
    if settings.initial_speed is not None:
        controller.set_speed(settings.initial_speed)
    return controller


def create_app(controller: Optional[TurtleController] = None) -> FastAPI:
    controller = controller or create_controller()
    app = FastAPI(title="Turtle Control Server")
    app.state.controller = controller
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("Turtle server canvas: %gx%g", controller.surface.width, controller.surface.height)

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return (
            "<!doctype html><html><head><title>Turtle</title>"
            '<meta http-equiv="refresh" content="1"></head>'
            f"<body>{controller.preview_svg()}</body></html>"
        )

    @app.get("/api/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/state")
    def state() -> Dict[str, Any]:
        return controller.status()

    @app.post("/api/commands")
    def post_commands(payload: Dict[str, Any]) -> Dict[str, Any]:
        commands = payload.get("commands")
        script = payload.get("script")
        try:
            if isinstance(commands, list):
                count = controller.run_commands(commands)
            elif isinstance(script, str):
                count = controller.run_script(script)
            else:
                raise ValueError("Expected a 'commands' list or a 'script' string")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {
            "ok": True,
            "accepted": count,
            "pending": controller.turtle_status()["pending_steps"],
        }

    @app.post("/api/speed")
    def set_speed(payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            ms = float(payload["ms"])
        except (KeyError, TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail="ms is required") from exc
        if not math.isfinite(ms):
            raise HTTPException(status_code=400, detail="ms must be a finite number")
        controller.set_speed(ms)
        return {"ok": True, "turtle": controller.turtle_status()}

    @app.post("/api/drawing/start")
    def start_drawing() -> Dict[str, Any]:
        controller.start_drawing()
        return {"ok": True, "timer_running": controller.turtle_status()["timer_running"]}

    @app.post("/api/drawing/stop")
    def stop_drawing() -> Dict[str, Any]:
        controller.stop_drawing()
        return {"ok": True}

    @app.post("/api/step")
    def next_step() -> Dict[str, Any]:
        ran = controller.next_step()
        return {"ok": True, "ran": ran, "pending": controller.turtle_status()["pending_steps"]}

    @app.post("/api/drain")
    def drain() -> Dict[str, Any]:
        return {"ok": True, "replayed": controller.drain()}

    @app.post("/api/reset")
    def reset() -> Dict[str, Any]:
        controller.reset()
        return {"ok": True}

    @app.get("/api/strokes")
    def strokes() -> Dict[str, Any]:
        return controller.strokes()

    @app.get("/api/preview.svg")
    def preview() -> Response:
        return Response(content=controller.preview_svg(), media_type="image/svg+xml")

    return app


app = create_app()

__all__ = ["app", "create_app", "create_controller"]
