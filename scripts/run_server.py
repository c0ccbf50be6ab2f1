"""Entrypoint for launching the turtle FastAPI server."""
from __future__ import annotations

import argparse
import logging

import uvicorn

from penturtle.config import ServerSettings, parse_canvas_size
from penturtle.server.app import create_app, create_controller


def _canvas_size(value: str):
    try:
        return parse_canvas_size(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def main() -> None:
    defaults = ServerSettings()
    parser = argparse.ArgumentParser(description="Serve a turtle over HTTP.")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument(
        "--canvas-size",
        "-c",
        dest="canvas",
        type=_canvas_size,
        default=defaults.canvas,
        metavar="WIDTHxHEIGHT",
        help="Canvas size in pixels, e.g. 800x600.",
    )
    parser.add_argument("--speed", type=float, default=None, help="Initial step interval in ms.")
    parser.add_argument("--no-wrap", action="store_true", help="Start with edge wrapping disabled.")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())
    settings = ServerSettings(host=args.host, port=args.port, canvas=args.canvas, initial_speed=args.speed)
    settings.options.disable_wrapping = args.no_wrap
    app = create_app(create_controller(settings))
    uvicorn.run(app, host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
