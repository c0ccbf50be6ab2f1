"""Entry point for running the NiceGUI turtle playground."""

import logging

from penturtle.app import run


if __name__ in {"__main__", "__mp_main__"}:
    logging.basicConfig(level=logging.INFO)
    run(reload=False, host="0.0.0.0", port=8080, title="Turtle Playground")
