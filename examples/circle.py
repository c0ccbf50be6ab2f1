"""Example script that draws a circle step by step through the server."""
from __future__ import annotations

import requests

BASE_URL = "http://localhost:8000"


def build_circle(steps: int = 360, step_len: float = 2.0):
    commands = [
        {"op": "hide", "args": []},
        {"op": "set_color", "args": ["red"]},
        {"op": "set_width", "args": [3]},
        {"op": "goto", "args": [-100, 0]},
    ]
    for _ in range(steps):
        commands.append({"op": "forward", "args": [step_len]})
        commands.append({"op": "right", "args": [360.0 / steps]})
    return commands


def main() -> None:
    res = requests.post(f"{BASE_URL}/api/speed", json={"ms": 5}, timeout=5)
    res.raise_for_status()
    res = requests.post(f"{BASE_URL}/api/commands", json={"commands": build_circle()}, timeout=5)
    res.raise_for_status()
    print(res.json())


if __name__ == "__main__":
    main()
