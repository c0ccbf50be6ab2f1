from __future__ import annotations

import pytest

from penturtle.scheduler import ManualTimerFactory
from penturtle.surface import RecordingSurface
from penturtle.turtle import Turtle


@pytest.fixture()
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface(width=200.0, height=200.0)


@pytest.fixture()
def turtle(surface: RecordingSurface, timers: ManualTimerFactory) -> Turtle:
    return Turtle(surface, timer_factory=timers)
