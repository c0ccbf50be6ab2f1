"""Timer driven replay of queued turtle steps."""

from __future__ import annotations

import logging
import math
import threading
from contextlib import nullcontext
from typing import Callable, ContextManager, List, Optional, Protocol

from .steps import Step, StepQueue

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TimerHandle(Protocol):
    interval: float

    def start(self) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_alive(self) -> bool: ...


TimerFactory = Callable[[float, TickCallback], TimerHandle]


class ThreadTimer:
    """Repeating timer firing ``callback`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, interval: float, callback: TickCallback) -> None:
        self.interval = interval
        self.callback = callback
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Timer already started")
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stop_event.set()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                if self._stop_event.wait(self.interval):
                    break
                self.callback()
            except Exception:
                logger.exception("Step timer failed, stopping")
                self._stop_event.set()


class ManualTimer:
    """Timer that only fires when told to.  Used for tests and synchronous replay."""

    def __init__(self, interval: float, callback: TickCallback) -> None:
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False
        self.fired = 0

    @property
    def is_alive(self) -> bool:
        return self.started and not self.cancelled

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> bool:
        if not self.is_alive:
            return False
        self.fired += 1
        self.callback()
        return True


class ManualTimerFactory:
    """Creates :class:`ManualTimer` objects and remembers them."""

    def __init__(self) -> None:
        self.timers: List[ManualTimer] = []

    def __call__(self, interval: float, callback: TickCallback) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> Optional[ManualTimer]:
        for timer in reversed(self.timers):
            if timer.is_alive:
                return timer
        return None

    def tick(self, times: int = 1) -> int:
        """Fire whichever timer is armed, ``times`` times.  Returns the ticks delivered."""
        delivered = 0
        for _ in range(times):
            timer = self.active
            if timer is None:
                break
            timer.fire()
            delivered += 1
        return delivered


class Scheduler:
    """Replays one queued step per timer tick.

    The scheduler never keeps polling an empty queue: the first tick that finds
    nothing to replay releases the timer.  Stopping only drops the timer, the
    queued steps stay where they are.
    """

    def __init__(
        self,
        queue: StepQueue,
        replay: Callable[[Step], None],
        *,
        timer_factory: TimerFactory = ThreadTimer,
        lock: Optional[ContextManager] = None,
    ) -> None:
        self.queue = queue
        self.replay = replay
        self.timer_factory = timer_factory
        self._lock = lock if lock is not None else nullcontext()
        self._timer: Optional[TimerHandle] = None

    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._timer is not None and self._timer.is_alive

    @property
    def interval_ms(self) -> Optional[float]:
        return self._timer.interval * 1000.0 if self._timer is not None else None

    # ------------------------------------------------------------------
    def start(self, interval_ms: Optional[float]) -> bool:
        """Arm the timer.  No-op when already armed or ``interval_ms`` is unset, non-positive
        or out of range.
        """
        if self._timer is not None:
            if self._timer.is_alive:
                return False
            # the timer died on its own, drop it so a new one can be armed
            self._timer = None
        if interval_ms is None or not interval_ms > 0:
            return False
        if not math.isfinite(interval_ms) or interval_ms / 1000.0 > threading.TIMEOUT_MAX:
            logger.warning("Ignoring out of range step interval %r ms", interval_ms)
            return False
        timer = self.timer_factory(interval_ms / 1000.0, lambda: self._on_timer(timer))
        self._timer = timer
        timer.start()
        logger.debug("Step timer armed at %.1f ms", interval_ms)
        return True

    def stop(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        logger.debug("Step timer released (%d step(s) pending)", len(self.queue))

    def tick(self) -> bool:
        """Replay the next step.  Returns ``False`` (and releases the timer) when idle."""
        with self._lock:
            step = self.queue.pop()
            if step is None:
                self.stop()
                return False
            self.replay(step)
            return True

    def _on_timer(self, timer: TimerHandle) -> None:
        with self._lock:
            # a tick from a timer that has since been replaced must not replay
            if self._timer is not timer:
                return
            try:
                self.tick()
            except Exception:
                self.stop()
                raise


__all__ = [
    "Scheduler",
    "ThreadTimer",
    "ManualTimer",
    "ManualTimerFactory",
    "TimerFactory",
    "TimerHandle",
]
