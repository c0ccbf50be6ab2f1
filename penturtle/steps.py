"""Deferred turtle operations.

Every public turtle operation has a matching immutable step type carrying
exactly the arguments of the call.  Steps are queued in a :class:`StepQueue`
while the turtle runs in step-by-step mode and replayed later by the
scheduler.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Deque, Dict, Iterator, List, Optional, Sequence, Tuple, Type, Union

from .colors import Color, ColorResolvable
from .geometry import XY


class _StepBase:
    op: ClassVar[str]

    @property
    def args(self) -> Tuple[Any, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))  # type: ignore[arg-type]

    def to_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "args": [_jsonable(a) for a in self.args]}


def _jsonable(value: Any) -> Any:
    if isinstance(value, Color):
        return [value.r, value.g, value.b, value.a]
    if isinstance(value, tuple):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class Forward(_StepBase):
    distance: float
    op: ClassVar[str] = "forward"


@dataclass(frozen=True)
class Backward(_StepBase):
    distance: float
    op: ClassVar[str] = "backward"


@dataclass(frozen=True)
class Left(_StepBase):
    degrees: float
    op: ClassVar[str] = "left"


@dataclass(frozen=True)
class Right(_StepBase):
    degrees: float
    op: ClassVar[str] = "right"


@dataclass(frozen=True)
class SetAngle(_StepBase):
    degrees: float
    op: ClassVar[str] = "set_angle"


@dataclass(frozen=True)
class Goto(_StepBase):
    x: float
    y: float
    op: ClassVar[str] = "goto"


@dataclass(frozen=True)
class Hide(_StepBase):
    op: ClassVar[str] = "hide"


@dataclass(frozen=True)
class Show(_StepBase):
    op: ClassVar[str] = "show"


@dataclass(frozen=True)
class PenUp(_StepBase):
    op: ClassVar[str] = "pen_up"


@dataclass(frozen=True)
class PenDown(_StepBase):
    op: ClassVar[str] = "pen_down"


@dataclass(frozen=True)
class PenToggle(_StepBase):
    op: ClassVar[str] = "pen_toggle"


@dataclass(frozen=True)
class Reset(_StepBase):
    op: ClassVar[str] = "reset"


@dataclass(frozen=True)
class Clear(_StepBase):
    op: ClassVar[str] = "clear"


@dataclass(frozen=True)
class SetColor(_StepBase):
    color: ColorResolvable
    op: ClassVar[str] = "set_color"


@dataclass(frozen=True)
class SetWidth(_StepBase):
    width: float
    op: ClassVar[str] = "set_width"


@dataclass(frozen=True)
class SetShape(_StepBase):
    shape: Tuple[XY, ...]
    op: ClassVar[str] = "set_shape"


@dataclass(frozen=True)
class SetSpeed(_StepBase):
    ms: float
    op: ClassVar[str] = "set_speed"


@dataclass(frozen=True)
class SetLineCap(_StepBase):
    cap: str
    op: ClassVar[str] = "set_line_cap"


Step = Union[
    Forward,
    Backward,
    Left,
    Right,
    SetAngle,
    Goto,
    Hide,
    Show,
    PenUp,
    PenDown,
    PenToggle,
    Reset,
    Clear,
    SetColor,
    SetWidth,
    SetShape,
    SetSpeed,
    SetLineCap,
]

STEP_TYPES: Dict[str, Type[_StepBase]] = {
    cls.op: cls
    for cls in (
        Forward,
        Backward,
        Left,
        Right,
        SetAngle,
        Goto,
        Hide,
        Show,
        PenUp,
        PenDown,
        PenToggle,
        Reset,
        Clear,
        SetColor,
        SetWidth,
        SetShape,
        SetSpeed,
        SetLineCap,
    )
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _coerce_shape(raw: Any) -> Tuple[XY, ...]:
    pts = list(raw)
    if pts and not isinstance(pts[0], (list, tuple)):
        # flat list of coordinates: x0 y0 x1 y1 ...
        if len(pts) % 2:
            raise ValueError("Shape needs an even number of coordinates")
        pts = [pts[i : i + 2] for i in range(0, len(pts), 2)]
    return tuple((float(p[0]), float(p[1])) for p in pts)


def _coerce_color(raw: Any) -> ColorResolvable:
    if isinstance(raw, str):
        return raw
    return tuple(float(c) for c in raw)


def step_from_dict(data: Dict[str, Any]) -> Step:
    """Build a step from ``{"op": name, "args": [...]}``.

    Raises :class:`ValueError` for malformed commands, unknown operations or
    a wrong number of arguments.
    """

    if not isinstance(data, dict):
        raise ValueError(f"Command must be an object, got {data!r}")
    op = data.get("op")
    cls = STEP_TYPES.get(op) if isinstance(op, str) else None
    if cls is None:
        raise ValueError(f"Unknown operation: {op!r}")
    raw_args = data.get("args")
    if raw_args is None:
        raw_args = []
    if not isinstance(raw_args, (list, tuple)):
        raise ValueError(f"{op} args must be a list, got {raw_args!r}")
    args = list(raw_args)
    params = fields(cls)  # type: ignore[arg-type]

    if cls is SetShape:
        if len(args) != 1 or isinstance(args[0], (int, float)):
            args = [args]
    if cls is SetColor and len(args) in (3, 4):
        args = [args]

    if len(args) != len(params):
        raise ValueError(f"{op} expects {len(params)} argument(s), got {len(args)}")

    values: List[Any] = []
    try:
        for param, raw in zip(params, args):
            if cls is SetShape:
                values.append(_coerce_shape(raw))
            elif cls is SetColor:
                values.append(_coerce_color(raw))
            elif cls is SetLineCap:
                values.append(str(raw))
            else:
                values.append(float(raw))
    except (TypeError, ValueError, IndexError) as exc:
        raise ValueError(f"Invalid arguments for {op}: {args!r}") from exc
    return cls(*values)  # type: ignore[return-value]


def step_from_text(line: str) -> Optional[Step]:
    """Parse a single ``op arg ...`` line, e.g. ``forward 50``.

    Blank lines and lines starting with ``#`` yield ``None``.
    """

    text = line.strip()
    if not text or text.startswith("#"):
        return None
    op, *args = text.split()
    return step_from_dict({"op": op.lower(), "args": args})


# ---------------------------------------------------------------------------
# Queue
# ---------------------------------------------------------------------------


class StepQueue:
    """Unbounded FIFO of pending steps."""

    def __init__(self, steps: Sequence[Step] = ()) -> None:
        self._storage: Deque[Step] = deque(steps)

    def push(self, *steps: Step) -> None:
        self._storage.extend(steps)

    def pop(self) -> Optional[Step]:
        return self._storage.popleft() if self._storage else None

    def peek(self) -> Optional[Step]:
        return self._storage[0] if self._storage else None

    def size(self) -> int:
        return len(self._storage)

    def all(self) -> Tuple[Step, ...]:
        return tuple(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def __bool__(self) -> bool:
        return bool(self._storage)

    def __iter__(self) -> Iterator[Step]:
        return iter(tuple(self._storage))


__all__ = [
    "Step",
    "STEP_TYPES",
    "StepQueue",
    "step_from_dict",
    "step_from_text",
    "Forward",
    "Backward",
    "Left",
    "Right",
    "SetAngle",
    "Goto",
    "Hide",
    "Show",
    "PenUp",
    "PenDown",
    "PenToggle",
    "Reset",
    "Clear",
    "SetColor",
    "SetWidth",
    "SetShape",
    "SetSpeed",
    "SetLineCap",
]
