from __future__ import annotations
from dataclasses import dataclass, field
from typing import List
import time


@dataclass(frozen=True)
class PointerEvent:
    """One pointer event captured by the recorder.

    Attributes:
        x (float): X pixel coordinate in the top-level viewport.
        y (float): Y pixel coordinate in the top-level viewport.
        t (float): Seconds since the recorder started (monotonic).
        kind (str): Event category, one of: "move", "down", "up", "click", "scroll".
    """

    x: float
    y: float
    t: float
    kind: str


@dataclass
class TrajectoryRecorder:
    """Collects pointer events of one session for analysis and rendering.

    Typical flow:
      rec = get_mouse_recorder(session)
      rec.reset()
      ... interact ...
      summarize_speeds(session)
    """

    events: List[PointerEvent] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log(self, kind: str, x: float, y: float) -> None:
        self.events.append(PointerEvent(float(x), float(y), self._now(), kind))

    def log_move(self, x: float, y: float) -> None:
        self.log("move", x, y)

    def log_click(self, x: float, y: float) -> None:
        """Record a semantic click marker; press/release are logged separately."""
        self.log("click", x, y)

    def moves(self) -> List[PointerEvent]:
        return [event for event in self.events if event.kind == "move"]

    def reset(self) -> None:
        """Clear all recorded events and reset the time origin to now."""
        self.events.clear()
        self.start_ts = time.perf_counter()


def get_mouse_recorder(session) -> TrajectoryRecorder:
    """Per-session recorder, created on first use."""
    recorder = getattr(session, "_humanreach_mouse_recorder", None)
    if recorder is None:
        recorder = TrajectoryRecorder()
        session._humanreach_mouse_recorder = recorder
    return recorder
