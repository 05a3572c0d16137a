from __future__ import annotations
from dataclasses import dataclass, field
from typing import List
import time


@dataclass(frozen=True)
class KeystrokeEvent:
    t: float
    kind: str  # 'char' | 'pause'
    value: str  # character, or pause tag
    dt: float  # planned delay (seconds), 0 for chars


@dataclass
class KeystrokeRecorder:
    events: List[KeystrokeEvent] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log(self, kind: str, value: str, dt: float = 0.0) -> None:
        self.events.append(KeystrokeEvent(self._now(), kind, value, dt))

    def typed_text(self) -> str:
        return "".join(e.value for e in self.events if e.kind == "char")

    def reset(self) -> None:
        self.events.clear()
        self.start_ts = time.perf_counter()


def get_keyboard_recorder(session) -> KeystrokeRecorder:
    recorder = getattr(session, "_humanreach_key_recorder", None)
    if recorder is None:
        recorder = KeystrokeRecorder()
        session._humanreach_key_recorder = recorder
    return recorder
