from __future__ import annotations
import math
from typing import List
from .telemetry import get_mouse_recorder


def summarize_speeds(session) -> str:
    """Summarize instantaneous pointer speeds from the session's recorded moves.

    Computes per-step speed as distance / dt_ms, with a 2ms floor on dt for stability.
    Reports average, p95, p99, max and sample count.
    """
    move_events = get_mouse_recorder(session).moves()
    if len(move_events) < 2:
        return "No move data"
    speeds_px_per_ms: List[float] = []
    for previous, current in zip(move_events, move_events[1:]):
        dt_ms = max(2.0, (current.t - previous.t) * 1000.0)
        speeds_px_per_ms.append(
            math.hypot(current.x - previous.x, current.y - previous.y) / dt_ms
        )
    speeds_sorted = sorted(speeds_px_per_ms)
    n = len(speeds_sorted)
    average = sum(speeds_sorted) / n
    p95 = speeds_sorted[max(0, int(0.95 * n) - 1)]
    p99 = speeds_sorted[max(0, int(0.99 * n) - 1)]
    return (
        f"speed px/ms: avg={average:.3f}, p95={p95:.3f}, p99={p99:.3f}, "
        f"max={speeds_sorted[-1]:.3f}, samples={n}"
    )
