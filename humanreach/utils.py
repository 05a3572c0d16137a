from __future__ import annotations
import asyncio
import ctypes
import platform
import random
from typing import Any, Awaitable


class HiResTimer:
    """Context manager to request 1ms Windows system timer resolution.

    On Windows this reduces sleep jitter/latency for tighter timing loops.
    On other platforms, it is a no-op.
    """

    def __enter__(self):
        if platform.system() == "Windows":
            ctypes.windll.winmm.timeBeginPeriod(1)
        return self

    def __exit__(self, exc_type, exc, tb):
        if platform.system() == "Windows":
            ctypes.windll.winmm.timeEndPeriod(1)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Restrict value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def random_uniform(a: float, b: float) -> float:
    """Return a random float between a and b, agnostic to order."""
    lo, hi = (a, b) if a <= b else (b, a)
    return random.uniform(lo, hi)


def random_duration(lo: float, hi: float) -> float:
    """Randomized duration in seconds within [lo, hi], never negative."""
    return max(0.0, random_uniform(lo, hi))


async def sleep_between(lo: float, hi: float) -> float:
    """Sleep a randomized duration within [lo, hi]; return the slept seconds."""
    duration = random_duration(lo, hi)
    await asyncio.sleep(duration)
    return duration


async def first_completed(*awaitables: Awaitable[Any]) -> Any:
    """Race awaitables; return the first result and cancel the rest.

    Losers are cancelled and awaited before returning so nothing keeps
    running after the call. The winner's exception, if any, propagates.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
    winner = next(task for task in tasks if task in done)
    return winner.result()
