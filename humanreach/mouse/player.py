from __future__ import annotations
import asyncio
import logging
import time
from typing import Optional, Tuple

from ..utils import random_duration, random_uniform, sleep_between
from .config import cfg
from .geometry import Point, TrajectoryPlan, clamp_point_to_viewport, plan_trajectory
from .telemetry import get_mouse_recorder

logger = logging.getLogger(__name__)


def current_pointer(session, viewport: Tuple[float, float]) -> Point:
    """Last known pointer position, or the viewport centre before any move."""
    position = getattr(session, "pointer", None)
    if position is None:
        return Point(viewport[0] / 2.0, viewport[1] / 2.0)
    return clamp_point_to_viewport(position[0], position[1], *viewport)


async def emit_move(session, point: Point, viewport: Tuple[float, float]) -> Point:
    """Move the remote pointer to point (clamped) and record it."""
    target = clamp_point_to_viewport(point[0], point[1], *viewport)
    await session.move_pointer(target.x, target.y)
    get_mouse_recorder(session).log_move(target.x, target.y)
    session.pointer = target
    return target


async def play_trajectory(
    session, plan: TrajectoryPlan, *, viewport: Optional[Tuple[float, float]] = None
) -> Point:
    """Issue one pointer move per sample with a randomized gap between them."""
    if viewport is None:
        viewport = await session.viewport()
    last = current_pointer(session, viewport)
    for point in plan.points:
        last = await emit_move(session, point, viewport)
        await sleep_between(*plan.step_delay_s)
    return last


async def hover_settle(
    session, point: Point, *, viewport: Optional[Tuple[float, float]] = None
) -> None:
    """Micro-tremor around point for a short randomized window."""
    if viewport is None:
        viewport = await session.viewport()
    window = random_duration(*cfg.HOVER_WINDOW_S)
    jitter = cfg.HOVER_JITTER_PX
    started = time.perf_counter()
    while time.perf_counter() - started < window:
        await emit_move(
            session,
            Point(
                point.x + random_uniform(-jitter, jitter),
                point.y + random_uniform(-jitter, jitter),
            ),
            viewport,
        )
        await sleep_between(*cfg.HOVER_INTERVAL_S)


async def move_pointer_to(
    session,
    target: Point,
    *,
    start: Optional[Point] = None,
    steps: Optional[int] = None,
    viewport: Optional[Tuple[float, float]] = None,
) -> Point:
    """Plan a Bezier path from start (default: current pointer) and play it."""
    if viewport is None:
        viewport = await session.viewport()
    if start is None:
        start = current_pointer(session, viewport)
    plan = plan_trajectory(start, target, steps=steps)
    logger.debug(
        "Pointer path (%.1f, %.1f) -> (%.1f, %.1f) in %d samples",
        plan.start.x,
        plan.start.y,
        plan.end.x,
        plan.end.y,
        len(plan.points),
    )
    return await play_trajectory(session, plan, viewport=viewport)


async def click_at(session, point: Point) -> None:
    """Native press/release at point with a human press duration."""
    recorder = get_mouse_recorder(session)
    recorder.log("down", point.x, point.y)
    await session.mouse_down(point.x, point.y)
    await asyncio.sleep(random_duration(*cfg.CLICK_DOWN_UP_DELAY_S))
    await session.mouse_up(point.x, point.y)
    recorder.log("up", point.x, point.y)
    recorder.log_click(point.x, point.y)
    session.pointer = point
