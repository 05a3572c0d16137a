from __future__ import annotations
import logging
import random
import time
from typing import Optional

from ..errors import ViewportUnavailable
from ..utils import random_uniform, sleep_between
from .config import cfg
from .geometry import Point, random_viewport_point
from .player import current_pointer, move_pointer_to
from .telemetry import get_mouse_recorder

logger = logging.getLogger(__name__)


async def simulate_human_behavior(
    session,
    *,
    duration: Optional[float] = None,
    movements: Optional[int] = None,
) -> int:
    """Wander the pointer around the viewport as ambient warm-up noise.

    Each move follows a Bezier path to a random viewport point, then rests;
    a quarter of the moves also scroll the page a little. When ``duration``
    (seconds) is given no new move starts once it has elapsed. Returns the
    number of moves performed.
    """
    viewport_width, viewport_height = await session.viewport()
    if viewport_width <= 0 or viewport_height <= 0:
        raise ViewportUnavailable(
            f"Viewport has no area: {viewport_width}x{viewport_height}"
        )
    viewport = (viewport_width, viewport_height)
    if movements is None:
        movements = random.randint(*cfg.WANDER_MOVES_MINMAX)
    movements = max(1, int(movements))

    logger.info("Simulating human behavior: %d pointer moves", movements)
    started = time.perf_counter()
    performed = 0
    for _ in range(movements):
        if performed and duration is not None:
            if time.perf_counter() - started >= duration:
                break
        target = random_viewport_point(viewport_width, viewport_height)
        await move_pointer_to(
            session,
            target,
            steps=random.randint(*cfg.WANDER_STEPS_MINMAX),
            viewport=viewport,
        )
        performed += 1
        logger.debug("Pointer wandered to (%.0f, %.0f)", target.x, target.y)

        await sleep_between(*cfg.WANDER_SETTLE_S)

        if random.random() < cfg.WANDER_SCROLL_PROB:
            delta_y = random.randint(-cfg.WANDER_SCROLL_PX, cfg.WANDER_SCROLL_PX)
            await session.scroll_by(delta_y)
            position = current_pointer(session, viewport)
            get_mouse_recorder(session).log("scroll", position.x, position.y)
            logger.debug("Page scrolled by %dpx", delta_y)

    await sleep_between(*cfg.WANDER_SETTLE_S)
    logger.info("Human behavior simulation finished after %d moves", performed)
    return performed


async def drift_pointer(session, *, radius: Optional[float] = None) -> Point:
    """Short natural drift away from the current pointer position."""
    viewport = await session.viewport()
    radius = cfg.DRIFT_RADIUS_PX if radius is None else radius
    origin = current_pointer(session, viewport)
    target = Point(
        origin.x + random_uniform(-radius, radius),
        origin.y + random_uniform(-radius, radius),
    )
    return await move_pointer_to(
        session,
        target,
        steps=random.randint(*cfg.DRIFT_STEPS_MINMAX),
        viewport=viewport,
    )
