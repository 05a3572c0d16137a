from __future__ import annotations
import asyncio
import logging
import random
from typing import Optional

from ..dom.context import ElementState, LocatedElement, frame_offset
from ..dom.walker import find_element_across_documents
from ..errors import InteractionExhausted, NotClickable
from ..keyboard.behaviors import type_text
from ..keyboard.config import kcfg
from ..mouse.behaviors import drift_pointer, simulate_human_behavior
from ..mouse.geometry import (
    Point,
    clickable_point,
    offset_rect,
    plan_trajectory,
    random_viewport_point,
)
from ..mouse.player import click_at, hover_settle, move_pointer_to, play_trajectory
from ..utils import random_duration, sleep_between
from .config import icfg
from .retry import Phase, RetryState

logger = logging.getLogger(__name__)


async def _scroll_and_settle(session, located: LocatedElement) -> None:
    """Scroll the element to the viewport centre and wait out its transition."""
    transition_s = await session.scroll_into_view(located.element)
    if transition_s > 0:
        await asyncio.sleep(transition_s)
    await sleep_between(*icfg.SCROLL_SETTLE_S)


async def _element_box(session, located: LocatedElement):
    offset = await frame_offset(session, located.context)
    return offset_rect(await session.bounding_box(located.element), offset), offset


async def _wait_active(session, located: LocatedElement) -> bool:
    try:
        return await session.wait_for_active(
            located.element, icfg.ACTIVE_STATE_TIMEOUT_S
        )
    except Exception as exc:
        logger.debug("Active-state wait failed (ignored): %s", exc)
        return False


async def _click_attempt(session, selector: str) -> None:
    await sleep_between(*icfg.ATTEMPT_SETTLE_S)

    located = await find_element_across_documents(
        session, selector, timeout=icfg.LOCATE_TIMEOUT_S, visible=True
    )
    offset = await frame_offset(session, located.context)

    state = ElementState.from_mapping(await session.inspect(located.element))
    problem = state.clickability_problem()
    if problem is not None:
        raise NotClickable(selector, problem)

    box = offset_rect(state.rect, offset)
    target = clickable_point(box)

    await simulate_human_behavior(
        session,
        duration=random_duration(*icfg.WARMUP_DURATION_S),
        movements=random.randint(*icfg.WARMUP_MOVES_MINMAX),
    )

    viewport = await session.viewport()
    start = random_viewport_point(*viewport)
    await play_trajectory(session, plan_trajectory(start, target), viewport=viewport)
    await hover_settle(session, target, viewport=viewport)

    await _scroll_and_settle(session, located)

    # scrolling or a finished animation may have moved the element
    new_box, offset = await _element_box(session, located)
    shift = Point(new_box["x"] - box["x"], new_box["y"] - box["y"])
    if max(abs(shift.x), abs(shift.y)) > icfg.REPOSITION_THRESHOLD_PX:
        target = Point(target.x + shift.x, target.y + shift.y)
        logger.debug("Element moved by (%.1f, %.1f); following it", shift.x, shift.y)
        await move_pointer_to(session, target, viewport=viewport)

    await session.dispatch_events(
        located.element, icfg.EVENT_SEQUENCE, target.x - offset.x, target.y - offset.y
    )

    _, active = await asyncio.gather(
        click_at(session, target), _wait_active(session, located)
    )
    if not active:
        logger.debug("No active/focus state observed on %r after click", selector)

    await sleep_between(*icfg.POST_CLICK_SETTLE_S)
    await drift_pointer(session)


async def _reload(session) -> None:
    logger.info("Reloading page before the next attempt")
    try:
        await session.reload()
        await session.wait_for_load(icfg.RELOAD_TIMEOUT_S)
    except Exception as exc:
        logger.warning("Page reload failed: %s", exc)
    await sleep_between(*icfg.POST_RELOAD_SETTLE_S)


async def simulate_hover_and_click(
    session, selector: str, *, max_retries: Optional[int] = None
) -> bool:
    """Locate selector anywhere in the page and click it like a person would.

    Each attempt re-resolves the element, warms up with ambient pointer
    movement, approaches along a Bezier path, hovers, replays the DOM event
    sequence and performs a native click. Failed attempts back off; every
    second failure also reloads the page. Raises ``InteractionExhausted``
    once ``max_retries`` attempts have failed.
    """
    retry = RetryState(
        max_attempts=max_retries or icfg.DEFAULT_MAX_RETRIES,
        reload_every=icfg.RELOAD_EVERY,
    )
    while not retry.finished:
        if retry.phase is Phase.ATTEMPTING:
            try:
                await _click_attempt(session, selector)
            except Exception as exc:
                retry.fail(exc)
                logger.warning(
                    "Click attempt %d/%d on %r failed: %s",
                    retry.attempt,
                    retry.max_attempts,
                    selector,
                    exc,
                )
            else:
                retry.succeed()
                logger.info(
                    "Clicked %r on attempt %d", selector, retry.attempt + 1
                )
        elif retry.phase is Phase.BACKOFF:
            await sleep_between(*icfg.BACKOFF_S)
            retry.backoff_done()
        elif retry.phase is Phase.RELOAD_PENDING:
            await _reload(session)
            retry.reload_done()

    if retry.phase is Phase.EXHAUSTED:
        logger.error("Giving up on %r after %d attempts", selector, retry.attempt)
        raise InteractionExhausted(
            selector, retry.attempt, retry.last_error
        ) from retry.last_error
    return True


async def simulate_human_typing(
    session, selector: str, text: str, *, timeout: Optional[float] = None
) -> None:
    """Click into selector and type text with human keystroke timing."""
    located = await find_element_across_documents(
        session,
        selector,
        timeout=icfg.LOCATE_TIMEOUT_S if timeout is None else timeout,
        visible=True,
    )
    await _scroll_and_settle(session, located)
    box, _ = await _element_box(session, located)
    target = clickable_point(box)
    await move_pointer_to(session, target)
    await click_at(session, target)

    focused = await session.wait_for_active(located.element, icfg.FOCUS_TIMEOUT_S)
    if not focused:
        focused = await session.focus(located.element)
    if not focused:
        raise NotClickable(selector, "did not take keyboard focus")

    await sleep_between(*kcfg.FOCUS_SETTLE_S)
    await type_text(session, text)
    logger.debug("Typed %d characters into %r", len(text), selector)
