from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..errors import ElementNotFound, SearchTimeout
from .config import wcfg
from .context import ElementState, FrameContext, LocatedElement

logger = logging.getLogger(__name__)


@dataclass
class _SearchProgress:
    passes_completed: int = 0


async def _first_acceptable(
    session, candidates: Iterable[Any], context: FrameContext, visible: bool
) -> Optional[LocatedElement]:
    for element in candidates:
        if not visible:
            return LocatedElement(element, context, visible=False)
        state = ElementState.from_mapping(await session.inspect(element))
        if state.is_visible():
            return LocatedElement(element, context, visible=True)
    return None


async def _search_context(
    session, context: FrameContext, selector: str, visible: bool
) -> Optional[LocatedElement]:
    """Depth-first search: regular DOM, then shadow roots, then child frames."""
    depth = context.depth
    try:
        found = await _first_acceptable(
            session,
            await session.query_selector_all(context.document, selector),
            context,
            visible,
        )
        if found is not None:
            logger.debug("Found %r in regular DOM at depth %d", selector, depth)
            return found
    except Exception as exc:
        logger.debug("Regular DOM query failed at depth %d: %s", depth, exc)

    try:
        found = await _first_acceptable(
            session,
            await session.query_shadow_roots(context.document, selector),
            context,
            visible,
        )
        if found is not None:
            logger.debug("Found %r in shadow DOM at depth %d", selector, depth)
            return found
    except Exception as exc:
        logger.debug("Shadow DOM query failed at depth %d: %s", depth, exc)

    if depth >= wcfg.MAX_FRAME_DEPTH:
        return None
    try:
        frames = await session.child_frames(context.document)
    except Exception as exc:
        logger.debug("Frame enumeration failed at depth %d: %s", depth, exc)
        return None

    for frame_element, child_document in frames:
        try:
            found = await _search_context(
                session, context.enter(frame_element, child_document), selector, visible
            )
        except Exception as exc:
            logger.debug("Search inside frame at depth %d failed: %s", depth + 1, exc)
            continue
        if found is not None:
            return found
    return None


async def _search_passes(
    session, selector: str, visible: bool, wait: bool, progress: _SearchProgress
) -> Optional[LocatedElement]:
    while True:
        root = await session.document()
        found = await _search_context(session, FrameContext(root), selector, visible)
        progress.passes_completed += 1
        if found is not None or not wait:
            return found
        await asyncio.sleep(wcfg.POLL_INTERVAL_S)


async def find_element_across_documents(
    session,
    selector: str,
    *,
    timeout: Optional[float] = None,
    visible: bool = False,
    wait: bool = True,
) -> LocatedElement:
    """Find selector in the page, its shadow roots and every nested frame.

    With ``wait`` the search is repeated until a match or the deadline;
    otherwise a single pass runs. Raises ``ElementNotFound`` when finished
    passes found nothing and ``SearchTimeout`` when the deadline cut the
    first pass short.
    """
    if timeout is None:
        timeout = wcfg.DEFAULT_TIMEOUT_S
    progress = _SearchProgress()
    try:
        found = await asyncio.wait_for(
            _search_passes(session, selector, visible, wait, progress), timeout
        )
    except asyncio.TimeoutError:
        if progress.passes_completed:
            raise ElementNotFound(selector, timeout) from None
        raise SearchTimeout(selector, timeout) from None
    if found is None:
        raise ElementNotFound(selector, timeout)
    return found
