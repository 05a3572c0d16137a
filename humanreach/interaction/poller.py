from __future__ import annotations
import asyncio
import logging
import math
from typing import Optional

from ..dom.walker import find_element_across_documents
from ..errors import ConditionTimeout, ElementNotFound
from ..utils import first_completed
from .config import icfg

logger = logging.getLogger(__name__)


async def _element_gone(
    session, selector: str, probe_timeout: float, visible: bool
) -> bool:
    """One single-pass probe. Only a clean "not found" counts as gone."""
    try:
        await find_element_across_documents(
            session, selector, timeout=probe_timeout, visible=visible, wait=False
        )
    except ElementNotFound:
        return True
    except Exception as exc:
        logger.info("Probe for %r inconclusive, still waiting: %s", selector, exc)
        return False
    return False


async def wait_for_element_gone(
    session,
    selector: str,
    *,
    timeout: Optional[float] = None,
    interval: Optional[float] = None,
    probe_timeout: Optional[float] = None,
    visible: bool = True,
) -> float:
    """Block until selector disappears from the page or the deadline passes.

    Probes run on a fixed schedule (interval, 2*interval, ...); a probe that
    overruns its slot resumes at the next scheduled tick. Returns the seconds
    waited, raises ``ConditionTimeout`` at the deadline.
    """
    timeout = icfg.CONDITION_TIMEOUT_S if timeout is None else timeout
    interval = icfg.PROBE_INTERVAL_S if interval is None else interval
    probe_timeout = icfg.PROBE_TIMEOUT_S if probe_timeout is None else probe_timeout
    if interval <= 0:
        raise ValueError("interval must be positive")

    loop = asyncio.get_running_loop()
    started = loop.time()

    async def _deadline() -> float:
        await asyncio.sleep(timeout)
        raise ConditionTimeout(selector, timeout)

    async def _probes() -> float:
        tick = 1
        while True:
            await asyncio.sleep(max(0.0, started + tick * interval - loop.time()))
            logger.debug("Probing for %r (tick %d)", selector, tick)
            if await _element_gone(session, selector, probe_timeout, visible):
                return loop.time() - started
            tick = max(tick + 1, math.floor((loop.time() - started) / interval) + 1)

    logger.info("Waiting up to %.0fs for %r to disappear", timeout, selector)
    try:
        waited = await first_completed(_deadline(), _probes())
    except ConditionTimeout:
        logger.warning("%r still present after %.0fs", selector, timeout)
        raise
    logger.info("%r gone after %.1fs", selector, waited)
    return waited
