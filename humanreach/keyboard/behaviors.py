from __future__ import annotations
import logging
import random

from ..utils import HiResTimer, random_duration, sleep_between
from .config import kcfg
from .telemetry import get_keyboard_recorder

logger = logging.getLogger(__name__)


async def type_text(session, text: str) -> None:
    """
    Type text into the already-focused element like a human.
    Use the pointer to focus first.

    Every keystroke waits a randomized delay; now and then an extra
    "thinking" pause follows a character.
    """
    rec = get_keyboard_recorder(session)

    with HiResTimer():
        for ch in text:
            delay = await sleep_between(*kcfg.KEY_DELAY_S)
            rec.log("pause", "<key-delay>", delay)
            await session.type_character(ch)
            rec.log("char", ch)

            if random.random() < kcfg.THINK_PAUSE_PROB:
                pause = await sleep_between(*kcfg.THINK_PAUSE_S)
                rec.log("pause", "<think>", pause)

        settle = random_duration(*kcfg.FINAL_SETTLE_S)
        rec.log("pause", "<settle>", settle)
        await sleep_between(settle, settle)
    logger.debug("Typed %d characters", len(text))
