from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional
from zendriver import cdp

from ..utils import sleep_between
from .config import kcfg

_PRINTABLE_EXCEPTIONS = set("\n\t\r")

# character -> (key, code, virtual key code)
_CONTROL_KEYS: Dict[str, Any] = {
    "\n": ("Enter", "Enter", 13),
    "\r": ("Enter", "Enter", 13),
    "\t": ("Tab", "Tab", 9),
    "\b": ("Backspace", "Backspace", 8),
}


def is_printable(ch: str) -> bool:
    if not ch or ch in _PRINTABLE_EXCEPTIONS:
        return False
    return 32 <= ord(ch) <= 0x10FFFF


async def _send_cdp_event(
    tab, fn: Callable[[], Awaitable[Any]], *, label: str
) -> None:
    """Send a CDP input event; a stalled send keeps running in the background."""
    task = asyncio.ensure_future(fn())
    try:
        await asyncio.wait_for(asyncio.shield(task), timeout=kcfg.CDP_SEND_TIMEOUT_S)
    except asyncio.TimeoutError:
        logger = logging.getLogger(__name__)
        logger.warning(
            "CDP %s stalled >%.0f ms; continuing in background",
            label,
            kcfg.CDP_SEND_TIMEOUT_S * 1000.0,
        )

        def _late_log(done: asyncio.Future) -> None:
            if not done.cancelled() and done.exception() is not None:
                logger.warning("CDP %s failed after stalling: %s", label, done.exception())

        task.add_done_callback(_late_log)


async def emit_insert_text(tab, text: str) -> None:
    await _send_cdp_event(
        tab,
        lambda: tab.send(cdp.input_.insert_text(text=text)),
        label="insertText",
    )


async def emit_key_press(
    tab, key: str, code: Optional[str] = None, virtual_key: Optional[int] = None
) -> None:
    """keyDown (raw) + keyUp for a control key."""
    kwargs: Dict[str, Any] = {"key": key}
    if code:
        kwargs["code"] = code
    if virtual_key is not None:
        kwargs["windows_virtual_key_code"] = virtual_key
        kwargs["native_virtual_key_code"] = virtual_key
    await _send_cdp_event(
        tab,
        lambda: tab.send(cdp.input_.dispatch_key_event(type_="rawKeyDown", **kwargs)),
        label=f"{key}Down",
    )
    await sleep_between(*kcfg.KEY_DOWN_UP_GAP_S)
    await _send_cdp_event(
        tab,
        lambda: tab.send(cdp.input_.dispatch_key_event(type_="keyUp", **kwargs)),
        label=f"{key}Up",
    )


async def emit_character(tab, ch: str) -> None:
    """Type one character: control keys as key presses, the rest via insertText."""
    if ch in _CONTROL_KEYS:
        key, code, virtual_key = _CONTROL_KEYS[ch]
        await emit_key_press(tab, key, code, virtual_key)
    elif is_printable(ch):
        await emit_insert_text(tab, ch)
    else:
        logging.getLogger(__name__).debug("Skipping non-printable %r", ch)
