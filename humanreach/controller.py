from __future__ import annotations
from typing import Optional

from .dom.context import LocatedElement
from .dom.walker import find_element_across_documents
from .interaction.executor import simulate_hover_and_click, simulate_human_typing
from .interaction.poller import wait_for_element_gone
from .mouse.behaviors import simulate_human_behavior
from .session import ZendriverSession


class HumanController:
    """Tiny façade for the high-level operations bound to one session."""

    def __init__(self, session):
        """Initialize with a session, or a zendriver tab to wrap in one."""
        if not hasattr(session, "query_selector_all"):
            session = ZendriverSession(session)
        self.session = session

    async def find(
        self, selector: str, *, timeout: Optional[float] = None, visible: bool = False
    ) -> LocatedElement:
        return await find_element_across_documents(
            self.session, selector, timeout=timeout, visible=visible
        )

    async def click(self, selector: str, *, max_retries: Optional[int] = None) -> bool:
        return await simulate_hover_and_click(
            self.session, selector, max_retries=max_retries
        )

    async def type(self, selector: str, text: str) -> None:
        await simulate_human_typing(self.session, selector, text)

    async def wander(
        self, *, duration: Optional[float] = None, movements: Optional[int] = None
    ) -> int:
        return await simulate_human_behavior(
            self.session, duration=duration, movements=movements
        )

    async def wait_until_gone(self, selector: str, **kwargs) -> float:
        return await wait_for_element_gone(self.session, selector, **kwargs)
