from __future__ import annotations
import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest

from humanreach.interaction.config import icfg
from humanreach.keyboard.config import kcfg
from humanreach.mouse.config import cfg


class FakeElement:
    """Element of the in-memory page model.

    ``state`` is merged into the inspected state; it may be a callable taking
    the session, for elements whose state changes over time.
    """

    def __init__(
        self,
        name: str,
        *,
        matches=(),
        rect=(0.0, 0.0, 100.0, 40.0),
        state: Union[Dict[str, Any], Callable[["FakeSession"], Dict[str, Any]], None] = None,
        shadow: Optional[List["FakeElement"]] = None,
        frame: Optional["FakeDocument"] = None,
    ):
        self.name = name
        self.matches = set(matches)
        x, y, width, height = rect
        self.rect = {"x": x, "y": y, "width": width, "height": height}
        self.state = state or {}
        self.shadow = shadow
        self.frame = frame

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeDocument:
    def __init__(self, *elements: FakeElement, broken: bool = False):
        self.elements = list(elements)
        self.broken = broken

    def _check(self) -> None:
        if self.broken:
            raise RuntimeError("frame detached")


class FakeSession:
    """Implements the session primitives against FakeDocument trees."""

    def __init__(self, root: FakeDocument, *, viewport: Tuple[int, int] = (1280, 800)):
        self.root = root
        self.pointer = None
        self._viewport = viewport
        self.query_delay = 0.0
        self.query_hook: Optional[Callable[[str], None]] = None
        self.document_error: Optional[BaseException] = None
        self.active_result = True
        self.focus_result = True
        self.transition_s = 0.0

        self.queries: List[Tuple[FakeDocument, str]] = []
        self.moves: List[Tuple[float, float]] = []
        self.downs: List[Tuple[float, float]] = []
        self.ups: List[Tuple[float, float]] = []
        self.scrolls: List[float] = []
        self.typed: List[str] = []
        self.dispatched: List[Tuple[str, Tuple[str, ...]]] = []
        self.reloads = 0

    def query_count(self, selector: str) -> int:
        return sum(1 for _, sel in self.queries if sel == selector)

    async def viewport(self):
        return self._viewport

    async def document(self):
        if self.document_error is not None:
            raise self.document_error
        return self.root

    async def query_selector_all(self, document: FakeDocument, selector: str):
        if self.query_delay:
            await asyncio.sleep(self.query_delay)
        document._check()
        self.queries.append((document, selector))
        if self.query_hook is not None:
            self.query_hook(selector)
        return [e for e in document.elements if selector in e.matches]

    async def query_shadow_roots(self, document: FakeDocument, selector: str):
        document._check()
        found: List[FakeElement] = []

        def _walk(elements):
            for element in elements:
                if element.shadow is not None:
                    found.extend(e for e in element.shadow if selector in e.matches)
                    _walk(element.shadow)

        _walk(document.elements)
        return found

    async def child_frames(self, document: FakeDocument):
        document._check()
        frames = []

        def _walk(elements):
            for element in elements:
                if element.frame is not None:
                    frames.append((element, element.frame))
                if element.shadow is not None:
                    _walk(element.shadow)

        _walk(document.elements)
        return frames

    async def inspect(self, element: FakeElement):
        state = element.state(self) if callable(element.state) else element.state
        return {"rect": dict(element.rect), **state}

    async def bounding_box(self, element: FakeElement):
        return dict(element.rect)

    async def scroll_into_view(self, element: FakeElement) -> float:
        return self.transition_s

    async def dispatch_events(self, element: FakeElement, names, x=0.0, y=0.0):
        self.dispatched.append((element.name, tuple(names)))
        return len(names)

    async def wait_for_active(self, element: FakeElement, timeout: float) -> bool:
        return self.active_result

    async def focus(self, element: FakeElement) -> bool:
        return self.focus_result

    async def move_pointer(self, x: float, y: float) -> None:
        self.moves.append((x, y))

    async def mouse_down(self, x: float, y: float) -> None:
        self.downs.append((x, y))

    async def mouse_up(self, x: float, y: float) -> None:
        self.ups.append((x, y))

    async def scroll_by(self, delta_y: float) -> None:
        self.scrolls.append(delta_y)

    async def type_character(self, ch: str) -> None:
        self.typed.append(ch)

    async def reload(self) -> None:
        self.reloads += 1

    async def wait_for_load(self, timeout: float = 30.0) -> bool:
        return True

    async def evaluate(self, expression: str):
        return None


@pytest.fixture
def instant_timing(monkeypatch):
    """Collapse every randomized delay range to zero."""
    for config in (cfg, kcfg, icfg):
        for name, value in list(vars(config).items()):
            if name.endswith("_S") and isinstance(value, tuple):
                monkeypatch.setattr(config, name, (0.0, 0.0))
    yield
