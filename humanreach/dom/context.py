from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..mouse.geometry import Point


@dataclass(frozen=True)
class FrameRef:
    """A frame element together with the document that contains it."""

    element: Any
    owner: Any


@dataclass(frozen=True)
class FrameContext:
    """One document in the frame tree plus its ancestor frame stack.

    The stack is ordered top-down: ``frame_stack[0]`` lives in the top-level
    document, ``frame_stack[-1]`` is the frame whose content is ``document``.
    """

    document: Any
    frame_stack: Tuple[FrameRef, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.frame_stack)

    def enter(self, frame_element: Any, child_document: Any) -> "FrameContext":
        """Context for a child frame; self is left untouched."""
        return FrameContext(
            child_document, self.frame_stack + (FrameRef(frame_element, self.document),)
        )


@dataclass(frozen=True)
class LocatedElement:
    """An element handle, meaningful only relative to its context."""

    element: Any
    context: FrameContext
    visible: bool


@dataclass(frozen=True)
class ElementState:
    """Snapshot of the element properties needed for visibility and clicks."""

    attached: bool = True
    display: str = "block"
    visibility: str = "visible"
    opacity: float = 1.0
    has_offset_parent: bool = True
    disabled: bool = False
    occluded: bool = False
    rect: Dict[str, float] = field(
        default_factory=lambda: {"x": 0.0, "y": 0.0, "width": 0.0, "height": 0.0}
    )
    transition_s: float = 0.0

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "ElementState":
        if not raw:
            return cls(attached=False)
        rect = raw.get("rect") or {}
        return cls(
            attached=bool(raw.get("attached", True)),
            display=str(raw.get("display", "block")),
            visibility=str(raw.get("visibility", "visible")),
            opacity=_as_float(raw.get("opacity", 1.0), 1.0),
            has_offset_parent=bool(raw.get("has_offset_parent", True)),
            disabled=bool(raw.get("disabled", False)),
            occluded=bool(raw.get("occluded", False)),
            rect={
                key: _as_float(rect.get(key, 0.0), 0.0)
                for key in ("x", "y", "width", "height")
            },
            transition_s=_as_float(raw.get("transition_s", 0.0), 0.0),
        )

    def is_visible(self) -> bool:
        return (
            self.attached
            and self.display != "none"
            and self.visibility != "hidden"
            and self.opacity > 0.0
            and self.has_offset_parent
        )

    def clickability_problem(self) -> Optional[str]:
        """Why the element cannot be clicked, or None when it can."""
        if not self.attached:
            return "detached from its document"
        if not self.is_visible():
            return "not visible"
        if self.rect["width"] <= 0 or self.rect["height"] <= 0:
            return "zero-area bounding box"
        if self.disabled:
            return "disabled"
        if self.occluded:
            return "obscured by another element at its centre"
        return None


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


async def frame_offset(session, context: FrameContext) -> Point:
    """Cumulative offset from the top-level viewport to the context's origin."""
    offset_x = offset_y = 0.0
    for frame in context.frame_stack:
        rect = await session.bounding_box(frame.element)
        offset_x += float(rect["x"])
        offset_y += float(rect["y"])
    return Point(offset_x, offset_y)
