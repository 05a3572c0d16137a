from __future__ import annotations
from .controller import HumanController
from .session import ZendriverSession
from .dom import find_element_across_documents, frame_offset, LocatedElement, FrameContext
from .interaction import (
    simulate_hover_and_click,
    simulate_human_typing,
    wait_for_element_gone,
)
from .mouse import (
    simulate_human_behavior,
    summarize_speeds,
    save_mouse_trajectory_jpeg,
    set_trajectory_callback,
)
from .errors import (
    HumanReachError,
    LocateError,
    ElementNotFound,
    SearchTimeout,
    NotClickable,
    InteractionExhausted,
    ConditionTimeout,
    ViewportUnavailable,
)

__all__ = [
    "HumanController",
    "ZendriverSession",
    "find_element_across_documents",
    "frame_offset",
    "LocatedElement",
    "FrameContext",
    "simulate_hover_and_click",
    "simulate_human_typing",
    "wait_for_element_gone",
    "simulate_human_behavior",
    "summarize_speeds",
    "save_mouse_trajectory_jpeg",
    "set_trajectory_callback",
    "HumanReachError",
    "LocateError",
    "ElementNotFound",
    "SearchTimeout",
    "NotClickable",
    "InteractionExhausted",
    "ConditionTimeout",
    "ViewportUnavailable",
]
