from .context import ElementState, FrameContext, FrameRef, LocatedElement, frame_offset
from .walker import find_element_across_documents

__all__ = [
    "ElementState",
    "FrameContext",
    "FrameRef",
    "LocatedElement",
    "frame_offset",
    "find_element_across_documents",
]
