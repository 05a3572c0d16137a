from .behaviors import type_text
from .telemetry import get_keyboard_recorder

__all__ = [
    "type_text",
    "get_keyboard_recorder",
]
