from .executor import simulate_hover_and_click, simulate_human_typing
from .poller import wait_for_element_gone
from .retry import Phase, RetryState

__all__ = [
    "simulate_hover_and_click",
    "simulate_human_typing",
    "wait_for_element_gone",
    "Phase",
    "RetryState",
]
