from __future__ import annotations
from typing import Optional


class HumanReachError(Exception):
    """Base class for every error raised by humanreach."""

    pass


class ViewportUnavailable(HumanReachError):
    """Raised when viewport size cannot be determined from CDP."""

    pass


class LocateError(HumanReachError):
    """A selector could not be resolved to an element."""

    def __init__(self, selector: str, timeout: float, message: str):
        super().__init__(message)
        self.selector = selector
        self.timeout = timeout


class ElementNotFound(LocateError):
    """Every search pass finished without a match."""

    def __init__(self, selector: str, timeout: float):
        super().__init__(
            selector, timeout, f"Element not found for selector: {selector!r}"
        )


class SearchTimeout(LocateError):
    """The search deadline fired while branches were still unexplored."""

    def __init__(self, selector: str, timeout: float):
        super().__init__(
            selector,
            timeout,
            f"Search for {selector!r} did not finish within {timeout:.2f}s",
        )


class NotClickable(HumanReachError):
    """The element matched but failed the actionability check."""

    def __init__(self, selector: str, reason: str):
        super().__init__(f"Element {selector!r} is not clickable: {reason}")
        self.selector = selector
        self.reason = reason


class InteractionExhausted(HumanReachError):
    """Every attempt of a retryable interaction failed."""

    def __init__(
        self, selector: str, attempts: int, last_error: Optional[BaseException]
    ):
        super().__init__(
            f"Interaction with {selector!r} exhausted {attempts} attempts, "
            f"last error: {last_error}"
        )
        self.selector = selector
        self.attempts = attempts
        self.last_error = last_error


class ConditionTimeout(HumanReachError):
    """The watched element was still present when the deadline elapsed."""

    def __init__(self, selector: str, timeout: float):
        super().__init__(
            f"Element {selector!r} still present after {timeout:.1f}s"
        )
        self.selector = selector
        self.timeout = timeout
