from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Optional


class Phase(enum.Enum):
    ATTEMPTING = "attempting"
    BACKOFF = "backoff"
    RELOAD_PENDING = "reload_pending"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass
class RetryState:
    """Attempt bookkeeping for one retryable interaction.

    Transitions:
      ATTEMPTING --ok--> SUCCEEDED
      ATTEMPTING --fail, attempts left--> BACKOFF
      ATTEMPTING --fail, none left--> EXHAUSTED
      BACKOFF --> RELOAD_PENDING when the failure count is a multiple of
                  reload_every, else ATTEMPTING
      RELOAD_PENDING --> ATTEMPTING
    """

    max_attempts: int
    reload_every: int = 2
    attempt: int = 0
    phase: Phase = Phase.ATTEMPTING
    last_error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @property
    def finished(self) -> bool:
        return self.phase in (Phase.SUCCEEDED, Phase.EXHAUSTED)

    def succeed(self) -> Phase:
        self._expect(Phase.ATTEMPTING)
        self.phase = Phase.SUCCEEDED
        return self.phase

    def fail(self, error: BaseException) -> Phase:
        self._expect(Phase.ATTEMPTING)
        self.attempt += 1
        self.last_error = error
        self.phase = (
            Phase.EXHAUSTED if self.attempt >= self.max_attempts else Phase.BACKOFF
        )
        return self.phase

    def backoff_done(self) -> Phase:
        self._expect(Phase.BACKOFF)
        if self.reload_every > 0 and self.attempt % self.reload_every == 0:
            self.phase = Phase.RELOAD_PENDING
        else:
            self.phase = Phase.ATTEMPTING
        return self.phase

    def reload_done(self) -> Phase:
        self._expect(Phase.RELOAD_PENDING)
        self.phase = Phase.ATTEMPTING
        return self.phase

    def _expect(self, phase: Phase) -> None:
        if self.phase is not phase:
            raise RuntimeError(f"Invalid transition from {self.phase.value}")
