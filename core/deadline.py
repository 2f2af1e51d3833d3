"""Wall-clock budget shared across a chain of sequential remote calls."""

from __future__ import annotations

import time
from typing import Callable

from utils.exceptions import DeadlineExceeded


Clock = Callable[[], float]

UNBOUNDED = -1.0


def remaining_msec(budget_msec: float, elapsed_msec: float) -> float:
    """Remaining budget in msec, or UNBOUNDED for a negative budget."""
    if budget_msec < 0:
        return UNBOUNDED
    return budget_msec - elapsed_msec


class DeadlineClock:
    """Elapsed-time tracker started once at the beginning of a wait chain.

    A negative budget disables the limit. ``clock`` returns seconds and
    defaults to ``time.monotonic``.
    """

    def __init__(self, budget_msec: float = UNBOUNDED, *, clock: Clock = time.monotonic) -> None:
        self.budget_msec = float(budget_msec)
        self._clock = clock
        self._started = clock()

    @classmethod
    def start(cls, budget_msec: float = UNBOUNDED, *, clock: Clock = time.monotonic) -> "DeadlineClock":
        return cls(budget_msec, clock=clock)

    @property
    def bounded(self) -> bool:
        return self.budget_msec >= 0

    def elapsed_msec(self) -> float:
        return (self._clock() - self._started) * 1000.0

    def remaining_msec(self) -> float:
        return remaining_msec(self.budget_msec, self.elapsed_msec())

    def exhausted(self) -> bool:
        return self.bounded and self.remaining_msec() <= 0

    def check(self) -> float:
        """Return the remaining budget, raising DeadlineExceeded once it is used up."""
        elapsed = self.elapsed_msec()
        remaining = remaining_msec(self.budget_msec, elapsed)
        if self.bounded and remaining <= 0:
            raise DeadlineExceeded(
                f"Maximum wait time of {self.budget_msec:.0f} msec reached",
                budget_msec=self.budget_msec,
                elapsed_msec=elapsed,
            )
        return remaining

    def clamp(self, delay_msec: float) -> float:
        """Shorten ``delay_msec`` so that sleeping it never passes the deadline."""
        remaining = self.check()
        if self.bounded and delay_msec > remaining:
            return remaining
        return delay_msec
