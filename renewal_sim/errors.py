"""Error types raised by the renewal simulators."""

from __future__ import annotations

from typing import Optional


class InvalidParameterError(ValueError):
    """A horizon, rate, scale, probability or replication count is out of range."""


class InsufficientBudgetError(RuntimeError):
    """The interarrival draws ran out before the arrival times passed the horizon.

    Parameters
    ----------
    budget : int
        Number of interarrival times drawn when the search gave up.
    horizon : float
        The horizon T that was never exceeded.
    """

    def __init__(self, budget: int, horizon: float, message: Optional[str] = None) -> None:
        self.budget = int(budget)
        self.horizon = float(horizon)
        if message is None:
            message = f"{self.budget} interarrival draws did not pass horizon T={self.horizon:g}"
        super().__init__(message)

    def __reduce__(self):
        # Keep the attributes when the error crosses a process pool boundary.
        return (type(self), (self.budget, self.horizon, str(self)))
