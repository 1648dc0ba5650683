from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidProcessSet(SchedulerError, ValueError):
    pass


class InvalidQuantum(SchedulerError, ValueError):
    pass


class UnknownPolicy(SchedulerError, ValueError):
    pass


class ScheduleInvariantError(SchedulerError, RuntimeError):
    """
    Raised when a finished schedule breaks a timing invariant (overlapping
    segments, negative waiting time). Valid input never triggers this.
    """
