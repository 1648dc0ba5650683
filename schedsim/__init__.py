"""
CPU scheduling simulator.

Computes the execution timeline and per-process timing metrics of FCFS,
SJF, Round Robin and SRTN on a single simulated CPU, with a command-line
front end for running and comparing them.
"""

from .algorithms import run_algorithm
from .errors import (
    InvalidProcessSet,
    InvalidQuantum,
    ScheduleInvariantError,
    SchedulerError,
    UnknownPolicy,
)
from .models import ExecutionSegment, Process, ScheduleResult

__all__ = [
    "ExecutionSegment",
    "InvalidProcessSet",
    "InvalidQuantum",
    "Process",
    "ScheduleInvariantError",
    "ScheduleResult",
    "SchedulerError",
    "UnknownPolicy",
    "run_algorithm",
]
