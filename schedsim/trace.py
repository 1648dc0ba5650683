from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .errors import ScheduleInvariantError
from .models import ExecutionSegment, Process

logger = logging.getLogger(__name__)


class TraceBuilder:
    """
    Accumulates the Gantt timeline of a single run.

    Segments must be appended in time order. With ``coalesce=True`` a segment
    that continues the previous one for the same process extends it instead
    of starting a new entry.
    """

    def __init__(self) -> None:
        self._segments: List[ExecutionSegment] = []

    def append(self, pid: str, start_time: int, end_time: int, coalesce: bool = False) -> None:
        if end_time <= start_time:
            raise ScheduleInvariantError(
                f"Empty segment for {pid}: [{start_time}, {end_time})"
            )

        last = self._segments[-1] if self._segments else None
        if last is not None and start_time < last.end_time:
            raise ScheduleInvariantError(
                f"Segment for {pid} at {start_time} overlaps {last.pid} ending at {last.end_time}"
            )

        if coalesce and last is not None and last.pid == pid and last.end_time == start_time:
            self._segments[-1] = ExecutionSegment(pid=pid, start_time=last.start_time, end_time=end_time)
            return

        self._segments.append(ExecutionSegment(pid=pid, start_time=start_time, end_time=end_time))

    @property
    def last(self) -> Optional[ExecutionSegment]:
        return self._segments[-1] if self._segments else None

    def segments(self) -> List[ExecutionSegment]:
        return list(self._segments)

    def __len__(self) -> int:
        return len(self._segments)


class SimulationContext:
    """
    Per-run mutable state shared by every policy: the clock, the remaining
    burst and completion time of each process, and the trace being built.

    A context is created for one call and discarded when it returns.
    """

    def __init__(self, processes: List[Process]) -> None:
        # Input order is the tie-breaker everywhere, so keep it explicit.
        self.processes: List[Process] = sorted(processes, key=lambda p: p.index)
        self.time = 0
        self.remaining: Dict[str, int] = {p.pid: p.burst_time for p in self.processes}
        self.completion: Dict[str, int] = {}
        self.trace = TraceBuilder()

    @property
    def finished(self) -> bool:
        return len(self.completion) == len(self.processes)

    def pending(self) -> List[Process]:
        return [p for p in self.processes if self.remaining[p.pid] > 0]

    def ready(self) -> List[Process]:
        """Processes that have arrived and still need the CPU, in input order."""
        return [p for p in self.pending() if p.arrival_time <= self.time]

    def next_arrival(self) -> Optional[int]:
        future = [p.arrival_time for p in self.pending() if p.arrival_time > self.time]
        return min(future) if future else None

    def idle_until(self, time: int) -> None:
        if time > self.time:
            logger.debug("CPU idle [%d, %d)", self.time, time)
            self.time = time

    def run(self, process: Process, duration: int, coalesce: bool = False) -> None:
        """
        Give ``process`` the CPU for ``duration`` units starting now.
        """
        start_time = self.time
        end_time = start_time + duration
        self.trace.append(process.pid, start_time, end_time, coalesce=coalesce)

        self.time = end_time
        self.remaining[process.pid] -= duration

        if self.remaining[process.pid] == 0:
            self.completion[process.pid] = end_time
            logger.debug("%s completed at %d", process.pid, end_time)
