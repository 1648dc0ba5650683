from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    index: int = 0


@dataclass(frozen=True)
class ExecutionSegment:
    """
    One contiguous interval ``[start_time, end_time)`` during which a single
    process holds the CPU.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int


@dataclass
class Summary:
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0
    avg_response: float = 0.0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    idle_time: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ExecutionSegment] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    system: Optional[SystemMetrics] = None
