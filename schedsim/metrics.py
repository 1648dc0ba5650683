from __future__ import annotations

from typing import Dict, List

from .errors import ScheduleInvariantError
from .models import ExecutionSegment, Process, ProcessMetrics, ScheduleResult, Summary, SystemMetrics


def build_process_metrics(
    processes: List[Process],
    timeline: List[ExecutionSegment],
    completion: Dict[str, int],
) -> List[ProcessMetrics]:
    """
    Derive completion, turnaround, waiting and response time for every
    process, returned in input order.
    """
    first_start: Dict[str, int] = {}
    for segment in timeline:
        first_start.setdefault(segment.pid, segment.start_time)

    metrics: List[ProcessMetrics] = []
    for p in sorted(processes, key=lambda x: x.index):
        completion_time = completion[p.pid]
        turnaround_time = completion_time - p.arrival_time
        waiting_time = turnaround_time - p.burst_time
        start_time = first_start[p.pid]

        if waiting_time < 0:
            raise ScheduleInvariantError(
                f"{p.pid} finished at {completion_time}, before arrival + burst "
                f"({p.arrival_time} + {p.burst_time})"
            )

        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                start_time=start_time,
                completion_time=completion_time,
                waiting_time=waiting_time,
                turnaround_time=turnaround_time,
                response_time=start_time - p.arrival_time,
            )
        )

    return metrics


def summarize_process_metrics(processes: List[ProcessMetrics]) -> Summary:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return Summary()

    n = len(processes)
    return Summary(
        avg_waiting=sum(p.waiting_time for p in processes) / n,
        avg_turnaround=sum(p.turnaround_time for p in processes) / n,
        avg_response=sum(p.response_time for p in processes) / n,
    )


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline segments.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, idle_time=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(segment.duration for segment in result.timeline)

    context_switches = sum(
        1 for prev, cur in zip(result.timeline, result.timeline[1:]) if prev.pid != cur.pid
    )

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        idle_time=makespan - cpu_busy_time,
        throughput=len(result.processes) / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
        context_switches=context_switches,
    )
    result.system = system
    return system
