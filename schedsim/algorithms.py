from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from .errors import InvalidQuantum, UnknownPolicy
from .metrics import build_process_metrics, compute_system_metrics, summarize_process_metrics
from .models import Process, ScheduleResult
from .trace import SimulationContext
from .workload_io import validate_processes

logger = logging.getLogger(__name__)


def _finish(ctx: SimulationContext, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
    timeline = ctx.trace.segments()
    processes = build_process_metrics(ctx.processes, timeline, ctx.completion)

    result = ScheduleResult(algorithm=algorithm, quantum=quantum, processes=processes, timeline=timeline)
    result.summary = summarize_process_metrics(processes)
    compute_system_metrics(result)

    logger.info(
        "%s finished %d process(es) in %d segment(s), makespan %d",
        algorithm,
        len(processes),
        len(timeline),
        result.system.makespan,
    )
    return result


def _arrival_order(processes: List[Process]) -> List[Process]:
    return sorted(processes, key=lambda p: (p.arrival_time, p.index))


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    ctx = SimulationContext(processes)

    for p in _arrival_order(ctx.processes):
        ctx.idle_until(p.arrival_time)
        ctx.run(p, p.burst_time)

    return _finish(ctx, "FCFS")


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. Ties go to the
    process that came first in the input.
    """
    ctx = SimulationContext(processes)

    while not ctx.finished:
        ready = ctx.ready()

        if not ready:
            # Nothing has arrived yet: jump to the earliest pending arrival.
            ctx.idle_until(min(p.arrival_time for p in ctx.pending()))
            continue

        # min() keeps the first of equal keys, and ready is in input order.
        p = min(ready, key=lambda x: x.burst_time)
        logger.debug("SJF picks %s (burst %d) at %d", p.pid, p.burst_time, ctx.time)
        ctx.run(p, p.burst_time)

    return _finish(ctx, "SJF (non-preemptive)")


def _check_quantum(quantum: Optional[int]) -> int:
    if quantum is None:
        raise InvalidQuantum("Round Robin requires a time quantum (use --quantum)")
    if isinstance(quantum, bool) or not isinstance(quantum, int):
        raise InvalidQuantum(f"Time quantum must be an integer, got {quantum!r}")
    if quantum <= 0:
        raise InvalidQuantum(f"Time quantum must be positive, got {quantum}")
    return quantum


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive during a slice join the queue ahead of the process
    that was just preempted. Every slice is its own Gantt entry, even when
    the same process runs twice in a row.
    """
    quantum = _check_quantum(quantum)
    ctx = SimulationContext(processes)

    arrivals: Deque[Process] = deque(_arrival_order(ctx.processes))
    ready: Deque[Process] = deque()

    def admit_arrivals() -> None:
        while arrivals and arrivals[0].arrival_time <= ctx.time:
            ready.append(arrivals.popleft())

    while not ctx.finished:
        admit_arrivals()

        if not ready:
            ctx.idle_until(arrivals[0].arrival_time)
            continue

        p = ready.popleft()
        ctx.run(p, min(quantum, ctx.remaining[p.pid]))

        admit_arrivals()

        if ctx.remaining[p.pid] > 0:
            logger.debug("%s preempted at %d with %d left", p.pid, ctx.time, ctx.remaining[p.pid])
            ready.append(p)

    return _finish(ctx, "Round Robin", quantum=quantum)


def schedule_srtn(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time Next (preemptive SJF).

    The decision is re-made every time unit; a maximal uninterrupted run of
    one process is recorded as a single segment.
    """
    ctx = SimulationContext(processes)

    while not ctx.finished:
        ready = ctx.ready()

        if not ready:
            ctx.idle_until(ctx.next_arrival())
            continue

        current = min(ready, key=lambda p: ctx.remaining[p.pid])

        last = ctx.trace.last
        if (
            last is not None
            and last.end_time == ctx.time
            and last.pid != current.pid
            and ctx.remaining[last.pid] > 0
        ):
            logger.debug("%s preempts %s at %d", current.pid, last.pid, ctx.time)

        ctx.run(current, 1, coalesce=True)

    return _finish(ctx, "SRTN")


ALGORITHMS: Dict[str, Callable[..., ScheduleResult]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
    "srtn": schedule_srtn,
}

ALIASES = {
    "roundrobin": "rr",
    "round-robin": "rr",
    "round_robin": "rr",
    "srtf": "srtn",
}


def resolve_policy(name: str) -> str:
    """
    Map a user-supplied policy name onto a key of ``ALGORITHMS``.
    """
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in ALGORITHMS:
        known = ", ".join(sorted(ALGORITHMS))
        raise UnknownPolicy(f"Unknown scheduling policy '{name}' (choose from {known})")
    return key


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Validate the request and dispatch to the requested algorithm. The quantum
    only matters for round-robin; other policies ignore it.
    """
    key = resolve_policy(name)
    validate_processes(processes)

    logger.debug("Running %s on %d process(es), quantum=%s", key, len(processes), quantum)
    func = ALGORITHMS[key]
    if key == "rr":
        return func(processes, quantum=quantum)
    return func(processes)
