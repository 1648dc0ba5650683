import pytest

from schedsim.errors import ScheduleInvariantError
from schedsim.models import Process
from schedsim.trace import SimulationContext, TraceBuilder


def test_append_keeps_separate_segments_by_default():
    trace = TraceBuilder()
    trace.append("P1", 0, 2)
    trace.append("P1", 2, 4)
    assert len(trace) == 2


def test_coalesce_extends_contiguous_run():
    trace = TraceBuilder()
    trace.append("P1", 0, 1, coalesce=True)
    trace.append("P1", 1, 2, coalesce=True)
    trace.append("P2", 2, 3, coalesce=True)
    trace.append("P1", 5, 6, coalesce=True)
    assert [(s.pid, s.start_time, s.end_time) for s in trace.segments()] == [
        ("P1", 0, 2),
        ("P2", 2, 3),
        ("P1", 5, 6),
    ]


def test_rejects_empty_segment():
    with pytest.raises(ScheduleInvariantError):
        TraceBuilder().append("P1", 3, 3)


def test_rejects_overlap():
    trace = TraceBuilder()
    trace.append("P1", 0, 4)
    with pytest.raises(ScheduleInvariantError, match="overlaps"):
        trace.append("P2", 3, 5)


def test_context_tracks_remaining_and_completion():
    procs = [Process("B", 2, 3, index=1), Process("A", 0, 2, index=0)]
    ctx = SimulationContext(procs)

    # Input order, not list order.
    assert [p.pid for p in ctx.processes] == ["A", "B"]
    assert [p.pid for p in ctx.ready()] == ["A"]
    assert ctx.next_arrival() == 2

    ctx.run(ctx.processes[0], 2)
    assert ctx.completion == {"A": 2}
    assert ctx.remaining["A"] == 0

    ctx.run(ctx.processes[1], 1)
    assert ctx.time == 3
    assert ctx.remaining["B"] == 2
    assert not ctx.finished


def test_idle_until_never_moves_backwards():
    ctx = SimulationContext([Process("A", 0, 1)])
    ctx.idle_until(5)
    ctx.idle_until(2)
    assert ctx.time == 5
    assert len(ctx.trace) == 0
