from __future__ import annotations

import math
from typing import Dict, List, NamedTuple, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionSegment

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]

# Columns available for the bars themselves; boundaries add one per cell.
MAX_CHART_WIDTH = 72

BOUNDARY = "|"


class _Cell(NamedTuple):
    pid: Optional[str]  # None for idle time
    start_time: int
    end_time: int
    width: int


def _chart_scale(segments: List[ExecutionSegment], max_width: int) -> int:
    """Time units per character, so the whole run fits in ``max_width``."""
    makespan = segments[-1].end_time
    return max(1, math.ceil(makespan / max(1, max_width)))


def _layout(segments: List[ExecutionSegment], scale: int) -> List[_Cell]:
    """
    Split the run into segment and idle cells. Every cell is at least one
    character wide.
    """
    cells: List[_Cell] = []
    last_time = 0

    for seg in segments:
        if seg.start_time > last_time:
            width = math.ceil((seg.start_time - last_time) / scale)
            cells.append(_Cell(None, last_time, seg.start_time, width))

        cells.append(_Cell(seg.pid, seg.start_time, seg.end_time, math.ceil(seg.duration / scale)))
        last_time = seg.end_time

    return cells


def _label_row(cells: List[_Cell]) -> str:
    parts = [(cell.pid or "")[: cell.width].ljust(cell.width) for cell in cells]
    return " " + " ".join(parts) + " "


def _time_axis(cells: List[_Cell]) -> str:
    """
    Tick labels placed under every cell boundary.
    """
    ticks = [(0, 0)]
    column = 0
    for cell in cells:
        column += cell.width + 1
        ticks.append((column, cell.end_time))

    axis = [" "] * (column + 1)

    # A tick is skipped when its label would touch the previous one.
    next_free = 0
    for col, time in ticks:
        if col < next_free:
            continue
        label = str(time)
        axis[col : col + len(label)] = list(label)
        next_free = col + len(label) + 1

    return "".join(axis).rstrip()


def _scale_note(scale: int) -> str:
    return f"1 char = {scale} time units"


def render_gantt(segments: List[ExecutionSegment], max_width: int = MAX_CHART_WIDTH) -> str:
    """
    Plain-text Gantt chart. Cells are separated by ``|`` and idle time is
    drawn with dots; long runs are scaled down to fit ``max_width``.
    """
    if not segments:
        return "(no execution)"

    segments = sorted(segments, key=lambda s: (s.start_time, s.end_time))
    scale = _chart_scale(segments, max_width)
    cells = _layout(segments, scale)

    fills = [("." if cell.pid is None else "=") * cell.width for cell in cells]
    bar = BOUNDARY + BOUNDARY.join(fills) + BOUNDARY

    title = "Gantt Chart:" if scale == 1 else f"Gantt Chart ({_scale_note(scale)}):"
    return "\n".join([title, bar, _label_row(cells).rstrip(), _time_axis(cells)])


def build_rich_gantt(segments: List[ExecutionSegment], max_width: int = MAX_CHART_WIDTH) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not segments:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    segments = sorted(segments, key=lambda s: (s.start_time, s.end_time))
    scale = _chart_scale(segments, max_width)
    cells = _layout(segments, scale)

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    timeline = Text(BOUNDARY, style="dim")
    for cell in cells:
        if cell.pid is None:
            timeline.append("." * cell.width, style="dim")
        else:
            timeline.append(" " * cell.width, style=f"on {pid_color(cell.pid)}")
        timeline.append(BOUNDARY, style="dim")

    labels = Text(_label_row(cells), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    subtitle = None if scale == 1 else _scale_note(scale)
    panel = Panel.fit(table, title="Gantt Chart", subtitle=subtitle)
    return panel, _time_axis(cells)
