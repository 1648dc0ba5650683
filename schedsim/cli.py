from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, resolve_policy, run_algorithm
from .config import Settings
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .models import Process, ScheduleResult
from .workload_io import load_workload, parse_process_pairs

logger = logging.getLogger(__name__)


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to a JSON, CSV or TXT workload file.",
    )
    source.add_argument(
        "--input",
        "-i",
        help="Inline 'arrival burst' pairs, e.g. \"0 10 1 2 2 5\" (processes are named P1, P2, ...).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Round Robin, SRTN).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...); defaults to $SCHEDSIM_LOG_LEVEL or WARNING.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling policy on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Policy to use ({', '.join(ALGORITHMS)}).",
    )
    _add_source_arguments(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by other policies; defaults to $SCHEDSIM_QUANTUM or 2).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several policies on the same workload and compare average metrics.",
    )
    _add_source_arguments(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=None,
        help="Policies to compare (default: fcfs sjf rr srtn).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum used for round-robin when included.",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_processes(args: argparse.Namespace) -> List[Process]:
    if args.workload:
        return load_workload(Path(args.workload))
    return parse_process_pairs(args.input)


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            # Panel.fit draws a border and one column of padding.
            console.print("  " + time_marks, highlight=False)

    console.print()

    headers = ["Process", "Arrive", "Burst", "Start", "Complete", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "Process" else "right")

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = result.summary
    sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary.avg_waiting:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary.avg_turnaround:.2f}")
    sys_table.add_row("Avg response", f"{summary.avg_response:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("CPU idle time", str(sys.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Context switches", str(sys.context_switches))

    console.print(sys_table)


def _print_comparison(results: List[ScheduleResult], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Context switches", justify="right")

    for result in results:
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.summary.avg_waiting:.2f}",
            f"{result.summary.avg_turnaround:.2f}",
            f"{result.summary.avg_response:.2f}",
            str(result.system.context_switches if result.system else 0),
        )

    console.print(summary_table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    err_console = Console(stderr=True)

    try:
        settings = Settings.from_env()
        configure_logging(args.log_level or settings.log_level)

        processes = _load_processes(args)
        quantum = args.quantum if args.quantum is not None else settings.quantum

        if args.command == "run":
            result = run_algorithm(args.algorithm, processes, quantum=quantum)
            _print_result(result, console, plain=args.plain)
            return 0

        # The subparsers are required, so anything else is "compare".
        names = args.algorithms or settings.compare_policies
        results = [
            run_algorithm(name, processes, quantum=quantum if resolve_policy(name) == "rr" else None)
            for name in names
        ]
        _print_comparison(results, console)
        return 0
    except (SchedulerError, ValueError, OSError) as exc:
        logger.debug("Run aborted", exc_info=True)
        err_console.print(f"Error: {exc}", style="red", markup=False, highlight=False)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
