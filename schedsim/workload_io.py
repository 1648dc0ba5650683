from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List, Mapping

from .errors import InvalidProcessSet
from .models import Process


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON, CSV or plain-text file into a list of
    validated Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    elif suffix == ".txt":
        processes = parse_process_pairs(path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json, .csv or .txt)")

    validate_processes(processes)
    return processes


def parse_process_pairs(text: str) -> List[Process]:
    """
    Parse whitespace-separated ``arrival burst`` pairs, e.g. ``"0 10 1 2 2 5"``.

    Processes are named P1, P2, ... in the order the pairs appear.
    """
    tokens = text.split()
    if len(tokens) % 2 != 0:
        raise InvalidProcessSet(
            f"Expected arrival/burst pairs but got {len(tokens)} value(s); "
            "use 'arrival burst arrival burst ...'"
        )

    processes: List[Process] = []
    for index in range(len(tokens) // 2):
        pid = f"P{index + 1}"
        raw_arrival, raw_burst = tokens[2 * index], tokens[2 * index + 1]
        try:
            arrival_time = int(raw_arrival)
            burst_time = int(raw_burst)
        except ValueError as exc:
            raise InvalidProcessSet(
                f"Invalid values for {pid}: arrival and burst must be integers "
                f"(got {raw_arrival!r}, {raw_burst!r})"
            ) from exc

        processes.append(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time, index=index))

    validate_processes(processes)
    return processes


def validate_processes(processes: Iterable[Process]) -> None:
    """
    Reject process sets the scheduler cannot run. An empty set is valid.
    """
    seen = set()
    for p in processes:
        if p.arrival_time < 0:
            raise InvalidProcessSet(f"{p.pid}: arrival time must be >= 0 (got {p.arrival_time})")
        if p.burst_time <= 0:
            raise InvalidProcessSet(f"{p.pid}: burst time must be > 0 (got {p.burst_time})")
        if p.pid in seen:
            raise InvalidProcessSet(f"Duplicate process id: {p.pid}")
        seen.add(p.pid)


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise InvalidProcessSet("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, index) for index, entry in enumerate(raw)]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for index, row in enumerate(reader):
            processes.append(_process_from_mapping(row, index))
    return processes


def _process_from_mapping(mapping: Mapping, index: int) -> Process:
    try:
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidProcessSet(f"Invalid process entry: {mapping!r}") from exc

    pid_val = mapping.get("pid")
    pid = str(pid_val) if pid_val not in (None, "") else f"P{index + 1}"

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        index=index,
    )
