from pathlib import Path

import pytest

from schedsim.cli import build_parser, main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("SCHEDSIM_QUANTUM", raising=False)
    monkeypatch.delenv("SCHEDSIM_LOG_LEVEL", raising=False)
    # Keep rich from wrapping table cells.
    monkeypatch.setenv("COLUMNS", "200")


def test_run_inline_pairs(capsys):
    assert main(["run", "-a", "fcfs", "-i", "0 10 1 2 2 5"]) == 0
    out = capsys.readouterr().out
    assert "FCFS" in out
    assert "P3" in out
    assert "6.33" in out


def test_run_round_robin_uses_quantum(capsys):
    assert main(["run", "-a", "rr", "-q", "3", "-i", "0 10 1 2 2 5"]) == 0
    out = capsys.readouterr().out
    assert "Quantum: 3" in out


def test_run_plain_gantt(capsys):
    assert main(["run", "-a", "srtn", "-i", "0 10 1 2 2 5", "--plain"]) == 0
    assert "Gantt Chart:" in capsys.readouterr().out


def test_run_workload_file(tmp_path: Path, capsys):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\nA,0,3\nB,1,2\n")
    assert main(["run", "-a", "sjf", "-w", str(p)]) == 0
    assert "SJF" in capsys.readouterr().out


def test_compare_default_policies(capsys):
    assert main(["compare", "-i", "0 10 1 2 2 5"]) == 0
    out = capsys.readouterr().out
    for name in ("FCFS", "SJF", "Round Robin", "SRTN"):
        assert name in out


def test_unknown_policy_exits_with_error(capsys):
    assert main(["run", "-a", "lottery", "-i", "0 1"]) == 2
    assert "Unknown scheduling policy" in capsys.readouterr().err


def test_bad_quantum_exits_with_error(capsys):
    assert main(["run", "-a", "rr", "-q", "0", "-i", "0 1"]) == 2
    assert "quantum" in capsys.readouterr().err


def test_bad_input_exits_with_error(capsys):
    assert main(["run", "-a", "fcfs", "-i", "0 1 2"]) == 2
    assert "pairs" in capsys.readouterr().err


def test_source_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "-a", "fcfs"])


def test_compare_selected_policies(capsys):
    assert main(["compare", "-i", "0 10 1 2 2 5", "-a", "srtf", "fcfs", "-q", "4"]) == 0
    out = capsys.readouterr().out
    assert "SRTN" in out
    assert "FCFS" in out
    assert "Round Robin" not in out
