import logging

import pytest

from memsim.__main__ import main

SEED_TRACE = """\
100
REQUEST A 30
REQUEST B 20
REQUEST C 40
RELEASE B
REQUEST D 15
RELEASE A
RELEASE D
"""

def run_cli(capsys, *argv):
    assert main(list(argv)) == 0
    return capsys.readouterr()

def test_usage_without_argument(capsys):
    res = run_cli(capsys)
    assert res.out.splitlines() == [
        "Usage: memsim <input_file>",
        "Example: memsim memory_requests.txt",
    ]

def test_full_run(tmp_path, capsys):
    path = tmp_path / "requests.txt"
    path.write_text(SEED_TRACE)
    out = run_cli(capsys, str(path)).out.splitlines()
    assert out[:6] == [
        "=" * 40,
        "Memory Allocation Simulator (First-Fit)",
        "=" * 40,
        "",
        f"Reading from: {path}",
        "Initialized memory: 100 KB",
    ]
    ops = out[7:14]
    assert ops == [
        "SUCCESS: Allocated 30 KB to A at position 0",
        "SUCCESS: Allocated 20 KB to B at position 30",
        "SUCCESS: Allocated 40 KB to C at position 50",
        "RELEASED: 20 KB from B at position 30",
        "SUCCESS: Allocated 15 KB to D at position 30",
        "RELEASED: 30 KB from A at position 0",
        "RELEASED: 15 KB from D at position 30",
    ]
    assert "Block 1: [0-49]        FREE (50 KB)" in out
    assert "Block 2: [50-89]        C (40 KB) - ALLOCATED" in out
    assert "Block 3: [90-99]        FREE (10 KB)" in out
    assert "External Fragmentation: 16.67%" in out
    assert "Successful Allocations: 4" in out
    assert "Failed Allocations:     0" in out

def test_missing_file(tmp_path, capsys):
    path = tmp_path / "missing.txt"
    res = run_cli(capsys, str(path))
    assert f"Error: File not found - {path}" in res.err
    assert "Memory Statistics" not in res.out

def test_bad_total_aborts_without_report(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("lots\nREQUEST A 1\n")
    res = run_cli(capsys, str(path))
    assert "Error parsing number" in res.err
    assert "Final Memory State" not in res.out

def test_bad_size_reports_partial_state(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("100\nREQUEST A 30\nREQUEST B 2x\nREQUEST C 10\n")
    res = run_cli(capsys, str(path))
    assert "Error parsing number" in res.err and "line 3" in res.err
    assert "to C" not in res.out
    assert "Block 1: [0-29]        A (30 KB) - ALLOCATED" in res.out
    assert "Successful Allocations: 1" in res.out

@pytest.mark.parametrize("strict", [False, True])
def test_unknown_verb(tmp_path, capsys, strict):
    path = tmp_path / "verbs.txt"
    path.write_text("100\nREQUEST A 10\nRESIZE A 20\nREQUEST B 10\n")
    argv = ["--strict", str(path)] if strict else [str(path)]
    res = run_cli(capsys, *argv)
    assert "unknown command 'RESIZE'" in res.err
    assert ("SUCCESS: Allocated 10 KB to B at position 10" in res.out) != strict
    assert "Final Memory State" in res.out

def test_check_mode(tmp_path, capsys):
    path = tmp_path / "requests.txt"
    path.write_text(SEED_TRACE)
    res = run_cli(capsys, "--check", str(path))
    assert "Successful Allocations: 4" in res.out

def test_huge_total_still_reports(tmp_path, capsys):
    path = tmp_path / "huge.txt"
    path.write_text("100000000000000000000\nREQUEST A 10\n")
    res = run_cli(capsys, str(path))
    assert "SUCCESS: Allocated 10 KB to A at position 0" in res.out
    assert "Total Memory:           100000000000000000000 KB" in res.out
    assert "Free Memory:            99999999999999999990 KB (100.00%)" in res.out

def test_invalid_utf8_before_init(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe100\nREQUEST A 10\n")
    res = run_cli(capsys, str(path))
    assert "Error reading file:" in res.err
    assert "Initialized memory" not in res.out
    assert "Final Memory State" not in res.out

def test_invalid_utf8_after_init_reports_partial_state(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    # the bad bytes sit well past the first read chunk, after A is placed
    path.write_bytes(b"100\nREQUEST A 10\n" + b"\n" * 100000 + b"REQUEST \xff 5\n")
    res = run_cli(capsys, str(path))
    assert "Error reading file:" in res.err
    assert "SUCCESS: Allocated 10 KB to A at position 0" in res.out
    assert "Block 1: [0-9]         A (10 KB) - ALLOCATED" in res.out
    assert "Successful Allocations: 1" in res.out

def test_directory_as_trace(tmp_path, capsys):
    res = run_cli(capsys, str(tmp_path))
    assert "Error reading file:" in res.err
    assert "Final Memory State" not in res.out

def test_main_restores_logger_level(tmp_path, capsys):
    pkg_logger = logging.getLogger("memsim")
    before = (pkg_logger.level, len(pkg_logger.handlers))
    run_cli(capsys, "-v", str(tmp_path / "missing.txt"))
    assert (pkg_logger.level, len(pkg_logger.handlers)) == before
