# tests/test_cli.py
from __future__ import annotations

import json
import logging
import socket
import sys
import threading
import time
from pathlib import Path

import pytest

from benchforge.cli import run_cli

PY = str(Path(sys.executable))


def _bench(code: str) -> dict:
    return {"command": PY, "args": ["-c", code]}


def _write_json_config(path: Path, benchmarks: dict, **extra) -> None:
    path.write_text(json.dumps({"benchmarks": benchmarks, **extra}), encoding="utf-8")


def test_list_prints_one_benchmark_per_line(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    _write_json_config(
        cfg,
        {
            "b": _bench("print(1)"),
            "a": _bench("print(1)"),
        },
    )

    code = run_cli(["--config", str(cfg), "list"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert out == ["b", "a"]


def test_run_all_executes_and_reports(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    _write_json_config(
        cfg,
        {
            "a": _bench("print('BenchmarkA 10 ns/op')"),
            "b": _bench("print('BenchmarkB 20 ns/op')"),
        },
    )

    code = run_cli(["--config", str(cfg), "run"])
    out = capsys.readouterr().out

    assert code == 0
    assert "OK a" in out
    assert "OK b" in out


def test_run_target_executes_only_that_benchmark(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    log = tmp_path / "log.txt"
    _write_json_config(
        cfg,
        {
            "a": _bench(f"open(r'{log}','a').write('a\\n'); print('a')"),
            "b": _bench(f"open(r'{log}','a').write('b\\n'); print('b')"),
        },
    )

    code = run_cli(["--config", str(cfg), "run", "b"])
    _ = capsys.readouterr()

    assert code == 0
    assert log.read_text(encoding="utf-8").splitlines() == ["b"]


def test_run_failure_reports_kind_and_returns_1(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    _write_json_config(
        cfg,
        {
            "crash": _bench(
                "import sys; sys.stderr.write('panic: boom\\ngoroutine 1\\n\\n'); sys.exit(2)"
            ),
            "after": _bench("print('after')"),
        },
    )

    code = run_cli(["--config", str(cfg), "run"])
    out = capsys.readouterr().out

    assert code == 1
    assert "FAIL crash [panic]: failed: panic: boom" in out
    assert "SKIP after" in out


def test_run_no_fail_fast_runs_everything(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    _write_json_config(
        cfg,
        {
            "empty": _bench("pass"),
            "after": _bench("print('after')"),
        },
    )

    code = run_cli(["--config", str(cfg), "run", "--no-fail-fast"])
    out = capsys.readouterr().out

    assert code == 1
    assert "FAIL empty [no_benchmarks]" in out
    assert "OK after" in out


def test_invalid_config_path_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    missing = tmp_path / "missing.json"

    code = run_cli(["--config", str(missing), "list"])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.err != ""


def test_unknown_target_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    _write_json_config(cfg, {"a": _bench("print(1)")})

    code = run_cli(["--config", str(cfg), "run", "nope"])
    captured = capsys.readouterr()

    assert code == 2
    assert "nope" in captured.err


def test_serve_without_template_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "benchforge.json"
    _write_json_config(cfg, {"a": _bench("print(1)")}, template="missing.html")

    code = run_cli(["--config", str(cfg), "serve", "--no-browser"])
    captured = capsys.readouterr()

    assert code == 2
    assert "missing.html" in captured.err


def test_serve_on_busy_port_returns_2_without_running_benchmarks(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    marker = tmp_path / "ran.txt"

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
        blocker.bind(("127.0.0.1", 0))
        blocker.listen()
        port = blocker.getsockname()[1]

        cfg = tmp_path / "benchforge.json"
        _write_json_config(
            cfg,
            {"a": _bench(f"open(r'{marker}','w').write('x'); print(1)")},
            bind=f"127.0.0.1:{port}",
        )

        code = run_cli(["--config", str(cfg), "serve", "--no-browser"])

    assert code == 2
    assert "Cannot listen" in capsys.readouterr().err
    assert not any(t.name == "benchmarks" for t in threading.enumerate())
    time.sleep(0.5)
    assert not marker.exists()


def test_repeated_verbose_runs_keep_one_handler(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("BENCHFORGE_DEBUG", raising=False)
    cfg = tmp_path / "benchforge.json"
    _write_json_config(cfg, {"a": _bench("print(1)")})

    for _ in range(3):
        assert run_cli(["--config", str(cfg), "--verbose", "list"]) == 0

    assert len(logging.getLogger("benchforge").handlers) == 1

    run_cli(["--config", str(cfg), "list"])
    assert logging.getLogger("benchforge").handlers == []
