import signal
import subprocess
import time
from os import PathLike

from benchforge.config import HarnessConfig
from benchforge.logging import logger
from benchforge.web.stream import ResultStream

from .types import BenchmarkRun, FailureKind, RunFailure, RunReport


def run(working_dir: str | PathLike[str] | None, command: str, *args: str) -> str:
    """Run `command` with `args` in `working_dir` and return its stdout.

    Arguments are passed as a list, never through a shell. Blocks until the
    child exits; raises RunFailure if it cannot be started or exits non-zero.
    """
    argv = [command, *args]
    logger.debug("Running %s in %s", argv, working_dir or ".")

    try:
        result = subprocess.run(
            argv,
            cwd=working_dir or None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except (OSError, ValueError) as exc:
        # Bad executable, bad working dir or a NUL byte in an argument
        raise RunFailure(classify(""), str(exc)) from exc

    if result.returncode != 0:
        failure = RunFailure(
            classify(result.stderr), _exit_message(result.returncode), result.stderr
        )
        logger.debug("%s failed (%s): %s", command, failure.kind.value, failure.message)
        raise failure

    return result.stdout


def classify(stderr: str) -> FailureKind:
    lines = stderr.split("\n")
    # Both checks look at lines[0] and lines[1]
    if len(lines) < 3:
        return FailureKind.OTHER

    if lines[0].startswith("panic:") or lines[1].startswith("panic:"):
        return FailureKind.PANIC

    if (
        lines[0].startswith("# ")
        or lines[1].startswith("# ")
        or lines[0].startswith("can't load package")
    ):
        return FailureKind.BUILD_FAILED

    return FailureKind.OTHER


def _exit_message(returncode: int) -> str:
    if returncode >= 0:
        return f"exit status {returncode}"

    try:
        name = signal.Signals(-returncode).name
    except ValueError:
        name = str(-returncode)
    return f"signal: {name}"


class BenchmarkRunner:
    def __init__(
        self, config: HarnessConfig, stream: ResultStream[BenchmarkRun] | None = None
    ):
        self.config = config
        self.stream = stream

    def _run(self, order: list[str], *, fail_fast: bool) -> RunReport:
        results: dict[str, BenchmarkRun] = {}
        failures: dict[str, RunFailure] = {}
        skipped: list[str] = []

        for index, bid in enumerate(order):
            bench = self.config.get_benchmark(bid)

            start = time.monotonic()
            try:
                output = run(bench.working_dir, bench.command, *bench.args)
            except RunFailure as failure:
                failures[bid] = failure
            else:
                if output.strip() == "":
                    failures[bid] = RunFailure(
                        FailureKind.NO_BENCHMARKS, "command produced no output"
                    )
                else:
                    results[bid] = BenchmarkRun(bid, output, time.monotonic() - start)

            if bid in failures:
                logger.info("Benchmark %s failed: %s", bid, failures[bid].kind.value)
                if fail_fast:
                    skipped.extend(order[index + 1 :])
                    break
                continue

            logger.info("Benchmark %s finished", bid)
            if self.stream is not None:
                self.stream.put(results[bid])

        return RunReport(order, results, failures, skipped)

    def run_all(self, *, fail_fast: bool = True) -> RunReport:
        return self._run(self.config.benchmark_ids(), fail_fast=fail_fast)

    def run_target(self, target: str, *, fail_fast: bool = True) -> RunReport:
        if not self.config.has_benchmark(target):
            raise KeyError(target)
        return self._run([target], fail_fast=fail_fast)
