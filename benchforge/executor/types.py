from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    PANIC = "panic"
    BUILD_FAILED = "build_failed"
    NO_BENCHMARKS = "no_benchmarks"
    OTHER = "other"


class RunFailure(Exception):
    """A failed command invocation.

    `kind` is a best-effort guess; `stderr` is kept so callers can
    re-derive or override it.
    """

    def __init__(self, kind: FailureKind, message: str, stderr: str = "") -> None:
        super().__init__(kind, message, stderr)
        self._kind = FailureKind(kind)
        self._message = message
        self._stderr = stderr

    @property
    def kind(self) -> FailureKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def stderr(self) -> str:
        return self._stderr

    def __str__(self) -> str:
        if self._stderr != "":
            return f"failed: {self._stderr}"
        return f"failed: {self._message}"


@dataclass(frozen=True)
class BenchmarkRun:
    benchmark_id: str
    output: str
    duration_s: float


@dataclass(frozen=True)
class RunReport:
    order: list[str]
    results: dict[str, BenchmarkRun]
    failures: dict[str, RunFailure]
    skipped: list[str]

    @property
    def failed(self) -> list[str]:
        return [bid for bid in self.order if bid in self.failures]
