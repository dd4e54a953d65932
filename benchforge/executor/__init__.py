from .executor import BenchmarkRunner, classify, run
from .types import BenchmarkRun, FailureKind, RunFailure, RunReport

__all__ = [
    "run",
    "classify",
    "BenchmarkRunner",
    "BenchmarkRun",
    "FailureKind",
    "RunFailure",
    "RunReport",
]
