from dataclasses import dataclass
from pathlib import Path

DEFAULT_BIND = "localhost:6222"


@dataclass
class BenchmarkConfig:
    id: str
    command: str
    args: list[str]
    working_dir: str | None


@dataclass
class HarnessConfig:
    benchmarks: dict[str, BenchmarkConfig]
    bind: str = DEFAULT_BIND
    template: Path | None = None

    def __iter__(self):
        yield from self.benchmarks.values()

    def has_benchmark(self, id: str) -> bool:
        return id in self.benchmarks

    def get_benchmark(self, id: str) -> BenchmarkConfig:
        if not self.has_benchmark(id):
            raise KeyError(id)

        return self.benchmarks[id]

    def benchmark_ids(self) -> list[str]:
        return list(self.benchmarks.keys())


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
