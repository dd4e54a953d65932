import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import (
    DEFAULT_BIND,
    BenchmarkConfig,
    ConfigError,
    HarnessConfig,
    UnsupportedConfigFormatError,
)

_FORMATS = {
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".json": "JSON",
}


def load_config(path: str | Path) -> HarnessConfig:
    config_path = Path(path).expanduser().resolve()

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigError(f"Config path is not a file: {config_path}")

    fmt = _detect_format(config_path)
    raw = _parse_file(config_path, fmt)
    return _build_harness_config(raw, config_path.parent)


def _detect_format(path: Path) -> str:
    try:
        return _FORMATS[path.suffix]
    except KeyError:
        raise UnsupportedConfigFormatError(
            f"Non supported file extension: {path.suffix}\n Expected format: .yml/.yaml, .toml, .json"
        ) from None


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        match fmt:
            case "YAML":
                raw = yaml.safe_load(text)
            case "TOML":
                raw = tomllib.loads(text)
            case "JSON":
                raw = json.loads(text)
            case _:
                raise AssertionError("Unreachable")
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"{path}: invalid {fmt}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigError(
            f"{path}: {fmt} parsed successfully but the top-level value is not an object: {type(raw)}"
        )

    return raw


def _build_harness_config(raw: Mapping[str, Any], base_dir: Path) -> HarnessConfig:
    known = {"bind", "template", "benchmarks"}
    for key in raw.keys():
        if key not in known:
            raise ConfigError(f"Can't process top-level field: {key}")

    bind = raw.get("bind", DEFAULT_BIND)
    if not isinstance(bind, str) or ":" not in bind:
        raise ConfigError(f"'bind' must be a 'host:port' string, got {bind!r}")

    template = None
    if "template" in raw:
        if not isinstance(raw["template"], str) or len(raw["template"].strip()) < 1:
            raise ConfigError("'template' must be a non-empty path string")
        template = base_dir / raw["template"].strip()

    if "benchmarks" not in raw:
        raise ConfigError("Missing 'benchmarks' field")

    if not isinstance(raw["benchmarks"], Mapping):
        raise ConfigError(
            f"'benchmarks' must be a mapping, got {type(raw['benchmarks'])}"
        )

    if len(raw["benchmarks"]) < 1:
        raise ConfigError("There must be at least one benchmark in the config file")

    benchmarks: dict[str, BenchmarkConfig] = {}
    for bench_id, fields in raw["benchmarks"].items():
        if not isinstance(bench_id, str):
            raise ConfigError(f"Benchmark id must be a string, got {type(bench_id)}")

        if not isinstance(fields, Mapping):
            raise ConfigError(f"{bench_id} must be a mapping")

        bench_id_norm = bench_id.strip()

        if len(bench_id_norm) < 1:
            raise ConfigError("A benchmark id can't be empty")

        if bench_id_norm in benchmarks:
            raise ConfigError(
                f"Duplicate benchmark id after normalization: {bench_id_norm}"
            )

        benchmarks[bench_id_norm] = _build_benchmark_config(
            bench_id_norm, fields, base_dir
        )

    return HarnessConfig(benchmarks=benchmarks, bind=bind.strip(), template=template)


def _build_benchmark_config(
    bench_id: str, fields: Mapping[str, Any], base_dir: Path
) -> BenchmarkConfig:
    keys = {"command", "args", "working_dir"}
    args: list[str] = []
    working_dir = None

    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"{bench_id}: Can't process: {field}")

    if "command" not in fields:
        raise ConfigError(f"{bench_id}: missing 'command'")

    if not isinstance(fields["command"], str):
        raise ConfigError(f"{bench_id}: The command should be a string")

    command = fields["command"].strip()
    if len(command) < 1:
        raise ConfigError(f"{bench_id}: Command missing")

    if "args" in fields:
        if not isinstance(fields["args"], list):
            raise ConfigError(f"{bench_id}: Arguments should be in a list.")

        for item in fields["args"]:
            if not isinstance(item, str):
                raise ConfigError(
                    f"{bench_id}: {item!r} should be a string in the argument list"
                )
            # Passed verbatim, no stripping
            args.append(item)

    if "working_dir" in fields:
        if not isinstance(fields["working_dir"], str):
            raise ConfigError(f"{bench_id}: The working_dir should be a string")

        if len(fields["working_dir"].strip()) < 1:
            raise ConfigError(
                f"{bench_id}: Please provide a string or remove this field"
            )

        working_dir = str(base_dir / fields["working_dir"].strip())

    return BenchmarkConfig(bench_id, command, args, working_dir)
