from __future__ import annotations

import argparse
import sys
import threading

from benchforge.config import ConfigError, HarnessConfig, load_config
from benchforge.executor import BenchmarkRun, BenchmarkRunner, RunReport
from benchforge.logging import logger, setup_logging
from benchforge.web import (
    ResultStream,
    ServerError,
    TemplateLoadError,
    load_template,
    make_server,
    serve,
    start_browser,
)

from .args import build_parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        setup_logging(args.verbose)

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case "serve":
                return cmd_serve(args)
            case _:
                return 2

    except (ConfigError, TemplateLoadError, ServerError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyError as exc:
        print(f"Unknown benchmark: {exc.args[0]}", file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def cmd_run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    runner = BenchmarkRunner(config)
    fail_fast = not args.no_fail_fast

    if args.target is None:
        report = runner.run_all(fail_fast=fail_fast)
    else:
        report = runner.run_target(args.target, fail_fast=fail_fast)

    _print_report(report)
    return 1 if report.failures else 0


def cmd_list(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    for bench in config:
        print(bench.id)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    template = load_template(config.template)
    stream: ResultStream[BenchmarkRun] = ResultStream()
    server = make_server(config.bind, stream, template)

    producer = threading.Thread(
        target=_produce, args=(config, stream), name="benchmarks", daemon=True
    )
    producer.start()

    serve(
        server,
        open_browser=None if args.no_browser else start_browser,
    )
    return 0


def _produce(config: HarnessConfig, stream: ResultStream[BenchmarkRun]) -> None:
    try:
        report = BenchmarkRunner(config, stream).run_all(fail_fast=False)
    finally:
        stream.close()

    for bench_id, failure in report.failures.items():
        logger.warning("Benchmark %s failed [%s]: %s", bench_id, failure.kind.value, failure)


def _print_report(report: RunReport) -> None:
    for bench_id in report.order:
        if bench_id in report.results:
            print(f"OK {bench_id}, {report.results[bench_id].duration_s:.3f}s")
        elif bench_id in report.failures:
            failure = report.failures[bench_id]
            print(f"FAIL {bench_id} [{failure.kind.value}]: {failure}")
        else:
            print(f"SKIP {bench_id}")
