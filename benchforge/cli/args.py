from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="benchforge")

    parser.add_argument(
        "--config",
        default="benchforge.yml",
        help="Path to config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Run benchmarks")
    run.add_argument(
        "target",
        nargs="?",
        help="Benchmark id; all benchmarks when omitted",
    )
    run.add_argument(
        "--no-fail-fast",
        action="store_true",
        help="Keep running benchmarks after a failure",
    )

    # list
    subparsers.add_parser("list", help="List benchmarks")

    # serve
    serve = subparsers.add_parser(
        "serve", help="Run benchmarks and show results in the dashboard"
    )
    serve.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't try to open a browser",
    )

    return parser
