"""Command line front-end: ``letterfreq n file1 ... filen output``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from functools import partial
from pathlib import Path
from typing import List, NoReturn, Sequence, Tuple

from contracts.errors import (
    ConfigError,
    ExitCode,
    MissingFileError,
    UsageError,
    WriteError,
)
from counting.letters import count_letters
from dispatch import log as event_log
from dispatch.dispatcher import Dispatcher
from dispatch.executor import make_executor
from dispatch.sink import ReportSink
from project_config import get_config, get_section

_LOGGER = logging.getLogger(__name__)

PROG = "letterfreq"
USAGE = f"Usage:\n{PROG} n file1.txt file2.txt ... filen.txt results.txt"


def parse_positionals(arguments: Sequence[str]) -> Tuple[List[str], str]:
    """Validate ``n file1 ... filen output`` and return ``(files, output)``."""

    if not arguments:
        raise UsageError("Not enough command line arguments received", ExitCode.MISSING_ARGS)

    raw_count = arguments[0]
    try:
        num_files = int(raw_count)
    except ValueError:
        num_files = 0
    if num_files < 1:
        raise UsageError(f"Invalid number of files specified: {raw_count}", ExitCode.INVALID_COUNT)

    received = len(arguments) - 2
    if num_files < received:
        raise UsageError("Too many file names received", ExitCode.COUNT_MISMATCH)
    if num_files > received:
        raise UsageError("Not enough file names received", ExitCode.COUNT_MISMATCH)

    return list(arguments[1:-1]), arguments[-1]


def check_files(paths: Sequence[str]) -> None:
    """Raise :class:`MissingFileError` for the first path that does not exist."""

    for path in paths:
        if not Path(path).exists():
            raise MissingFileError(path)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class _Parser(argparse.ArgumentParser):
    """Reports option errors as :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, ExitCode.BAD_OPTION)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog=PROG,
        description="Count letter frequencies of several files concurrently.",
    )
    parser.add_argument("--config", default=None, help="TOML configuration file")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum concurrent tasks (0: one per input file)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run tasks one after another instead of concurrently",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the run summary as JSON instead of the completion banner",
    )
    # Options must precede n; everything from n on is positional, so input
    # names starting with "-" are accepted.
    parser.add_argument("arguments", nargs=argparse.REMAINDER, metavar="n file... output")
    return parser


def run(args: argparse.Namespace) -> int:
    config = get_config(args.config)
    _configure_logging(get_section("logging.level", config=config))

    files, output = parse_positionals(args.arguments)
    workers = args.workers if args.workers is not None else get_section("dispatch.max_workers", config=config)
    if workers < 0:
        raise UsageError(f"Invalid worker count: {workers}", ExitCode.BAD_OPTION)
    check_files(files)

    if get_section("events.enabled", config=config):
        event_log.configure(
            get_section("events.dir", config=config),
            max_bytes=get_section("events.max_bytes", config=config),
        )

    kind = "sequential" if args.sequential else get_section("dispatch.executor", config=config)
    chunk_size = get_section("counter.chunk_size", config=config)

    sink = ReportSink(output)
    sink.reset()
    executor = make_executor(kind, workers)
    dispatcher = Dispatcher(
        sink,
        executor=executor,
        counter=partial(count_letters, chunk_size=chunk_size),
    )
    try:
        summary = dispatcher.run(files)
    finally:
        executor.shutdown()

    if args.summary:
        print(json.dumps(summary.to_dict(), indent=2, sort_keys=True))
    else:
        print("All tasks finished! Terminating program")
    return int(ExitCode.OK)


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
        return run(args)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return int(exc.exit_code)
    except MissingFileError as exc:
        print(exc, file=sys.stderr)
        print("Execution ending early due to missing files...", file=sys.stderr)
        return int(ExitCode.MISSING_FILE)
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return int(ExitCode.CONFIG_ERROR)
    except WriteError as exc:
        print(exc, file=sys.stderr)
        return int(ExitCode.OUTPUT_ERROR)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
