"""Command line entry points for test programs."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Collection, Sequence
from pathlib import Path

from pydantic import ValidationError

from case_harness.errors import HarnessError
from case_harness.loading import load_test_program
from case_harness.models.config import RunConfiguration
from case_harness.models.descriptor import ModeFilter, TestProgram
from case_harness.reporter import format_listing, report
from case_harness.scheduler import TestScheduler

log = logging.getLogger("case_harness")

HARNESS_FAULT_EXIT_CODE = 2


def parse_test_numbers(values: Sequence[str]) -> frozenset[int] | None:
    """Parse test numbers and inclusive ``N:M`` ranges.

    Returns:
        The selected numbers, or None when VALUES is empty (run everything)

    Raises:
        ValueError: If a value is not a number or a valid range

    """
    if not values:
        return None

    numbers: set[int] = set()
    for value in values:
        first, sep, last = value.partition(":")
        try:
            start = int(first)
            end = int(last) if sep else start
        except ValueError:
            raise ValueError(f"Invalid test number '{value}'") from None
        if end < start:
            raise ValueError(f"Invalid test range '{value}'")
        numbers.update(range(start, end + 1))
    return frozenset(numbers)


def build_parser(
    prog: str | None = None, *, with_program: bool = False
) -> argparse.ArgumentParser:
    """Create the argument parser shared by run_main() and main()."""
    parser = argparse.ArgumentParser(
        prog=prog, description="Run the tests of a test program"
    )
    if with_program:
        parser.add_argument(
            "program",
            help="Entry point name or module[:attribute] of the test program",
        )
    parser.add_argument(
        "tests",
        nargs="*",
        metavar="NUMBER",
        help="Test numbers or N:M ranges to run (default: all)",
    )
    parser.add_argument("--fs-type", help="Filesystem backend to test")
    parser.add_argument("--config-file", type=Path, help="Backend config file")
    parser.add_argument("--srcdir", type=Path, help="Source directory")
    parser.add_argument("--repos-dir", type=Path, help="Directory for repositories")
    parser.add_argument("--repos-url", help="URL to access --repos-dir as")
    parser.add_argument(
        "--repos-template", type=Path, help="Pre-created repository to copy"
    )
    parser.add_argument(
        "--server-minor-version",
        type=int,
        default=0,
        help="Server minor version to emulate (0 means latest)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("test-work"),
        help="Transient data area for tests",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Remove directories of passing tests when done",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run tests concurrently, up to the program's limit",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        help="Maximum concurrent tests (0 or less means unbounded)",
    )
    parser.add_argument(
        "--mode-filter",
        choices=["pass", "xfail", "skip", "all"],
        default="all",
        help="Only run tests whose effective mode matches",
    )
    parser.add_argument(
        "--list", action="store_true", help="List the tests instead of running them"
    )
    parser.add_argument(
        "--json", action="store_true", help="Print results as JSON on stdout"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return parser


def configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def make_config(args: argparse.Namespace, prog_name: str) -> RunConfiguration:
    """Build the run configuration from parsed arguments."""
    return RunConfiguration(
        prog_name=prog_name,
        fs_type=args.fs_type,
        config_file=args.config_file,
        srcdir=args.srcdir,
        repos_dir=args.repos_dir,
        repos_url=args.repos_url,
        repos_template=args.repos_template,
        server_minor_version=args.server_minor_version,
        verbose=args.verbose,
        quiet=args.quiet,
        cleanup=args.cleanup,
        data_dir=args.data_dir,
    )


def effective_concurrency(args: argparse.Namespace, program: TestProgram) -> int:
    """Serial by default, the program's limit with --parallel."""
    if args.max_concurrency is not None:
        return args.max_concurrency
    if args.parallel:
        return program.max_concurrency
    return 1


async def run(
    program: TestProgram,
    config: RunConfiguration,
    *,
    max_concurrency: int = 1,
    selected: Collection[int] | None = None,
    mode_filter: ModeFilter = "all",
    json_output: bool = False,
) -> int:
    """Run PROGRAM and return the exit code."""
    log.info("Running test program %s (%d test(s))", program.name, len(program.tests))
    scheduler = TestScheduler(
        config=config, max_concurrency=max_concurrency, mode_filter=mode_filter
    )
    summary = await scheduler.run(program.tests, selected)
    return report(summary, json_output=json_output)


def execute(
    program: TestProgram, args: argparse.Namespace, parser: argparse.ArgumentParser
) -> int:
    """Run or list PROGRAM according to parsed ARGS."""
    configure_logging(args.verbose, args.quiet)

    try:
        selected = parse_test_numbers(args.tests)
    except ValueError as exc:
        parser.error(str(exc))
    try:
        config = make_config(args, program.name)
    except ValidationError as exc:
        parser.error(str(exc))

    if args.list:
        for line in format_listing(program, config):
            print(line)
        return 0

    try:
        return asyncio.run(
            run(
                program,
                config,
                max_concurrency=effective_concurrency(args, program),
                selected=selected,
                mode_filter=args.mode_filter,
                json_output=args.json,
            )
        )
    except HarnessError as exc:
        log.error("%s: %s", program.name, exc)
        return HARNESS_FAULT_EXIT_CODE


def run_main(program: TestProgram, argv: Sequence[str] | None = None) -> int:
    """Entry point for a test program module run as a script."""
    parser = build_parser(program.name)
    args = parser.parse_args(argv)
    return execute(program, args, parser)


def main() -> None:
    """CLI entry point."""
    parser = build_parser(with_program=True)
    args = parser.parse_args()

    try:
        program = load_test_program(args.program)
    except HarnessError as exc:
        configure_logging(args.verbose, args.quiet)
        log.error("%s", exc)
        sys.exit(HARNESS_FAULT_EXIT_CODE)

    sys.exit(execute(program, args, parser))


if __name__ == "__main__":  # pragma: no cover
    main()
