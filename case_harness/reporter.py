"""Rendering of run results and exit code derivation."""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from case_harness.errors import ConfigurationError
from case_harness.models.config import RunConfiguration
from case_harness.models.descriptor import TestProgram
from case_harness.models.result import RunSummary, TestOutcome, Verdict
from case_harness.resolver import resolve_mode, validate_descriptor

log = logging.getLogger(__name__)

VERDICT_LABELS: Mapping[Verdict, str] = {
    "pass": "PASS: ",
    "fail": "FAIL: ",
    "xfail": "XFAIL:",
    "xpass": "XPASS:",
    "skip": "SKIP: ",
}

MODE_MARKERS = {
    "pass": "",
    "xfail": "XFAIL",
    "skip": "SKIP",
}


def format_outcome_line(prog_name: str, outcome: TestOutcome) -> str:
    """Format the one-line verdict of OUTCOME, e.g. ``PASS:  prog 1: desc``."""
    line = (
        f"{VERDICT_LABELS[outcome.verdict]} {prog_name} "
        f"{outcome.number}: {outcome.description}"
    )
    if outcome.wip:
        line += f" [[WIP: {outcome.wip}]]"
    return line


def log_outcome_details(log: logging.Logger, outcome: TestOutcome) -> None:
    """Log the message, location and causes recorded for OUTCOME."""
    if outcome.message is None:
        return

    level = logging.ERROR if outcome.failed else logging.INFO
    where = f" (at {outcome.location})" if outcome.location else ""
    log.log(level, "Test %d: %s%s", outcome.number, outcome.message, where)
    for cause in outcome.causes:
        log.log(level, "  caused by: %s", cause)


def format_summary(summary: RunSummary) -> Sequence[str]:
    """Format the aggregate counts of a run, failures listed last."""
    counts = summary.counts
    lines = [
        "=" * 80,
        f"Test Results Summary: {summary.prog_name}",
        "=" * 80,
    ]
    lines.extend(
        f"{label.strip():<6} {counts[verdict]}"
        for verdict, label in VERDICT_LABELS.items()
    )
    if summary.configuration_errors:
        lines.append(f"Configuration errors: {summary.configuration_errors}")
    lines.extend(
        f"  failed: {outcome.number} {outcome.description} "
        f"({VERDICT_LABELS[outcome.verdict].rstrip(': ')})"
        for outcome in summary.failures
    )
    return lines


def log_results_summary(log: logging.Logger, summary: RunSummary) -> None:
    """Log the aggregate counts of a run."""
    for line in format_summary(summary):
        log.info("%s", line)


def format_output(summary: RunSummary) -> dict[str, Any]:
    """Format a run summary for JSON output."""
    results = [
        {
            "number": outcome.number,
            "description": outcome.description,
            "verdict": outcome.verdict,
            "mode": outcome.mode,
            "message": outcome.message,
            "location": outcome.location,
            "wip": outcome.wip,
            "duration": outcome.duration,
        }
        for outcome in summary.outcomes
    ]
    counts = summary.counts
    return {
        "program": summary.prog_name,
        "total": len(results),
        "passed": counts["pass"],
        "failed": counts["fail"],
        "xfailed": counts["xfail"],
        "xpassed": counts["xpass"],
        "skipped": counts["skip"],
        "configuration_errors": summary.configuration_errors,
        "results": results,
    }


def exit_code(summary: RunSummary) -> int:
    """Return 0 if no test failed or unexpectedly passed, 1 otherwise."""
    return 1 if summary.has_failures else 0


def report(summary: RunSummary, *, json_output: bool = False) -> int:
    """Print SUMMARY in table order and return the process exit code."""
    if json_output:
        for outcome in summary.outcomes:
            log_outcome_details(log, outcome)
        print(json.dumps(format_output(summary), indent=2))
        log_results_summary(log, summary)
    else:
        for outcome in summary.outcomes:
            print(format_outcome_line(summary.prog_name, outcome), flush=True)
            log_outcome_details(log, outcome)
        print("\n".join(format_summary(summary)), flush=True)

    return exit_code(summary)


def format_listing(program: TestProgram, config: RunConfiguration) -> Sequence[str]:
    """Describe the tests of PROGRAM and their effective modes without running."""
    lines = [
        "Test #  Mode   Test Description",
        "------  -----  ----------------",
    ]
    for number, descriptor in enumerate(program.tests, start=1):
        try:
            resolved = resolve_mode(validate_descriptor(descriptor), config)
        except ConfigurationError as exc:
            lines.append(f"  {number:3d}    ERROR  {exc}")
            continue

        line = (
            f"  {number:3d}    {MODE_MARKERS[resolved.mode]:<5}  "
            f"{descriptor.description}"
        )
        if resolved.wip:
            line += f" [[WIP: {resolved.wip}]]"
        if descriptor.predicate is not None:
            line += f" [[{descriptor.predicate.description}]]"
        lines.append(line)
    return lines
