"""Reconciliation of raw results with effective modes."""

from case_harness.models.descriptor import TestDescriptor, TestMode
from case_harness.models.result import (
    DomainFailure,
    InternalFault,
    InvocationResult,
    RawResult,
    Skipped,
    Success,
    TestOutcome,
    Verdict,
)
from case_harness.resolver import ResolvedMode


def classify(mode: TestMode, raw: RawResult) -> Verdict:
    """Turn a raw result into a verdict under MODE.

    Only a DomainFailure can be an expected failure; an InternalFault is a
    FAIL whatever the mode.
    """
    if mode == "skip":
        return "skip"

    match raw:
        case Skipped():
            return "skip"
        case InternalFault():
            return "fail"
        case DomainFailure():
            return "xfail" if mode == "xfail" else "fail"
        case Success():
            return "xpass" if mode == "xfail" else "pass"

    raise TypeError(f"Unknown raw result {raw!r}")


def build_outcome(
    number: int,
    descriptor: TestDescriptor,
    resolved: ResolvedMode,
    invocation: InvocationResult,
) -> TestOutcome:
    """Classify INVOCATION and package it with the test's reporting data."""
    verdict = classify(resolved.mode, invocation.raw)
    message: str | None = None
    location: str | None = None
    causes: tuple[str, ...] = ()

    match invocation.raw:
        case DomainFailure():
            message = invocation.raw.message
            location = invocation.raw.location
            causes = tuple(invocation.raw.causes)
        case InternalFault():
            message = f"internal fault: {invocation.raw.message}"
            location = invocation.raw.location
        case Skipped():
            message = invocation.raw.reason
        case Success() if verdict == "xpass":
            message = "test passed but was expected to fail"

    return TestOutcome(
        number=number,
        description=descriptor.description,
        verdict=verdict,
        mode=resolved.mode,
        message=message,
        location=location,
        causes=causes,
        wip=resolved.wip,
        duration=invocation.duration,
        dispatched=True,
    )


def skipped_outcome(
    number: int,
    description: str,
    message: str | None = None,
    mode: TestMode | None = None,
    wip: str | None = None,
) -> TestOutcome:
    """Outcome for a test whose body is never called."""
    return TestOutcome(
        number=number,
        description=description,
        verdict="skip",
        mode=mode,
        message=message,
        wip=wip,
    )


def configuration_error_outcome(
    number: int, description: str, message: str
) -> TestOutcome:
    """FAIL outcome for a test that could not be resolved or scheduled."""
    return TestOutcome(
        number=number,
        description=description,
        verdict="fail",
        message=f"configuration error: {message}",
        configuration_error=True,
    )
