"""Resolution of a test's effective mode for the current run."""

from dataclasses import dataclass

from case_harness.errors import ConfigurationError
from case_harness.models.config import RunConfiguration
from case_harness.models.descriptor import (
    TEST_MODES,
    ConfigDriver,
    PlainDriver,
    TestDescriptor,
    TestMode,
)
from case_harness.predicates import evaluate


@dataclass(frozen=True, kw_only=True)
class ResolvedMode:
    """Effective mode of a test plus presentation details."""

    mode: TestMode
    wip: str | None = None
    predicate_applied: bool = False


def validate_descriptor(descriptor: object) -> TestDescriptor:
    """Check that DESCRIPTOR can be scheduled.

    Raises:
        ConfigurationError: If the entry is not a usable test descriptor.

    """
    if not isinstance(descriptor, TestDescriptor):
        raise ConfigurationError(
            f"Table entry is not a test descriptor: {descriptor!r}"
        )
    if not isinstance(descriptor.driver, PlainDriver | ConfigDriver):
        raise ConfigurationError(f"Test has no driver function: {descriptor.driver!r}")
    if not callable(descriptor.driver.func):
        raise ConfigurationError(
            f"Driver function is not callable: {descriptor.driver.func!r}"
        )
    if descriptor.mode not in TEST_MODES:
        raise ConfigurationError(f"Unknown test mode '{descriptor.mode}'")
    predicate = descriptor.predicate
    if predicate is not None:
        if predicate.alternate_mode not in TEST_MODES:
            raise ConfigurationError(
                f"Unknown alternate mode '{predicate.alternate_mode}' "
                f"in predicate '{predicate.description}'"
            )
        if not callable(predicate.func):
            raise ConfigurationError(
                f"Predicate '{predicate.description}' has no function"
            )
    return descriptor


def resolve_mode(descriptor: TestDescriptor, config: RunConfiguration) -> ResolvedMode:
    """Compute the mode DESCRIPTOR runs in under CONFIG.

    A predicate that holds always wins over the declared mode. The WIP note
    is only carried when the effective mode is XFAIL.

    Raises:
        ConfigurationError: If the predicate cannot be evaluated.

    """
    mode = descriptor.mode
    applied = False
    if descriptor.predicate is not None and evaluate(descriptor.predicate, config):
        mode = descriptor.predicate.alternate_mode
        applied = True

    return ResolvedMode(
        mode=mode,
        wip=descriptor.wip if mode == "xfail" else None,
        predicate_applied=applied,
    )
