"""Test descriptors: the entries of a test program's table."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from case_harness.models.config import RunConfiguration
from case_harness.scope import TestScope

TestMode = Literal["pass", "xfail", "skip"]
ModeFilter = Literal["pass", "xfail", "skip", "all"]

TEST_MODES: frozenset[str] = frozenset({"pass", "xfail", "skip"})

# A driver returns None, a bool, or one of the raw result types (possibly
# from a coroutine).
DriverReturn = object


@dataclass(frozen=True)
class PlainDriver:
    """Driver that only needs the per-test scope."""

    func: Callable[[TestScope], DriverReturn]

    def __call__(self, config: RunConfiguration, scope: TestScope) -> DriverReturn:
        return self.func(scope)


@dataclass(frozen=True)
class ConfigDriver:
    """Driver that also reads the run configuration."""

    func: Callable[[RunConfiguration, TestScope], DriverReturn]

    def __call__(self, config: RunConfiguration, scope: TestScope) -> DriverReturn:
        return self.func(config, scope)


Driver = PlainDriver | ConfigDriver


@dataclass(frozen=True, kw_only=True)
class RuntimePredicate:
    """Condition evaluated against the run configuration before a test runs.

    When ``func(config, value)`` holds, the test runs in ``alternate_mode``
    instead of its declared mode.
    """

    func: Callable[[RunConfiguration, str], bool]
    value: str
    alternate_mode: TestMode
    description: str


@dataclass(frozen=True, kw_only=True)
class TestDescriptor:
    """One test case of a program."""

    __test__ = False

    mode: TestMode
    driver: Driver
    description: str
    wip: str | None = None
    predicate: RuntimePredicate | None = None

    @property
    def name(self) -> str:
        """Name of the function behind the driver."""
        return getattr(self.driver.func, "__name__", repr(self.driver.func))


@dataclass(frozen=True, kw_only=True)
class TestProgram:
    """Ordered table of tests plus how many may run at once.

    Test numbers are 1-based positions in ``tests``. A ``max_concurrency``
    below 1 means unbounded, 1 means strictly serial.
    """

    __test__ = False

    name: str
    tests: Sequence[TestDescriptor]
    max_concurrency: int = 1


def with_config(
    func: Callable[[RunConfiguration, TestScope], DriverReturn],
) -> ConfigDriver:
    """Mark FUNC as a driver taking ``(config, scope)``."""
    return ConfigDriver(func)


def _as_driver(func: Callable[..., DriverReturn] | Driver) -> Driver:
    if isinstance(func, PlainDriver | ConfigDriver):
        return func
    return PlainDriver(func)


def passing(
    func: Callable[..., DriverReturn] | Driver,
    description: str,
    *,
    predicate: RuntimePredicate | None = None,
) -> TestDescriptor:
    """Declare a test that is expected to pass."""
    return TestDescriptor(
        mode="pass",
        driver=_as_driver(func),
        description=description,
        predicate=predicate,
    )


def xfail(
    func: Callable[..., DriverReturn] | Driver,
    description: str,
    *,
    when: bool = True,
    predicate: RuntimePredicate | None = None,
) -> TestDescriptor:
    """Declare a test that is expected to fail (when WHEN holds).

    A PREDICATE turns the expectation back into its alternate mode at run
    time, e.g. an XFAIL that passes on one filesystem backend.
    """
    return TestDescriptor(
        mode="xfail" if when else "pass",
        driver=_as_driver(func),
        description=description,
        predicate=predicate,
    )


def skip(
    func: Callable[..., DriverReturn] | Driver,
    description: str,
    *,
    when: bool = True,
    predicate: RuntimePredicate | None = None,
) -> TestDescriptor:
    """Declare a test that is not run (when WHEN holds)."""
    return TestDescriptor(
        mode="skip" if when else "pass",
        driver=_as_driver(func),
        description=description,
        predicate=predicate,
    )


def wip(
    func: Callable[..., DriverReturn] | Driver,
    description: str,
    note: str,
    *,
    when: bool = True,
    predicate: RuntimePredicate | None = None,
) -> TestDescriptor:
    """Declare a work-in-progress test, an XFAIL annotated with NOTE.

    The note is only reported while the test is expected to fail, so a
    PREDICATE that passes the test on some backend drops it there.
    """
    return TestDescriptor(
        mode="xfail" if when else "pass",
        driver=_as_driver(func),
        description=description,
        wip=note,
        predicate=predicate,
    )
