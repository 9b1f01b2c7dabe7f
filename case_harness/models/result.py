"""Models for test invocation results and verdicts."""

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from case_harness.models.descriptor import TestMode

Verdict = Literal["pass", "fail", "xfail", "xpass", "skip"]

VERDICTS: Sequence[Verdict] = ("pass", "fail", "xfail", "xpass", "skip")
FAILING_VERDICTS: frozenset[Verdict] = frozenset({"fail", "xpass"})


@dataclass(frozen=True)
class Success:
    """The test body completed without reporting a problem."""


SUCCESS = Success()


@dataclass(frozen=True, kw_only=True)
class DomainFailure:
    """The test body detected a violated expectation.

    Only this kind of failure may be masked by an XFAIL expectation.
    """

    message: str
    location: str | None = None
    causes: Sequence[str] = ()


@dataclass(frozen=True, kw_only=True)
class InternalFault:
    """An invariant of the test itself was violated (the test is broken)."""

    message: str
    location: str | None = None


@dataclass(frozen=True, kw_only=True)
class Skipped:
    """The test body decided at run time that it cannot run."""

    reason: str | None = None


RawResult = Success | DomainFailure | InternalFault | Skipped


@dataclass(frozen=True, kw_only=True)
class InvocationResult:
    """Raw result of running one test body, with its wall-clock duration."""

    raw: RawResult
    duration: float


@dataclass(frozen=True, kw_only=True)
class TestOutcome:
    """Final, classified result of one test of the table."""

    __test__ = False

    number: int
    description: str
    verdict: Verdict
    mode: TestMode | None = None
    message: str | None = None
    location: str | None = None
    causes: Sequence[str] = ()
    wip: str | None = None
    duration: float = 0.0
    dispatched: bool = False
    configuration_error: bool = False

    @property
    def failed(self) -> bool:
        """Whether this outcome makes the run unsuccessful."""
        return self.verdict in FAILING_VERDICTS or self.configuration_error


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Outcomes of a whole run, ordered by test number."""

    prog_name: str
    outcomes: Sequence[TestOutcome]

    @property
    def counts(self) -> Mapping[Verdict, int]:
        """Number of outcomes per verdict, including zero counts."""
        counter = Counter(outcome.verdict for outcome in self.outcomes)
        return {verdict: counter[verdict] for verdict in VERDICTS}

    @property
    def failures(self) -> Sequence[TestOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def configuration_errors(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.configuration_error)

    @property
    def has_failures(self) -> bool:
        return any(outcome.failed for outcome in self.outcomes)
