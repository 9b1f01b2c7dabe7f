"""Scheduling of a test table over a bounded worker pool."""

import asyncio
import logging
from collections.abc import Collection, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from case_harness.classifier import (
    build_outcome,
    configuration_error_outcome,
    skipped_outcome,
)
from case_harness.cleanup import CleanupRegistry
from case_harness.errors import ConfigurationError, HarnessError
from case_harness.invoker import invoke
from case_harness.models.config import RunConfiguration
from case_harness.models.descriptor import ModeFilter, TestDescriptor
from case_harness.models.result import RunSummary, TestOutcome
from case_harness.resolver import ResolvedMode, resolve_mode, validate_descriptor
from case_harness.scope import TestScope

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class _Job:
    number: int
    descriptor: TestDescriptor
    resolved: ResolvedMode


@dataclass(frozen=True, kw_only=True)
class _Completed:
    outcome: TestOutcome
    scope: TestScope | None


@dataclass(frozen=True, kw_only=True)
class TestScheduler:
    """Runs the tests of a table and collects their outcomes."""

    __test__ = False

    config: RunConfiguration
    max_concurrency: int = 1
    mode_filter: ModeFilter = "all"

    async def run(
        self,
        tests: Sequence[TestDescriptor],
        selected: Collection[int] | None = None,
    ) -> RunSummary:
        """Run TESTS and return their outcomes in table order.

        Args:
            tests: The test table; test numbers are 1-based positions
            selected: Test numbers to run, None for all of them

        Returns:
            Summary with exactly one outcome per table entry

        Raises:
            HarnessError: If a selected number is out of range or the worker
                pool cannot be started

        """
        if selected is not None:
            check_selection(selected, len(tests))

        outcomes: dict[int, TestOutcome] = {}
        jobs: list[_Job] = []
        for number, descriptor in enumerate(tests, start=1):
            prepared = self._prepare(number, descriptor, selected)
            if isinstance(prepared, _Job):
                jobs.append(prepared)
            else:
                outcomes[number] = prepared

        log.info(
            "Dispatching %d of %d test(s) with %s",
            len(jobs),
            len(tests),
            self._describe_concurrency(),
        )

        with CleanupRegistry(enabled=self.config.cleanup) as registry:
            for completed in await self._dispatch(jobs):
                outcomes[completed.outcome.number] = completed.outcome
                if completed.scope is not None and not completed.outcome.failed:
                    registry.extend(completed.scope.cleanup_paths)

        log.info("Test execution completed")
        return RunSummary(
            prog_name=self.config.prog_name,
            outcomes=[outcomes[number] for number in range(1, len(tests) + 1)],
        )

    def _prepare(
        self,
        number: int,
        descriptor: object,
        selected: Collection[int] | None,
    ) -> _Job | TestOutcome:
        description = getattr(descriptor, "description", repr(descriptor))
        if selected is not None and number not in selected:
            return skipped_outcome(number, description, "not selected")

        try:
            valid = validate_descriptor(descriptor)
            resolved = resolve_mode(valid, self.config)
        except ConfigurationError as exc:
            log.debug("Test %d cannot be scheduled: %s", number, exc)
            return configuration_error_outcome(number, description, str(exc))

        if self.mode_filter != "all" and resolved.mode != self.mode_filter:
            return skipped_outcome(
                number, description, "excluded by mode filter", mode=resolved.mode
            )
        if resolved.mode == "skip":
            return skipped_outcome(number, description, mode="skip")
        return _Job(number=number, descriptor=valid, resolved=resolved)

    def _worker_count(self, job_count: int) -> int:
        if self.max_concurrency <= 0:
            return job_count
        return min(self.max_concurrency, job_count)

    def _describe_concurrency(self) -> str:
        if self.max_concurrency <= 0:
            return "unbounded concurrency"
        if self.max_concurrency == 1:
            return "serial execution"
        return f"at most {self.max_concurrency} concurrent test(s)"

    async def _dispatch(self, jobs: Sequence[_Job]) -> Sequence[_Completed]:
        """Run JOBS on the worker pool, submitting them in table order."""
        if not jobs:
            return []

        try:
            executor = ThreadPoolExecutor(
                max_workers=self._worker_count(len(jobs)),
                thread_name_prefix="case-harness",
            )
        except (ValueError, RuntimeError) as exc:
            raise HarnessError(f"Cannot start worker pool: {exc}") from exc

        loop = asyncio.get_running_loop()
        with executor:
            futures = [
                loop.run_in_executor(executor, self._execute, job) for job in jobs
            ]
            results = await asyncio.gather(*futures, return_exceptions=True)

        return self._process_results(jobs, results)

    def _execute(self, job: _Job) -> _Completed:
        scope = TestScope(number=job.number, config=self.config)
        invocation = invoke(job.descriptor, self.config, scope)
        outcome = build_outcome(job.number, job.descriptor, job.resolved, invocation)
        return _Completed(outcome=outcome, scope=scope)

    def _process_results(
        self,
        jobs: Sequence[_Job],
        results: Sequence[_Completed | BaseException],
    ) -> Sequence[_Completed]:
        """Match results to jobs, turning harness exceptions into FAILs."""
        completed: list[_Completed] = []
        for job, result in zip(jobs, results, strict=True):
            if isinstance(result, _Completed):
                completed.append(result)
            elif isinstance(result, Exception):
                log.error(
                    "Test %d could not be executed: %s",
                    job.number,
                    result,
                    exc_info=result,
                )
                completed.append(
                    _Completed(
                        outcome=TestOutcome(
                            number=job.number,
                            description=job.descriptor.description,
                            verdict="fail",
                            mode=job.resolved.mode,
                            message=f"harness error: {result}",
                            dispatched=True,
                        ),
                        scope=None,
                    )
                )
            else:
                raise result
        return completed


def check_selection(selected: Collection[int], test_count: int) -> None:
    """Reject test numbers that are not in the table.

    Raises:
        HarnessError: If any number is outside ``1..test_count``

    """
    invalid = sorted(number for number in selected if not 1 <= number <= test_count)
    if invalid:
        raise HarnessError(
            f"Test number(s) out of range (1-{test_count}): "
            + ", ".join(str(number) for number in invalid)
        )
