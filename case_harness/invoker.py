"""Execution of a single test body."""

import asyncio
import inspect
import logging
import time
import traceback

from case_harness.errors import SkipTestError, TestFailedError
from case_harness.models.config import RunConfiguration
from case_harness.models.descriptor import TestDescriptor
from case_harness.models.result import (
    SUCCESS,
    DomainFailure,
    InternalFault,
    InvocationResult,
    RawResult,
    Skipped,
    Success,
)
from case_harness.scope import TestScope

log = logging.getLogger(__name__)


def invoke(
    descriptor: TestDescriptor, config: RunConfiguration, scope: TestScope
) -> InvocationResult:
    """Run the body of DESCRIPTOR once and capture what it reported.

    Exceptions raised by the body never escape: they are turned into a raw
    result. Coroutine bodies are run to completion on the calling thread,
    which must not already be running an event loop.
    """
    log.debug("Invoking test %d (%s)", scope.number, descriptor.name)
    start = time.perf_counter()
    raw = _call(descriptor, config, scope)
    duration = time.perf_counter() - start
    log.debug(
        "Test %d finished: %s (%.3fs)", scope.number, type(raw).__name__, duration
    )
    return InvocationResult(raw=raw, duration=duration)


def _call(
    descriptor: TestDescriptor, config: RunConfiguration, scope: TestScope
) -> RawResult:
    try:
        returned = descriptor.driver(config, scope)
        if inspect.iscoroutine(returned):
            returned = asyncio.run(returned)
    except AssertionError as exc:
        return InternalFault(
            message=str(exc) or "assertion failed", location=_location(exc)
        )
    except SkipTestError as exc:
        return Skipped(reason=str(exc) or None)
    except TestFailedError as exc:
        return DomainFailure(
            message=str(exc), location=_location(exc), causes=_causes(exc)
        )
    except Exception as exc:
        return DomainFailure(
            message=_describe(exc), location=_location(exc), causes=_causes(exc)
        )
    except KeyboardInterrupt:
        raise
    except BaseException as exc:
        # SystemExit, GeneratorExit and the like: never an expected failure.
        return InternalFault(
            message=f"test body raised {_describe(exc)}", location=_location(exc)
        )
    return _coerce(returned)


def _coerce(returned: object) -> RawResult:
    match returned:
        case None | True:
            return SUCCESS
        case False:
            return DomainFailure(message="test returned False")
        case Success() | DomainFailure() | InternalFault() | Skipped():
            return returned
        case _:
            return InternalFault(
                message=f"test returned unexpected {type(returned).__name__}"
            )


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def _location(exc: BaseException) -> str | None:
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return None
    frame = frames[-1]
    return f"{frame.filename}:{frame.lineno}"


def _causes(exc: BaseException) -> tuple[str, ...]:
    causes: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None and not current.__suppress_context__:
            current = current.__context__
        else:
            break
        causes.append(_describe(current))
    return tuple(causes)
