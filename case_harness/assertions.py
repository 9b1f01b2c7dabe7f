"""Assertion helpers for test bodies.

Each helper returns None when the expectation holds and a DomainFailure
otherwise, so a test body checks and returns the result explicitly::

    def test_names(scope):
        return first_failure(
            check_strings(node.name, "iota"),
            check(node.kind == "file", "node.kind == 'file'"),
        )

A failing ``assert`` statement is not a domain failure: it is reported as
an internal fault and is never masked by an XFAIL expectation.
"""

import traceback
from collections.abc import Callable
from pathlib import PurePath

from case_harness.models.result import DomainFailure


def _caller_location() -> str:
    # [caller of the helper, the helper, this function]
    frame = traceback.extract_stack(limit=3)[0]
    return f"{frame.filename}:{frame.lineno}"


def check(condition: bool, description: str) -> DomainFailure | None:
    if condition:
        return None
    return DomainFailure(
        message=f"assertion '{description}' failed", location=_caller_location()
    )


def check_strings(actual: str | None, expected: str | None) -> DomainFailure | None:
    """Compare two strings; None only equals None."""
    if actual == expected:
        return None
    return DomainFailure(
        message=(
            f"Strings not equal\n  Expected: '{expected}'\n  Found:    '{actual}'"
        ),
        location=_caller_location(),
    )


def check_paths(
    actual: str | PurePath | None, expected: str | PurePath | None
) -> DomainFailure | None:
    """Compare two paths after normalizing separators and ``.`` components."""
    if actual is None or expected is None:
        same = actual is expected
    else:
        same = PurePath(actual) == PurePath(expected)
    if same:
        return None
    return DomainFailure(
        message=f"Paths not equal\n  Expected: '{expected}'\n  Found:    '{actual}'",
        location=_caller_location(),
    )


def check_error(
    func: Callable[[], object], expected: type[Exception]
) -> DomainFailure | None:
    """Check that FUNC raises EXPECTED (or a subclass of it)."""
    try:
        func()
    except expected:
        return None
    except Exception as exc:
        return DomainFailure(
            message=(
                f"Expected error {expected.__name__} but got {type(exc).__name__}"
            ),
            location=_caller_location(),
            causes=(f"{type(exc).__name__}: {exc}",),
        )
    return DomainFailure(
        message=f"Expected error {expected.__name__} but got no error",
        location=_caller_location(),
    )


def check_any_error(func: Callable[[], object]) -> DomainFailure | None:
    """Check that FUNC raises an error other than an assertion failure."""
    try:
        func()
    except AssertionError as exc:
        return DomainFailure(
            message="Expected error but got AssertionError",
            location=_caller_location(),
            causes=(f"AssertionError: {exc}",),
        )
    except Exception:
        return None
    return DomainFailure(
        message="Expected error but got no error", location=_caller_location()
    )


def first_failure(*results: DomainFailure | None) -> DomainFailure | None:
    """Return the first failure among RESULTS, or None if all passed."""
    return next((result for result in results if result is not None), None)
