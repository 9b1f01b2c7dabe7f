"""Tests for assertion helpers."""

from pathlib import PurePosixPath

import pytest

from case_harness.assertions import (
    check,
    check_any_error,
    check_error,
    check_paths,
    check_strings,
    first_failure,
)
from case_harness.models.result import DomainFailure


def raise_key_error() -> None:
    raise KeyError("k")


def raise_assertion() -> None:
    raise AssertionError("broken")


def test_check_passes() -> None:
    """Returns None when the condition holds."""
    assert check(1 + 1 == 2, "1 + 1 == 2") is None


def test_check_reports_caller_location() -> None:
    """Reports the description and the calling line."""
    failure = check(False, "x == y")

    assert failure is not None
    assert failure.message == "assertion 'x == y' failed"
    assert failure.location is not None
    assert "test_assertions.py" in failure.location


@pytest.mark.parametrize(
    ("actual", "expected"),
    [("a", "a"), (None, None)],
)
def test_check_strings_equal(actual: str | None, expected: str | None) -> None:
    """Treats equal strings and two Nones as equal."""
    assert check_strings(actual, expected) is None


@pytest.mark.parametrize(
    ("actual", "expected"),
    [("a", "b"), (None, "a"), ("a", None)],
)
def test_check_strings_differ(actual: str | None, expected: str | None) -> None:
    """Reports both values when strings differ."""
    failure = check_strings(actual, expected)

    assert failure is not None
    assert failure.message == (
        f"Strings not equal\n  Expected: '{expected}'\n  Found:    '{actual}'"
    )


def test_check_paths_normalizes() -> None:
    """Ignores redundant separators and dot components."""
    assert check_paths("A/./B//lambda", PurePosixPath("A/B/lambda")) is None
    assert check_paths(None, None) is None


def test_check_paths_differ() -> None:
    """Reports different paths."""
    failure = check_paths("A/B", "A/C")

    assert failure is not None
    assert failure.message.startswith("Paths not equal")


class TestCheckError:
    """Tests for check_error function."""

    def test_accepts_expected_error(self) -> None:
        """Returns None when the expected error is raised."""
        assert check_error(raise_key_error, LookupError) is None

    def test_reports_other_error(self) -> None:
        """Reports an error of the wrong type with its details."""
        failure = check_error(raise_key_error, ValueError)

        assert failure is not None
        assert failure.message == "Expected error ValueError but got KeyError"
        assert failure.causes == ("KeyError: 'k'",)

    def test_reports_missing_error(self) -> None:
        """Reports a call that did not raise."""
        failure = check_error(lambda: None, ValueError)

        assert failure is not None
        assert failure.message == "Expected error ValueError but got no error"


class TestCheckAnyError:
    """Tests for check_any_error function."""

    def test_accepts_any_error(self) -> None:
        """Returns None for an ordinary error."""
        assert check_any_error(raise_key_error) is None

    def test_rejects_assertion_error(self) -> None:
        """Does not accept an assertion failure as the expected error."""
        failure = check_any_error(raise_assertion)

        assert failure is not None
        assert failure.message == "Expected error but got AssertionError"

    def test_reports_missing_error(self) -> None:
        """Reports a call that did not raise."""
        failure = check_any_error(lambda: None)

        assert failure is not None
        assert failure.message == "Expected error but got no error"


def test_first_failure() -> None:
    """Returns the first failure, or None when everything passed."""
    first = DomainFailure(message="first")
    second = DomainFailure(message="second")

    assert first_failure(None, first, second) is first
    assert first_failure(None, None) is None
    assert first_failure() is None
