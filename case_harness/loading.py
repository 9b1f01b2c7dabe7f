"""Loading of test programs from entry points or module references."""

import importlib
from importlib.metadata import entry_points

from case_harness.errors import ProgramNotFoundError
from case_harness.models.descriptor import TestProgram

ENTRY_POINT_GROUP = "case_harness.programs"
DEFAULT_ATTRIBUTE = "PROGRAM"


def load_test_program(reference: str) -> TestProgram:
    """Load a test program by entry point name or ``module[:attribute]``.

    Args:
        reference: Entry point name registered under ``case_harness.programs``,
            or an importable module path; the attribute defaults to ``PROGRAM``

    Returns:
        The test program

    Raises:
        ProgramNotFoundError: If nothing usable is found for REFERENCE

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)
    for entry in entries:
        if entry.name == reference:
            return _check_program(reference, entry.load())

    module_name, _, attribute = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        available = [e.name for e in entries]
        raise ProgramNotFoundError(
            f"Test program '{reference}' not found: {exc}. "
            f"Available programs: {available}"
        ) from exc

    try:
        program = getattr(module, attribute or DEFAULT_ATTRIBUTE)
    except AttributeError as exc:
        raise ProgramNotFoundError(
            f"Module '{module_name}' has no attribute "
            f"'{attribute or DEFAULT_ATTRIBUTE}'"
        ) from exc
    return _check_program(reference, program)


def _check_program(reference: str, program: object) -> TestProgram:
    if not isinstance(program, TestProgram):
        raise ProgramNotFoundError(
            f"'{reference}' is a {type(program).__name__}, not a TestProgram"
        )
    return program
