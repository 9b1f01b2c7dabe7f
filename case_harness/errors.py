"""Exception hierarchy shared by the harness and test bodies."""


class HarnessError(Exception):
    """Raised when the scheduling machinery itself cannot proceed."""


class ConfigurationError(Exception):
    """Raised when a single test descriptor cannot be resolved or run."""


class ProgramNotFoundError(HarnessError):
    """Raised when a test program reference cannot be loaded."""


class TestFailedError(Exception):
    """Raised by a test body to report a domain failure."""

    __test__ = False


class SkipTestError(Exception):
    """Raised by a test body that cannot run in the current configuration."""

    __test__ = False
