"""Per-test handle passed to every test body."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from case_harness.models.config import RunConfiguration


@dataclass(kw_only=True)
class TestScope:
    """State owned by a single running test.

    A scope is created by the scheduler right before the body runs and is
    only touched by the worker running that body.
    """

    __test__ = False

    number: int
    config: RunConfiguration
    _cleanup_paths: list[Path] = field(default_factory=list, init=False, repr=False)

    def add_cleanup(self, path: Path | str) -> None:
        """Register PATH for removal once the run is over (with --cleanup)."""
        self._cleanup_paths.append(Path(path))

    @property
    def cleanup_paths(self) -> Sequence[Path]:
        return tuple(self._cleanup_paths)

    def data_path(self, basename: str) -> Path:
        """Return a path to BASENAME in the program's transient data area."""
        return self.config.data_path(basename)
