"""Removal of directories created by tests."""

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import Self

log = logging.getLogger(__name__)


class CleanupRegistry:
    """Collects paths during a run and removes them when released.

    Used as a context manager around the run so that registered paths are
    released even when scheduling aborts. With ``enabled=False`` the paths
    are kept on disk.
    """

    def __init__(self, *, enabled: bool) -> None:
        self.enabled = enabled
        self._paths: list[Path] = []

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(self._paths)

    def add(self, path: Path) -> None:
        self._paths.append(path)

    def extend(self, paths: Iterable[Path]) -> None:
        self._paths.extend(paths)

    def release(self) -> None:
        """Remove every registered path, most recently added first."""
        paths, self._paths = self._paths, []
        if not self.enabled:
            if paths:
                log.debug("Keeping %d test path(s), cleanup disabled", len(paths))
            return

        for path in reversed(paths):
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink(missing_ok=True)
            except OSError as exc:
                log.warning("Could not remove %s: %s", path, exc)
            else:
                log.debug("Removed %s", path)
