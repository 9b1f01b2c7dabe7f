"""Run configuration shared by every test in a program run."""

import logging
from pathlib import Path

from pydantic import Field

from case_harness.models.base import Model

log = logging.getLogger(__name__)


class RunConfiguration(Model):
    """Process-wide parameters, read-only while tests are running."""

    prog_name: str = Field(..., description="Name of the test program")
    fs_type: str | None = Field(
        default=None, description="Filesystem backend the tests should use"
    )
    config_file: Path | None = Field(
        default=None, description="Configuration file handed to the backend"
    )
    srcdir: Path | None = Field(
        default=None, description="Source directory holding test data"
    )
    repos_dir: Path | None = Field(
        default=None, description="Directory to create repositories in"
    )
    repos_url: str | None = Field(
        default=None, description="URL under which repos_dir is reachable"
    )
    repos_template: Path | None = Field(
        default=None, description="Pre-created repository to copy for tests"
    )
    server_minor_version: int = Field(
        default=0, ge=0, description="Server minor version (0 means latest)"
    )
    verbose: bool = False
    quiet: bool = False
    cleanup: bool = Field(
        default=False, description="Remove registered paths of passing tests"
    )
    data_dir: Path = Field(
        default=Path("test-work"), description="Transient data area for tests"
    )

    def get_srcdir(self) -> Path:
        """Return the source directory, assuming the cwd when unset."""
        if self.srcdir is None:
            log.warning(
                "%s: no --srcdir given, assuming the current directory",
                self.prog_name,
            )
            return Path.cwd()
        return self.srcdir

    def data_path(self, basename: str) -> Path:
        """Return a path to BASENAME within this program's transient data area."""
        return self.data_dir / self.prog_name / basename
