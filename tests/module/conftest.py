"""Fixtures for end-to-end tests of complete test programs."""

import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

SAMPLE_PROGRAM = '''
from pathlib import Path

from case_harness.assertions import check, check_strings, first_failure
from case_harness.auth import init_auth_context
from case_harness.errors import SkipTestError
from case_harness.fixtures import GREEK_TREE, write_tree
from case_harness.models.descriptor import (
    TestProgram,
    passing,
    skip,
    wip,
    with_config,
    xfail,
)
from case_harness.models.result import DomainFailure
from case_harness.predicates import pass_if_fs_type_is
from case_harness.rand import rand


def greek_tree_checkout(scope):
    root = write_tree(scope.data_path(f"wc-{scope.number}"))
    scope.add_cleanup(root)
    return first_failure(
        check_strings((root / "iota").read_text(), GREEK_TREE[0].contents),
        check((root / "A" / "D" / "H").is_dir(), "A/D/H is a directory"),
    )


def reproducible_fuzz(scope):
    seed = 42
    values = []
    for _ in range(5):
        value, seed = rand(seed)
        values.append(value)
    return check(len(set(values)) == 5, "five distinct values")


def auth_is_opaque(scope):
    return check(init_auth_context(scope).username == "jrandom", "default user")


def unfinished_merge(scope):
    return DomainFailure(message="merge tracking not implemented")


async def fsfs_only(config, scope):
    if config.fs_type != "fsfs":
        return DomainFailure(message=f"unsupported backend {config.fs_type}")
    return None


def needs_server(scope):
    raise SkipTestError("no server available")


def never_runs(scope):
    raise RuntimeError("skipped tests must not run")


PROGRAM = TestProgram(
    name="sample-test",
    max_concurrency=3,
    tests=[
        passing(greek_tree_checkout, "check out the greek tree"),
        passing(reproducible_fuzz, "fuzz with a fixed seed"),
        passing(auth_is_opaque, "create an auth context"),
        wip(unfinished_merge, "merge a branch", "merge tracking"),
        xfail(
            with_config(fsfs_only),
            "backend specific behaviour",
            predicate=pass_if_fs_type_is("fsfs"),
        ),
        passing(needs_server, "talk to a server"),
        skip(never_runs, "not on this platform"),
    ],
)
'''


@pytest.fixture
def write_program(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[[str, str], str]:
    """Write a test program module and make it importable."""
    monkeypatch.syspath_prepend(str(tmp_path))

    def write(module_name: str, source: str) -> str:
        monkeypatch.delitem(sys.modules, module_name, raising=False)
        (tmp_path / f"{module_name}.py").write_text(textwrap.dedent(source))
        return module_name

    return write


@pytest.fixture
def sample_program(write_program: Callable[[str, str], str]) -> str:
    """Module name of the sample program."""
    return write_program("sample_program_module", SAMPLE_PROGRAM)
