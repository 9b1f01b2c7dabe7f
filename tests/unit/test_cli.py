"""Tests for CLI module."""

import sys
from unittest.mock import AsyncMock, Mock, patch

import pytest

from case_harness.cli import (
    HARNESS_FAULT_EXIT_CODE,
    build_parser,
    effective_concurrency,
    make_config,
    parse_test_numbers,
    run,
    run_main,
)
from case_harness.errors import HarnessError, ProgramNotFoundError
from case_harness.models.descriptor import TestProgram, passing, xfail
from case_harness.models.result import DomainFailure
from case_harness.testing.factories import RunConfigurationFactory


def succeed(scope: object) -> None:
    """Do nothing."""


def fail_domain(scope: object) -> DomainFailure:
    return DomainFailure(message="x")


def exit_cleanly(scope: object) -> None:
    sys.exit(0)


@pytest.fixture
def program() -> TestProgram:
    """Create a small passing program."""
    return TestProgram(
        name="sample-test",
        tests=[passing(succeed, "works"), xfail(fail_domain, "known bug")],
        max_concurrency=4,
    )


class TestParseTestNumbers:
    """Tests for parse_test_numbers function."""

    def test_returns_none_when_empty(self) -> None:
        """Selects everything when no numbers are given."""
        assert parse_test_numbers([]) is None

    def test_parses_numbers_and_ranges(self) -> None:
        """Expands inclusive ranges."""
        assert parse_test_numbers(["1", "4:6", "5"]) == {1, 4, 5, 6}

    @pytest.mark.parametrize("value", ["x", "3:", "5:2", "1:b"])
    def test_rejects_invalid_values(self, value: str) -> None:
        """Rejects values that are not numbers or ranges."""
        with pytest.raises(ValueError, match="Invalid test"):
            parse_test_numbers([value])


class TestEffectiveConcurrency:
    """Tests for effective_concurrency function."""

    def test_serial_by_default(self, program: TestProgram) -> None:
        """Runs serially without --parallel."""
        args = build_parser().parse_args([])

        assert effective_concurrency(args, program) == 1

    def test_parallel_uses_program_limit(self, program: TestProgram) -> None:
        """Uses the program's limit with --parallel."""
        args = build_parser().parse_args(["--parallel"])

        assert effective_concurrency(args, program) == 4

    def test_explicit_limit_wins(self, program: TestProgram) -> None:
        """Uses --max-concurrency over everything else."""
        args = build_parser().parse_args(["--parallel", "--max-concurrency", "0"])

        assert effective_concurrency(args, program) == 0


def test_make_config_maps_options() -> None:
    """Builds the run configuration from options."""
    args = build_parser().parse_args(
        [
            "--fs-type",
            "bdb",
            "--srcdir",
            "/src",
            "--server-minor-version",
            "8",
            "--cleanup",
            "-v",
        ]
    )

    config = make_config(args, "fs-test")

    assert config.prog_name == "fs-test"
    assert config.fs_type == "bdb"
    assert str(config.srcdir) == "/src"
    assert config.server_minor_version == 8
    assert config.cleanup is True
    assert config.verbose is True
    assert config.quiet is False


def test_verbose_and_quiet_are_exclusive() -> None:
    """Refuses --verbose together with --quiet."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-v", "-q"])


class TestRun:
    """Tests for run function."""

    async def test_returns_zero_when_expectations_hold(
        self, program: TestProgram, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Returns 0 when tests pass or fail as expected."""
        exit_code = await run(program, RunConfigurationFactory.build())

        assert exit_code == 0
        assert capsys.readouterr().out.splitlines()[:2] == [
            "PASS:  sample-test 1: works",
            "XFAIL: sample-test 2: known bug",
        ]

    async def test_returns_one_on_unexpected_pass(self) -> None:
        """Returns 1 when an XFAIL test passes."""
        program = TestProgram(name="p", tests=[xfail(succeed, "stale")])

        assert await run(program, RunConfigurationFactory.build()) == 1

    async def test_passes_options_to_scheduler(self, program: TestProgram) -> None:
        """Creates the scheduler with the requested options."""
        with (
            patch("case_harness.cli.TestScheduler") as mock_scheduler_cls,
            patch("case_harness.cli.report", return_value=0) as mock_report,
        ):
            mock_scheduler = Mock()
            mock_scheduler.run = AsyncMock(return_value="summary")
            mock_scheduler_cls.return_value = mock_scheduler
            config = RunConfigurationFactory.build()

            exit_code = await run(
                program,
                config,
                max_concurrency=3,
                selected={2},
                mode_filter="xfail",
                json_output=True,
            )

        assert exit_code == 0
        mock_scheduler_cls.assert_called_once_with(
            config=config, max_concurrency=3, mode_filter="xfail"
        )
        mock_scheduler.run.assert_called_once_with(program.tests, {2})
        mock_report.assert_called_once_with("summary", json_output=True)


class TestRunMain:
    """Tests for run_main function."""

    def test_runs_program(
        self, program: TestProgram, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Runs the program and returns its exit code."""
        assert run_main(program, ["--parallel"]) == 0
        assert "XFAIL: sample-test 2: known bug" in capsys.readouterr().out

    def test_runs_selected_tests(
        self, program: TestProgram, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Runs only the given test numbers."""
        assert run_main(program, ["2"]) == 0
        assert capsys.readouterr().out.splitlines()[:2] == [
            "SKIP:  sample-test 1: works",
            "XFAIL: sample-test 2: known bug",
        ]

    def test_quiet_run_still_prints_summary(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Keeps the counts and failures on stdout with --quiet."""
        program = TestProgram(name="q", tests=[passing(fail_domain, "fails")])

        assert run_main(program, ["-q"]) == 1

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "FAIL:  q 1: fails"
        assert "Test Results Summary: q" in lines
        assert "FAIL   1" in lines
        assert "  failed: 1 fails (FAIL)" in lines

    def test_exiting_body_fails_run(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Reports every test and fails the run when a body calls sys.exit."""
        program = TestProgram(
            name="e",
            tests=[passing(fail_domain, "fails"), passing(exit_cleanly, "exits")],
        )

        assert run_main(program, []) == 1

        lines = capsys.readouterr().out.splitlines()
        assert lines[:2] == ["FAIL:  e 1: fails", "FAIL:  e 2: exits"]

    def test_lists_tests(
        self, program: TestProgram, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Lists tests without running them."""
        assert run_main(program, ["--list"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[2] == "    1           works"
        assert lines[3] == "    2    XFAIL  known bug"

    def test_out_of_range_number_is_harness_fault(self, program: TestProgram) -> None:
        """Returns the harness fault exit code for unknown test numbers."""
        assert run_main(program, ["7"]) == HARNESS_FAULT_EXIT_CODE

    def test_harness_error_is_reported(self, program: TestProgram) -> None:
        """Returns the harness fault exit code when scheduling aborts."""
        with patch("case_harness.cli.asyncio.run", side_effect=HarnessError("boom")):
            assert run_main(program, []) == HARNESS_FAULT_EXIT_CODE

    def test_invalid_number_is_usage_error(self, program: TestProgram) -> None:
        """Exits with a usage error for malformed test numbers."""
        with pytest.raises(SystemExit) as exc_info:
            run_main(program, ["two"])

        assert exc_info.value.code == 2

    def test_invalid_config_is_usage_error(self, program: TestProgram) -> None:
        """Exits with a usage error when the configuration is invalid."""
        with pytest.raises(SystemExit) as exc_info:
            run_main(program, ["--server-minor-version", "-1"])

        assert exc_info.value.code == 2


class TestMain:
    """Tests for main CLI entry point."""

    def test_exits_with_run_result(self, program: TestProgram) -> None:
        """Main function exits with the result of the run."""
        from case_harness.cli import main

        with (
            patch("sys.argv", ["case-harness", "sample", "--quiet"]),
            patch("case_harness.cli.load_test_program", return_value=program),
            patch("case_harness.cli.asyncio.run", return_value=1) as mock_run,
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 1
        mock_run.assert_called_once()

    def test_exits_when_program_missing(self) -> None:
        """Main function exits with the harness fault code for unknown programs."""
        from case_harness.cli import main

        with (
            patch("sys.argv", ["case-harness", "nowhere"]),
            patch(
                "case_harness.cli.load_test_program",
                side_effect=ProgramNotFoundError("not found"),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == HARNESS_FAULT_EXIT_CODE
