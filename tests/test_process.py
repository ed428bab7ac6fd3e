import sys

import pytest

from gitrpm.errors import ExternalToolError
from gitrpm.observability import StructuredLogger
from gitrpm.process import MISSING_EXECUTABLE_STATUS, SubprocessRunner


def test_run_returns_stdout_lines() -> None:
    runner = SubprocessRunner()

    lines = runner.run(sys.executable, "-c", "print('one'); print('two')")

    assert lines == ["one", "two"]


def test_run_raises_with_exit_code_and_stderr() -> None:
    runner = SubprocessRunner()

    with pytest.raises(ExternalToolError) as excinfo:
        runner.run(sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)")

    assert excinfo.value.exit_code == 3
    assert excinfo.value.command[0] == sys.executable
    assert excinfo.value.context["stderr"] == "boom"
    assert excinfo.value.code == "E_EXTERNAL_TOOL"


def test_run_silent_raises_on_failure() -> None:
    runner = SubprocessRunner()

    runner.run_silent(sys.executable, "-c", "pass")
    with pytest.raises(ExternalToolError) as excinfo:
        runner.run_silent(sys.executable, "-c", "raise SystemExit(2)")

    assert excinfo.value.exit_code == 2


def test_missing_executable_is_reported_as_tool_error() -> None:
    runner = SubprocessRunner()

    with pytest.raises(ExternalToolError) as excinfo:
        runner.run("gitrpm-no-such-tool-xyz", "--version")

    assert excinfo.value.exit_code == MISSING_EXECUTABLE_STATUS
    assert excinfo.value.hint is not None


def test_invocations_are_recorded_in_structured_log() -> None:
    logger = StructuredLogger()
    runner = SubprocessRunner(logger=logger)

    runner.run(sys.executable, "-c", "pass")
    with pytest.raises(ExternalToolError):
        runner.run(sys.executable, "-c", "raise SystemExit(1)")

    assert [record["extra"]["returncode"] for record in logger.records] == [0, 1]
    assert [record["level"] for record in logger.records] == ["info", "error"]
