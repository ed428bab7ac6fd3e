"""Synchronous external command execution."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitrpm.errors import ExternalToolError
from gitrpm.observability import StructuredLogger

MISSING_EXECUTABLE_STATUS = 127


class CommandRunner(Protocol):
    def run(self, cmd: str, *args: str, cwd: Path | None = None) -> list[str]:
        """Run *cmd*, capture stdout, and return it as lines."""

    def run_silent(self, cmd: str, *args: str, cwd: Path | None = None) -> None:
        """Run *cmd* with its output passed through to the terminal."""


@dataclass(slots=True)
class SubprocessRunner:
    logger: StructuredLogger | None = None

    def run(self, cmd: str, *args: str, cwd: Path | None = None) -> list[str]:
        command = [cmd, *args]
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                check=False,
                text=True,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            raise _missing_executable(command) from exc
        self._record(command, completed.returncode)
        if completed.returncode != 0:
            raise ExternalToolError(
                f"`{cmd}` exited with status {completed.returncode}.",
                command=command,
                exit_code=completed.returncode,
                hint="Run the command by hand to see its full output.",
                context={"stderr": completed.stderr.strip()[:2000] if completed.stderr else ""},
            )
        return completed.stdout.splitlines()

    def run_silent(self, cmd: str, *args: str, cwd: Path | None = None) -> None:
        command = [cmd, *args]
        try:
            completed = subprocess.run(command, cwd=cwd, check=False)
        except FileNotFoundError as exc:
            raise _missing_executable(command) from exc
        self._record(command, completed.returncode)
        if completed.returncode != 0:
            raise ExternalToolError(
                f"`{cmd}` exited with status {completed.returncode}.",
                command=command,
                exit_code=completed.returncode,
                hint="See the tool's output above.",
            )

    def _record(self, command: list[str], returncode: int) -> None:
        if self.logger is None:
            return
        self.logger.log(
            operation="run",
            stage=None,
            message=" ".join(command),
            level="info" if returncode == 0 else "error",
            extra={"returncode": returncode},
        )


def _missing_executable(command: list[str]) -> ExternalToolError:
    return ExternalToolError(
        f"`{command[0]}` was not found.",
        command=command,
        exit_code=MISSING_EXECUTABLE_STATUS,
        hint="Install the tool or point gitrpm at it with the matching path override.",
    )


__all__ = ["CommandRunner", "MISSING_EXECUTABLE_STATUS", "SubprocessRunner"]
