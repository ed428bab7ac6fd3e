"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers, one per pipeline stage."""

    INPUT = "E_INPUT"
    IDENTITY = "E_IDENTITY"
    BRANCH_DETECTION = "E_BRANCH_DETECTION"
    EXTERNAL_TOOL = "E_EXTERNAL_TOOL"
    WORKSPACE = "E_WORKSPACE"
    BUILD = "E_BUILD"
    COLLECT = "E_COLLECT"


class GitRpmError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for k, v in self.context.items():
            if v:
                parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def one_line(self) -> str:
        """Render the message and hint as a single diagnostic line."""
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class InputError(GitRpmError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INPUT, hint=hint, context=context)


class IdentityError(GitRpmError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.IDENTITY, hint=hint, context=context)


class BranchDetectionError(GitRpmError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.BRANCH_DETECTION, hint=hint, context=context)


class ExternalToolError(GitRpmError):
    """A subprocess exited non-zero; carries the command and its exit status."""

    command: tuple[str, ...]
    exit_code: int

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str],
        exit_code: int,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"command": " ".join(command), "returncode": str(exit_code)}
        merged.update(context or {})
        super().__init__(message, code=ErrorCode.EXTERNAL_TOOL, hint=hint, context=merged)
        self.command = tuple(command)
        self.exit_code = exit_code


class WorkspaceError(GitRpmError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.WORKSPACE, hint=hint, context=context)


class BuildError(GitRpmError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.BUILD, hint=hint, context=context)


class CollectError(GitRpmError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.COLLECT, hint=hint, context=context)


__all__ = [
    "BranchDetectionError",
    "BuildError",
    "CollectError",
    "ErrorCode",
    "ExternalToolError",
    "GitRpmError",
    "IdentityError",
    "InputError",
    "WorkspaceError",
]
