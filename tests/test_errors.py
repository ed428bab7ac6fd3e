from gitrpm.errors import (
    BranchDetectionError,
    BuildError,
    CollectError,
    ErrorCode,
    ExternalToolError,
    IdentityError,
    InputError,
    WorkspaceError,
)


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        InputError("bad input"),
        IdentityError("no name"),
        BranchDetectionError("no branch"),
        ExternalToolError("tool failed", command=["git", "status"], exit_code=1),
        WorkspaceError("no space"),
        BuildError("rpmbuild failed"),
        CollectError("move failed"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.INPUT.value,
        ErrorCode.IDENTITY.value,
        ErrorCode.BRANCH_DETECTION.value,
        ErrorCode.EXTERNAL_TOOL.value,
        ErrorCode.WORKSPACE.value,
        ErrorCode.BUILD.value,
        ErrorCode.COLLECT.value,
    ]


def test_external_tool_error_carries_command_and_status() -> None:
    error = ExternalToolError(
        "`git` exited with status 128.",
        command=["git", "remote", "-v"],
        exit_code=128,
        context={"stderr": "not a git repository"},
    )

    assert error.command == ("git", "remote", "-v")
    assert error.exit_code == 128
    assert error.context["command"] == "git remote -v"
    assert error.context["returncode"] == "128"
    assert error.context["stderr"] == "not a git repository"


def test_one_line_includes_hint_without_context() -> None:
    error = IdentityError(
        "Unable to derive the package name from the git remote.",
        hint="Use --name to specify the package name.",
        context={"url": "https://example.com/x"},
    )

    line = error.one_line()
    assert "\n" not in line
    assert line.endswith("(Use --name to specify the package name.)")
    assert "https://example.com/x" in str(error)


def test_to_dict_is_serializable_payload() -> None:
    payload = InputError("Spec file does not exist.", hint="Pass a path.").to_dict()

    assert payload == {
        "code": "E_INPUT",
        "message": "Spec file does not exist.",
        "context": {},
        "hint": "Pass a path.",
    }
