"""rpmbuild invocation against a populated workspace."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from gitrpm.config import Settings
from gitrpm.errors import BuildError, ExternalToolError
from gitrpm.models import Workspace
from gitrpm.process import CommandRunner


def rpmbuild_args(
    ws: Workspace,
    spec_dest: Path,
    *,
    name: str,
    dist_tag: str | None,
    macros: Mapping[str, str],
    quiet: bool,
) -> list[str]:
    """Arguments for ``rpmbuild -ba``.

    Caller macros follow the built-in ones, so a duplicate key resolves to
    the caller's definition: rpmbuild keeps the last ``--define`` per name.
    """
    args = ["-ba"]
    if quiet:
        args.append("--quiet")
    defines = [("_topdir", str(ws.root)), ("name", name)]
    if dist_tag:
        defines.append(("dist", dist_tag))
    defines.extend(macros.items())
    for key, value in defines:
        args.extend(["--define", f"{key} {value}"])
    args.append(str(spec_dest))
    return args


def build_packages(
    ws: Workspace,
    spec_dest: Path,
    *,
    name: str,
    dist_tag: str | None,
    macros: Mapping[str, str],
    quiet: bool,
    runner: CommandRunner,
    settings: Settings,
) -> None:
    args = rpmbuild_args(ws, spec_dest, name=name, dist_tag=dist_tag, macros=macros, quiet=quiet)
    try:
        runner.run_silent(settings.rpmbuild, *args)
    except ExternalToolError as exc:
        raise BuildError(
            "rpmbuild failed.",
            hint="Check the rpmbuild output above for details.",
            context={
                "operation": "build_packages",
                "spec": str(spec_dest),
                "returncode": str(exc.exit_code),
                "command": " ".join(exc.command),
            },
        ) from exc


__all__ = ["build_packages", "rpmbuild_args"]
