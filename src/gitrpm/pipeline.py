"""Staged packaging pipeline: resolve, stage, build, collect.

Every stage is fatal on failure. Explicit inputs are validated before the
first subprocess runs, and an implicitly allocated workspace is removed on
every exit path.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gitrpm.branch import resolve_branch
from gitrpm.build import build_packages
from gitrpm.collect import collect_artifacts
from gitrpm.config import Settings, settings_from_env
from gitrpm.disttag import synthesize_dist_tag
from gitrpm.errors import InputError
from gitrpm.identity import resolve_name, resolve_version
from gitrpm.models import BuildRequest, PackageResult
from gitrpm.observability import StructuredLogger
from gitrpm.process import CommandRunner, SubprocessRunner
from gitrpm.repository import GitRepository
from gitrpm.workspace import prepare_workspace, workspace_scope

STAGES = ("identity", "branch", "dist", "workspace", "build", "collect")


@dataclass(frozen=True, slots=True)
class PackageOptions:
    spec_path: Path
    name: str | None = None
    dist: str | None = None
    branch: str | None = None
    work_dir: Path | None = None
    macros: Mapping[str, str] = field(default_factory=dict)
    quiet: bool = False


def package(
    options: PackageOptions,
    *,
    runner: CommandRunner | None = None,
    settings: Settings | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    clock: Callable[[], float] = time.time,
    logger: StructuredLogger | None = None,
) -> PackageResult:
    logger = logger if logger is not None else StructuredLogger()
    settings = settings if settings is not None else settings_from_env(environ)
    runner = runner if runner is not None else SubprocessRunner(logger=logger)
    caller_dir = Path.cwd() if cwd is None else Path(cwd)

    spec_path = Path(options.spec_path)
    if not spec_path.is_file():
        raise InputError(
            "Spec file does not exist.",
            hint="Pass the path of an existing .spec file.",
            context={"operation": "package", "path": str(spec_path)},
        )
    if options.name is not None and not options.name:
        raise InputError(
            "Package name must not be empty.",
            hint="Pass a non-empty --name or omit it to use the remote URL.",
            context={"operation": "package"},
        )
    if options.dist is not None and not options.dist:
        raise InputError(
            "Dist tag must not be empty.",
            hint="Pass a non-empty --dist, or --no-dist to omit the dist macro.",
            context={"operation": "package"},
        )

    repository = GitRepository(runner=runner, git=settings.git, root=caller_dir)

    _started(logger, "identity")
    version = resolve_version(spec_path)
    name = resolve_name(options.name, repository)
    _finished(logger, "identity", f"Resolved {name} {version}", name=name, version=version)

    _started(logger, "branch")
    ref = resolve_branch(
        options.branch,
        repository,
        environ=environ,
        env_var=settings.branch_env_var,
    )
    _finished(logger, "branch", f"Resolved ref {ref}", ref=ref)

    dist_tag: str | None = None
    if options.dist is not None or settings.dist_tag:
        _started(logger, "dist")
        dist_tag = synthesize_dist_tag(
            options.dist,
            ref,
            runner=runner,
            settings=settings,
            clock=clock,
        )
        _finished(logger, "dist", f"Dist tag {dist_tag}", dist=dist_tag)

    with workspace_scope(options.work_dir, settings) as ws:
        request = BuildRequest(
            package_name=name,
            ref=ref,
            version=version,
            spec_path=spec_path,
            work_dir=ws.root,
            dist_tag=dist_tag,
            macros=options.macros,
            quiet=options.quiet,
        )

        _started(logger, "workspace", root=str(ws.root))
        spec_dest = prepare_workspace(
            ws,
            name=request.package_name,
            version=request.version,
            spec_path=request.spec_path,
            ref=request.ref,
            repository=repository,
        )
        _finished(
            logger,
            "workspace",
            f"Staged {spec_dest.name} and {request.source_stem} sources",
            root=str(ws.root),
        )

        _started(logger, "build")
        build_packages(
            ws,
            spec_dest,
            name=request.package_name,
            dist_tag=request.dist_tag,
            macros=request.macros,
            quiet=request.quiet,
            runner=runner,
            settings=settings,
        )
        _finished(logger, "build", "rpmbuild finished")

        _started(logger, "collect")
        artifacts: list[Path] = []
        for output_root in ws.output_dirs:
            artifacts.extend(
                collect_artifacts(
                    output_root,
                    caller_dir,
                    suffix=settings.artifact_suffix,
                    quiet=request.quiet,
                    logger=logger,
                )
            )
        _finished(logger, "collect", f"Collected {len(artifacts)} package(s)", count=len(artifacts))
        return PackageResult(request=request, workspace=ws, artifacts=artifacts)


def _started(logger: StructuredLogger, stage: str, **extra: Any) -> None:
    logger.log(
        operation="package",
        stage=stage,
        message=f"Starting {stage}",
        extra={"event": "start", **extra},
    )


def _finished(logger: StructuredLogger, stage: str, message: str, **extra: Any) -> None:
    logger.log(
        operation="package",
        stage=stage,
        message=message,
        extra={"event": "finish", **extra},
    )


__all__ = ["PackageOptions", "STAGES", "package"]
