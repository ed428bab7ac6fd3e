"""rpmbuild workspace acquisition and population."""

from __future__ import annotations

import shutil
import tarfile
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from gitrpm.config import Settings
from gitrpm.errors import ExternalToolError, WorkspaceError
from gitrpm.models import Workspace
from gitrpm.repository import GitRepository

TEMP_PREFIX = "gitrpm-"

_WRITE_MODES = {
    "tar": "w",
    "tar.gz": "w:gz",
    "tgz": "w:gz",
    "tar.bz2": "w:bz2",
    "tar.xz": "w:xz",
}


@contextmanager
def workspace_scope(path: str | Path | None, settings: Settings | None = None) -> Iterator[Workspace]:
    """Yield a workspace; a temporary root is removed on every exit path."""
    settings = settings or Settings()
    if path is not None:
        root = Path(path)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceError(
                "Unable to create the workspace directory.",
                hint="Choose a writable --workdir.",
                context={"operation": "workspace_scope", "path": str(root), "error": str(exc)},
            ) from exc
        yield Workspace(root=root.resolve(), settings=settings)
        return

    root = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
    try:
        yield Workspace(root=root, settings=settings)
    finally:
        shutil.rmtree(root, ignore_errors=True)


def prepare_workspace(
    ws: Workspace,
    *,
    name: str,
    version: str,
    spec_path: Path,
    ref: str,
    repository: GitRepository,
) -> Path:
    """Copy the spec into SPECS and archive *ref* into SOURCES.

    Returns the path of the copied spec file.
    """
    spec_dest = ws.spec_dest(name)
    try:
        ws.specs_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(spec_path, spec_dest)
    except OSError as exc:
        raise WorkspaceError(
            "Unable to stage the spec file.",
            hint="Check that the workspace is writable.",
            context={
                "operation": "prepare_workspace",
                "source": str(spec_path),
                "dest": str(spec_dest),
                "error": str(exc),
            },
        ) from exc

    archive_dest = ws.archive_dest(name, version)
    try:
        ws.sources_dir.mkdir(parents=True, exist_ok=True)
        write_source_archive(
            repository,
            ref=ref,
            prefix=f"{name}-{version}/",
            dest=archive_dest,
            archive_ext=ws.settings.archive_ext,
        )
    except ExternalToolError as exc:
        raise WorkspaceError(
            "Unable to archive the source tree.",
            hint=f"Check that `{ref}` names a commit, branch, or tag in this repository.",
            context={
                "operation": "prepare_workspace",
                "ref": ref,
                "command": exc.context.get("command", ""),
                "stderr": exc.context.get("stderr", ""),
            },
        ) from exc
    except (OSError, tarfile.TarError) as exc:
        raise WorkspaceError(
            "Unable to write the source archive.",
            hint="Check that the workspace is writable.",
            context={"operation": "prepare_workspace", "dest": str(archive_dest), "error": str(exc)},
        ) from exc
    return spec_dest


def write_source_archive(
    repository: GitRepository,
    *,
    ref: str,
    prefix: str,
    dest: Path,
    archive_ext: str = "tar.gz",
) -> Path:
    """Archive *ref* and every nested submodule under *prefix* into *dest*."""
    mode = _WRITE_MODES.get(archive_ext)
    if mode is None:
        raise WorkspaceError(
            f"Unsupported archive extension `{archive_ext}`.",
            hint=f"Use one of: {', '.join(sorted(_WRITE_MODES))}.",
            context={"operation": "write_source_archive"},
        )
    with tempfile.TemporaryDirectory(prefix=".archive-", dir=dest.parent) as scratch:
        parts: list[Path] = []
        _archive_tree(repository, ref=ref, prefix=prefix, scratch=Path(scratch), parts=parts)
        with tarfile.open(dest, mode) as out:
            for part in parts:
                with tarfile.open(part) as src:
                    for member in src:
                        out.addfile(member, src.extractfile(member) if member.isfile() else None)
    return dest


def _archive_tree(
    repository: GitRepository,
    *,
    ref: str,
    prefix: str,
    scratch: Path,
    parts: list[Path],
) -> None:
    part = scratch / f"{len(parts)}.tar"
    repository.archive(ref, prefix=prefix, output=part)
    parts.append(part)
    for link in repository.gitlinks(ref):
        submodule = repository.submodule(link.path)
        if submodule.root is None or not (submodule.root / ".git").exists():
            raise WorkspaceError(
                f"Submodule `{link.path}` is not checked out.",
                hint="Run `git submodule update --init --recursive` first.",
                context={"operation": "write_source_archive", "path": link.path},
            )
        _archive_tree(
            submodule,
            ref=link.commit,
            prefix=f"{prefix}{link.path}/",
            scratch=scratch,
            parts=parts,
        )


__all__ = ["prepare_workspace", "workspace_scope", "write_source_archive"]
