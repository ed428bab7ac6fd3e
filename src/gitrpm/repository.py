"""Typed views over git's textual branch, remote, and tree listings.

All parsing of free-form ``git`` output lives here so branch and identity
resolution can be exercised against synthetic listings.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitrpm.process import CommandRunner

CURRENT_MARKER = "* "
WORKTREE_MARKER = "+ "
ALIAS_ARROW = " -> "
GITLINK_MODE = "160000"


@dataclass(frozen=True, slots=True)
class BranchRef:
    name: str
    current: bool = False
    alias: bool = False

    @property
    def remote(self) -> bool:
        return "/" in self.name

    @property
    def detached(self) -> bool:
        # git renders "(no branch)" or "(HEAD detached at <rev>)" for the marker line
        return self.current and self.name.startswith("(")


@dataclass(frozen=True, slots=True)
class Remote:
    name: str
    url: str


@dataclass(frozen=True, slots=True)
class Gitlink:
    path: str
    commit: str


class RepositoryInspector(Protocol):
    def branches_containing_head(self) -> Sequence[BranchRef]:
        """Local and remote-tracking branches whose history contains HEAD."""

    def remotes(self) -> Sequence[Remote]:
        """Configured remotes in listing order."""


def parse_branch_listing(lines: Iterable[str]) -> tuple[BranchRef, ...]:
    refs: list[BranchRef] = []
    for line in lines:
        if not line.strip():
            continue
        current = line.startswith(CURRENT_MARKER)
        if current or line.startswith(WORKTREE_MARKER):
            name = line[len(CURRENT_MARKER) :].strip()
        else:
            name = line.strip()
        refs.append(BranchRef(name=name, current=current, alias=ALIAS_ARROW in name))
    return tuple(refs)


def parse_remote_listing(lines: Iterable[str]) -> tuple[Remote, ...]:
    remotes: list[Remote] = []
    for line in lines:
        fields = line.split()
        if not fields:
            continue
        url = fields[1] if len(fields) > 1 else ""
        remotes.append(Remote(name=fields[0], url=url))
    return tuple(remotes)


def parse_gitlinks(output: str) -> tuple[Gitlink, ...]:
    """Parse NUL-terminated ``git ls-tree -r -z`` records."""
    links: list[Gitlink] = []
    for record in output.split("\0"):
        meta, _, path = record.partition("\t")
        fields = meta.split()
        if len(fields) == 3 and fields[0] == GITLINK_MODE:
            links.append(Gitlink(path=path, commit=fields[2]))
    return tuple(links)


@dataclass(slots=True)
class GitRepository:
    runner: CommandRunner
    git: str = "git"
    root: Path | None = None

    def branches_containing_head(self) -> tuple[BranchRef, ...]:
        return parse_branch_listing(
            self.runner.run(self.git, "branch", "-a", "--contains", "HEAD", cwd=self.root)
        )

    def remotes(self) -> tuple[Remote, ...]:
        return parse_remote_listing(self.runner.run(self.git, "remote", "-v", cwd=self.root))

    def gitlinks(self, ref: str) -> tuple[Gitlink, ...]:
        # -z keeps paths unquoted; a path may itself contain line breaks
        lines = self.runner.run(self.git, "ls-tree", "-r", "-z", ref, cwd=self.root)
        return parse_gitlinks("\n".join(lines))

    def archive(self, ref: str, *, prefix: str, output: Path) -> None:
        self.runner.run(
            self.git,
            "archive",
            "--format=tar",
            f"--prefix={prefix}",
            f"--output={output}",
            ref,
            cwd=self.root,
        )

    def submodule(self, path: str) -> GitRepository:
        base = self.root if self.root is not None else Path.cwd()
        return GitRepository(runner=self.runner, git=self.git, root=base / path)


__all__ = [
    "BranchRef",
    "GitRepository",
    "Gitlink",
    "Remote",
    "RepositoryInspector",
    "parse_branch_listing",
    "parse_gitlinks",
    "parse_remote_listing",
]
