"""Tiered discovery of the ref to package.

Resolution degrades from exact to approximate: an explicit or environment
override, then the checked-out branch, then any local branch containing
HEAD, then the best remote-tracking branch containing HEAD.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence

from gitrpm.config import BRANCH_ENV_VAR
from gitrpm.errors import BranchDetectionError
from gitrpm.repository import BranchRef, RepositoryInspector

REMOTES_PREFIX = "remotes/"
PREFERRED_REMOTE = "origin"
PREFERRED_BRANCH = "master"

_HINT = f"Pass --branch explicitly or set {BRANCH_ENV_VAR}."


def resolve_branch(
    explicit: str | None,
    inspector: RepositoryInspector,
    *,
    environ: Mapping[str, str] | None = None,
    env_var: str = BRANCH_ENV_VAR,
) -> str:
    if explicit:
        return explicit
    env = os.environ if environ is None else environ
    override = env.get(env_var)
    if override:
        return override

    refs = inspector.branches_containing_head()
    if not refs:
        raise BranchDetectionError(
            "No branch contains the current checkout.",
            hint=_HINT,
            context={"operation": "resolve_branch"},
        )

    for ref in refs:
        if ref.current and not ref.detached:
            return ref.name

    for ref in refs:
        if not ref.current and not ref.remote:
            return ref.name

    chosen = _pick_remote(refs)
    if chosen is not None:
        return _strip_remote(chosen.name)

    raise BranchDetectionError(
        "Unable to determine the current branch.",
        hint=_HINT,
        context={
            "operation": "resolve_branch",
            "candidates": ", ".join(ref.name for ref in refs),
        },
    )


def _pick_remote(refs: Sequence[BranchRef]) -> BranchRef | None:
    candidates = [ref for ref in refs if ref.remote and not ref.current and not ref.alias]
    if not candidates:
        return None
    for ref in candidates:
        if _remote_parts(ref.name) == (PREFERRED_REMOTE, PREFERRED_BRANCH):
            return ref
    for ref in candidates:
        if _remote_parts(ref.name)[1] == PREFERRED_BRANCH:
            return ref
    return candidates[0]


def _remote_parts(name: str) -> tuple[str, str]:
    if name.startswith(REMOTES_PREFIX):
        name = name[len(REMOTES_PREFIX) :]
    remote, _, branch = name.partition("/")
    return remote, branch


def _strip_remote(name: str) -> str:
    # keep the remote qualifier so archival reads the remote-tracking ref
    if name.startswith(REMOTES_PREFIX):
        return name[len(REMOTES_PREFIX) :]
    return name.rsplit("/", 1)[-1]


__all__ = ["resolve_branch"]
