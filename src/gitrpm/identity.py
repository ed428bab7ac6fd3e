"""Package name and version discovery."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from gitrpm.errors import IdentityError, InputError
from gitrpm.repository import Remote, RepositoryInspector

VERSION_PATTERN = re.compile(r"^version:\s*(\S+)", re.IGNORECASE)
REMOTE_NAME_PATTERN = re.compile(r"([^/:\s]+)\.git/?$")
PREFERRED_REMOTE = "origin"


def resolve_name(explicit: str | None, inspector: RepositoryInspector) -> str:
    """Return the explicit name, or derive it from the origin remote URL."""
    if explicit is not None:
        if not explicit:
            raise InputError(
                "Package name must not be empty.",
                hint="Pass a non-empty --name or omit it to use the remote URL.",
                context={"operation": "resolve_name"},
            )
        return explicit

    remote = _pick_remote(inspector.remotes())
    match = REMOTE_NAME_PATTERN.search(remote.url) if remote is not None else None
    if match is None:
        raise IdentityError(
            "Unable to derive the package name from the git remote.",
            hint="Use --name to specify the package name.",
            context={
                "operation": "resolve_name",
                "remote": remote.name if remote is not None else "",
                "url": remote.url if remote is not None else "",
            },
        )
    return match.group(1)


def _pick_remote(remotes: Sequence[Remote]) -> Remote | None:
    for remote in remotes:
        if remote.name == PREFERRED_REMOTE:
            return remote
    return remotes[0] if remotes else None


def resolve_version(spec_path: str | Path) -> str:
    """Return the first ``Version:`` value of the spec file."""
    path = Path(spec_path)
    try:
        with path.open(encoding="utf-8", errors="replace") as handle:
            for line in handle:
                match = VERSION_PATTERN.match(line)
                if match is not None:
                    return match.group(1)
    except OSError as exc:
        raise IdentityError(
            "Unable to read the spec file.",
            hint="Check the spec path and its permissions.",
            context={"operation": "resolve_version", "path": str(path), "error": str(exc)},
        ) from exc
    raise IdentityError(
        "The spec file has no Version: field.",
        hint="Add a `Version:` line to the spec file.",
        context={"operation": "resolve_version", "path": str(path)},
    )


__all__ = ["resolve_name", "resolve_version"]
