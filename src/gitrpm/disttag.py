"""Dist tag synthesis: ``<timestamp>[.<branch>]<platform dist>``."""

from __future__ import annotations

import re
import time
from collections.abc import Callable

from gitrpm.config import Settings
from gitrpm.process import CommandRunner

# rpm forbids hyphens and most punctuation in release fields
DISALLOWED_RUN = re.compile(r"[^A-Za-z0-9._+]+")
OMITTED_BRANCH = "master"


def sanitize_branch(branch: str) -> str:
    local = branch.rsplit("/", 1)[-1]
    return DISALLOWED_RUN.sub("_", local)


def platform_dist(runner: CommandRunner, settings: Settings) -> str:
    lines = runner.run(settings.rpm, "--eval", settings.dist_macro)
    return "".join(lines).rstrip("\n")


def synthesize_dist_tag(
    explicit: str | None,
    branch: str,
    *,
    runner: CommandRunner,
    settings: Settings,
    clock: Callable[[], float] = time.time,
) -> str:
    if explicit is not None:
        return explicit
    component = sanitize_branch(branch)
    suffix = platform_dist(runner, settings)
    tag = str(int(clock()))
    if component != OMITTED_BRANCH:
        tag += f".{component}"
    return tag + suffix


__all__ = ["platform_dist", "sanitize_branch", "synthesize_dist_tag"]
