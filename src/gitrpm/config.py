"""Tool paths, workspace layout names, and environment-derived defaults."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

BRANCH_ENV_VAR = "GIT_BRANCH"


@dataclass(frozen=True, slots=True)
class Settings:
    git: str = "git"
    rpm: str = "rpm"
    rpmbuild: str = "rpmbuild"
    dist_tag: bool = True
    branch_env_var: str = BRANCH_ENV_VAR
    specs_subdir: str = "SPECS"
    sources_subdir: str = "SOURCES"
    rpms_subdir: str = "RPMS"
    srpms_subdir: str = "SRPMS"
    archive_ext: str = "tar.gz"
    artifact_suffix: str = ".rpm"
    dist_macro: str = "%{?dist}"

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def settings_from_env(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings whose tool paths honour the ``GITRPM_*`` variables."""
    env = os.environ if environ is None else environ
    return Settings().with_overrides(
        git=env.get("GITRPM_GIT") or None,
        rpm=env.get("GITRPM_RPM") or None,
        rpmbuild=env.get("GITRPM_RPMBUILD") or None,
    )


__all__ = ["BRANCH_ENV_VAR", "Settings", "settings_from_env"]
