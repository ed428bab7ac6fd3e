"""Core typed dataclasses for build requests, workspaces, and results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from gitrpm.config import Settings
from gitrpm.errors import InputError


@dataclass(frozen=True, slots=True)
class BuildRequest:
    package_name: str
    ref: str
    version: str
    spec_path: Path
    work_dir: Path
    dist_tag: str | None = None
    macros: Mapping[str, str] = field(default_factory=dict)
    quiet: bool = False

    def __post_init__(self) -> None:
        for attr in ("package_name", "version", "ref"):
            if not getattr(self, attr):
                raise InputError(
                    f"Build request is missing `{attr}`.",
                    hint="Resolve identity and branch before building a request.",
                    context={"operation": "build_request"},
                )
        object.__setattr__(self, "macros", MappingProxyType(dict(self.macros)))

    @property
    def source_stem(self) -> str:
        return f"{self.package_name}-{self.version}"


@dataclass(frozen=True, slots=True)
class Workspace:
    root: Path
    settings: Settings = field(default_factory=Settings)

    @property
    def specs_dir(self) -> Path:
        return self.root / self.settings.specs_subdir

    @property
    def sources_dir(self) -> Path:
        return self.root / self.settings.sources_subdir

    @property
    def rpms_dir(self) -> Path:
        return self.root / self.settings.rpms_subdir

    @property
    def srpms_dir(self) -> Path:
        return self.root / self.settings.srpms_subdir

    @property
    def output_dirs(self) -> tuple[Path, ...]:
        return (self.rpms_dir, self.srpms_dir)

    def spec_dest(self, name: str) -> Path:
        return self.specs_dir / f"{name}.spec"

    def archive_dest(self, name: str, version: str) -> Path:
        return self.sources_dir / f"{name}-{version}.{self.settings.archive_ext}"


@dataclass(slots=True)
class PackageResult:
    request: BuildRequest
    workspace: Workspace
    artifacts: list[Path] = field(default_factory=list)


__all__ = ["BuildRequest", "PackageResult", "Workspace"]
