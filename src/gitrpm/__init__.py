"""Public package entrypoint for gitrpm."""

__version__ = "0.1.0"

from .errors import (  # noqa: E402
    BranchDetectionError,
    BuildError,
    CollectError,
    ErrorCode,
    ExternalToolError,
    GitRpmError,
    IdentityError,
    InputError,
    WorkspaceError,
)
from .models import BuildRequest, PackageResult, Workspace  # noqa: E402
from .pipeline import PackageOptions, package  # noqa: E402

__all__ = [
    "BranchDetectionError",
    "BuildError",
    "BuildRequest",
    "CollectError",
    "ErrorCode",
    "ExternalToolError",
    "GitRpmError",
    "IdentityError",
    "InputError",
    "PackageOptions",
    "PackageResult",
    "Workspace",
    "WorkspaceError",
    "__version__",
    "package",
]
