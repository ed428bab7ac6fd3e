"""Relocation of built packages to the caller's directory."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from gitrpm.errors import CollectError
from gitrpm.observability import StructuredLogger


def collect_artifacts(
    output_root: Path,
    dest_dir: Path,
    *,
    suffix: str = ".rpm",
    quiet: bool = False,
    logger: StructuredLogger | None = None,
) -> list[Path]:
    """Move every ``*<suffix>`` file under *output_root* into *dest_dir*.

    Subdirectories are flattened. A missing *output_root* yields nothing.
    """
    logger = logger if logger is not None else StructuredLogger()
    moved: list[Path] = []
    if not output_root.is_dir():
        return moved

    for dirpath, _, filenames in os.walk(output_root):
        for filename in filenames:
            source = Path(dirpath) / filename
            if not filename.endswith(suffix) or not source.is_file():
                continue
            target = dest_dir / filename
            try:
                shutil.move(source, target)
            except OSError as exc:
                raise CollectError(
                    "Unable to move a built package into place.",
                    hint="Check free space and permissions of the current directory.",
                    context={
                        "operation": "collect_artifacts",
                        "source": str(source),
                        "dest": str(target),
                        "error": str(exc),
                    },
                ) from exc
            moved.append(target)
            logger.log(
                operation="collect_artifacts",
                stage="collect",
                message=f"Wrote: {target}",
                extra={"source": str(source)},
            )
            logger.progress(f"Wrote: {target}", quiet=quiet)
    return moved


__all__ = ["collect_artifacts"]
