"""Command line entry point for ``git-rpm``.

Usage:
    git-rpm [options] [SPEC]
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from gitrpm import __version__
from gitrpm.config import BRANCH_ENV_VAR, settings_from_env
from gitrpm.errors import ErrorCode, GitRpmError, InputError
from gitrpm.observability import StructuredLogger
from gitrpm.pipeline import PackageOptions, package

EXIT_SUCCESS = 0
EXIT_CODES: dict[str, int] = {
    ErrorCode.INPUT.value: 2,
    ErrorCode.IDENTITY.value: 3,
    ErrorCode.BRANCH_DETECTION.value: 4,
    ErrorCode.EXTERNAL_TOOL.value: 5,
    ErrorCode.WORKSPACE.value: 6,
    ErrorCode.BUILD.value: 7,
    ErrorCode.COLLECT.value: 8,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-rpm",
        description="Build RPMs from the current git checkout.",
    )
    parser.add_argument("spec", nargs="?", type=Path, help="Spec file (default: the only *.spec here)")
    parser.add_argument("-g", "--git", help="Path to the git executable")
    parser.add_argument("-n", "--name", help="Package name (default: derived from the origin URL)")
    dist = parser.add_mutually_exclusive_group()
    dist.add_argument("-d", "--dist", help="Dist tag to use verbatim")
    dist.add_argument("--no-dist", action="store_true", help="Do not define a dist macro")
    parser.add_argument(
        "-b",
        "--branch",
        help=f"Branch or ref to package (default: ${BRANCH_ENV_VAR} or the detected branch)",
    )
    parser.add_argument("-w", "--workdir", type=Path, help="Workspace directory, kept after the run")
    parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra rpm macro; may be repeated",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Quiet rpmbuild and progress output")
    parser.add_argument("--log-json", type=Path, help="Write the stage log as JSON lines")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_defines(values: Sequence[str]) -> dict[str, str]:
    macros: dict[str, str] = {}
    for value in values:
        key, sep, body = value.partition("=")
        if not sep or not key.strip():
            raise InputError(
                f"Invalid macro definition `{value}`.",
                hint="Use -D KEY=VALUE.",
                context={"operation": "parse_defines"},
            )
        macros[key.strip()] = body
    return macros


def find_spec(directory: Path) -> Path:
    candidates = sorted(directory.glob("*.spec"))
    if len(candidates) != 1:
        raise InputError(
            "No spec file given and none could be chosen automatically."
            if not candidates
            else "Several spec files found; unable to choose one.",
            hint="Pass the spec file path as an argument.",
            context={"operation": "find_spec", "candidates": ", ".join(p.name for p in candidates)},
        )
    return candidates[0]


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = StructuredLogger()
    try:
        settings = settings_from_env().with_overrides(git=args.git)
        if args.no_dist:
            settings = settings.with_overrides(dist_tag=False)
        options = PackageOptions(
            spec_path=args.spec if args.spec is not None else find_spec(Path.cwd()),
            name=args.name,
            dist=args.dist,
            branch=args.branch,
            work_dir=args.workdir,
            macros=parse_defines(args.define),
            quiet=args.quiet,
        )
        package(options, settings=settings, logger=logger)
    except GitRpmError as exc:
        logger.log(operation="main", stage=None, message=exc.message, level="error", extra=exc.to_dict())
        print(f"error: {exc.one_line()}", file=sys.stderr)
        return EXIT_CODES.get(exc.code, 1)
    finally:
        if args.log_json is not None:
            logger.to_json_lines(args.log_json)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
