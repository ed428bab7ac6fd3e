from pathlib import Path

import pytest
from fakes import FakeRunner

from gitrpm.build import build_packages, rpmbuild_args
from gitrpm.config import Settings
from gitrpm.errors import BuildError
from gitrpm.models import Workspace


def _defines(args: list[str]) -> list[str]:
    return [args[i + 1] for i, arg in enumerate(args) if arg == "--define"]


def test_args_define_topdir_name_dist_then_user_macros(tmp_path: Path) -> None:
    ws = Workspace(root=tmp_path)
    spec = ws.spec_dest("widget")

    args = rpmbuild_args(
        ws,
        spec,
        name="widget",
        dist_tag="1700000000.develop.el9",
        macros={"with_tests": "1", "vendor": "ACME Corp"},
        quiet=False,
    )

    assert args[0] == "-ba"
    assert "--quiet" not in args
    assert _defines(args) == [
        f"_topdir {tmp_path}",
        "name widget",
        "dist 1700000000.develop.el9",
        "with_tests 1",
        "vendor ACME Corp",
    ]
    assert args[-1] == str(spec)
    assert not any(define.startswith("version ") for define in _defines(args))


def test_dist_macro_is_omitted_without_tag(tmp_path: Path) -> None:
    args = rpmbuild_args(
        Workspace(root=tmp_path),
        tmp_path / "SPECS" / "w.spec",
        name="w",
        dist_tag=None,
        macros={},
        quiet=True,
    )

    assert args[:2] == ["-ba", "--quiet"]
    assert not any(define.startswith("dist ") for define in _defines(args))


def test_last_definition_for_a_key_wins(tmp_path: Path) -> None:
    args = rpmbuild_args(
        Workspace(root=tmp_path),
        tmp_path / "w.spec",
        name="widget",
        dist_tag="1.el9",
        macros={"dist": ".custom", "name": "renamed"},
        quiet=False,
    )

    defines = _defines(args)
    assert [d for d in defines if d.startswith("dist ")][-1] == "dist .custom"
    assert [d for d in defines if d.startswith("name ")][-1] == "name renamed"


def test_build_runs_configured_rpmbuild_with_passthrough_output(tmp_path: Path) -> None:
    runner = FakeRunner()

    build_packages(
        Workspace(root=tmp_path),
        tmp_path / "SPECS" / "w.spec",
        name="w",
        dist_tag=None,
        macros={},
        quiet=False,
        runner=runner,
        settings=Settings(rpmbuild="/usr/local/bin/rpmbuild"),
    )

    assert runner.calls == []
    assert runner.silent_calls[0][0] == "/usr/local/bin/rpmbuild"


def test_rpmbuild_failure_is_a_build_error(tmp_path: Path) -> None:
    runner = FakeRunner(failures={("rpmbuild",): 1})

    with pytest.raises(BuildError) as excinfo:
        build_packages(
            Workspace(root=tmp_path),
            tmp_path / "w.spec",
            name="w",
            dist_tag=None,
            macros={},
            quiet=False,
            runner=runner,
            settings=Settings(),
        )

    assert excinfo.value.context["returncode"] == "1"
    assert excinfo.value.__cause__ is not None
