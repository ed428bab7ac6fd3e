import re

import pytest
from fakes import FakeRunner

from gitrpm.config import Settings
from gitrpm.disttag import sanitize_branch, synthesize_dist_tag


def _runner(dist: str = ".el9") -> FakeRunner:
    runner = FakeRunner()
    runner.respond(("rpm", "--eval"), [dist])
    return runner


@pytest.mark.parametrize(
    "branch, expected",
    [
        ("feature/foo bar!", "foo_bar_"),
        ("develop", "develop"),
        ("origin/release-1.2", "release_1.2"),
        ("fix--double", "fix_double"),
        ("v1.0+build_7", "v1.0+build_7"),
        ("café", "caf_"),
    ],
)
def test_sanitize_branch(branch: str, expected: str) -> None:
    assert sanitize_branch(branch) == expected


def test_explicit_dist_is_returned_verbatim() -> None:
    runner = _runner()

    tag = synthesize_dist_tag("my-custom tag", "develop", runner=runner, settings=Settings())

    assert tag == "my-custom tag"
    assert runner.calls == []


def test_empty_explicit_dist_is_not_treated_as_absent(fake_runner: FakeRunner) -> None:
    tag = synthesize_dist_tag("", "develop", runner=fake_runner, settings=Settings())

    assert tag == ""
    assert fake_runner.calls == []


def test_tag_combines_timestamp_branch_and_platform_dist() -> None:
    runner = _runner()

    tag = synthesize_dist_tag(
        None,
        "feature/foo bar!",
        runner=runner,
        settings=Settings(),
        clock=lambda: 1700000000.9,
    )

    assert tag == "1700000000.foo_bar_.el9"
    assert runner.calls == [("rpm", "--eval", "%{?dist}")]


def test_master_branch_component_is_omitted() -> None:
    tag = synthesize_dist_tag(
        None,
        "origin/master",
        runner=_runner(),
        settings=Settings(),
        clock=lambda: 42.0,
    )

    assert tag == "42.el9"


def test_empty_platform_dist_is_allowed() -> None:
    tag = synthesize_dist_tag(None, "develop", runner=_runner(""), settings=Settings(), clock=lambda: 7)

    assert tag == "7.develop"


def test_tag_uses_configured_rpm_binary(fake_runner: FakeRunner) -> None:
    runner = fake_runner
    runner.respond(("/opt/rpm/bin/rpm",), [".fc40"])

    tag = synthesize_dist_tag(
        None,
        "develop",
        runner=runner,
        settings=Settings(rpm="/opt/rpm/bin/rpm"),
    )

    assert re.fullmatch(r"\d+\.develop\.fc40", tag)
