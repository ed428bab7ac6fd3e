"""Shared test fixtures."""

from __future__ import annotations

import pytest
from fakes import FakeRunner, fake_git_archive


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Provide a runner with no scripted responses."""
    return FakeRunner()


@pytest.fixture
def archiving_runner() -> FakeRunner:
    """Provide a runner whose ``git archive`` writes a one-file tar."""
    runner = FakeRunner()
    runner.handlers[("git", "archive")] = fake_git_archive
    return runner
