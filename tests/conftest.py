"""
Shared test fixtures.
"""

from pathlib import Path

import pytest

from pathman.errors import SourceFailure
from pathman.profile import ShellKind, ShellProfile


class FakeRunner:
    """Stands in for source_rc; records calls and optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[ShellProfile] = []

    def __call__(self, profile: ShellProfile) -> str:
        self.calls.append(profile)
        if self.fail:
            raise SourceFailure(f"source {profile.path}", 1, "syntax error")
        return ""


@pytest.fixture
def fake_home(tmp_path: Path) -> Path:
    """Return a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def bash_profile(fake_home: Path) -> ShellProfile:
    """Return a bash profile pointing at <fake_home>/.bashrc."""
    return ShellProfile(shell=ShellKind.BASH, path=fake_home / ".bashrc")


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def failing_runner() -> FakeRunner:
    return FakeRunner(fail=True)
