"""Shared fixtures: throwaway git repositories and log capture."""

import shutil
import subprocess

import pytest
from loguru import logger

GIT_AVAILABLE = shutil.which('git') is not None
requires_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git is not installed")


def run_git(cwd, *args):
    """Run git with a fixed identity so commits work on bare CI machines."""
    subprocess.run(
        ['git', '-c', 'user.name=Test', '-c', 'user.email=test@example.com',
         '-c', 'commit.gpgsign=false', *args],
        cwd=cwd, check=True, capture_output=True,
    )


@pytest.fixture(autouse=True)
def _isolate_git(tmp_path, monkeypatch):
    # Stop git from discovering a repository above tmp_path
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))


@pytest.fixture
def repo(tmp_path):
    """A repository with one committed file, app.py."""
    root = tmp_path / "repo"
    root.mkdir()
    run_git(root, 'init', '-q')
    (root / "app.py").write_text("def add(a, b):\n    return a + b\n")
    run_git(root, 'add', 'app.py')
    run_git(root, 'commit', '-q', '-m', 'initial')
    return root


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
