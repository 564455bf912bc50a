"""
Tests for the git query layer.

Most tests run real git against a throwaway repository; a few replace
subprocess.run to reach exit codes and timeouts that are hard to provoke.

Run with:
    pytest tests/test_git.py -v
"""

import os
import subprocess

import pytest

from commitect.git import (
    ChangeSet, ChangesSummary, DiffTooLargeError, GitError, GitQuery, GitTimeout,
)
from commitect.git.repository import STAGED_LABEL, UNSTAGED_LABEL, UNTRACKED_LABEL

from conftest import requires_git, run_git


@pytest.fixture
def git():
    return GitQuery()


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

class TestChangeSet:

    def test_size_counts_utf8_bytes(self):
        assert ChangeSet(text="é").size == 2

    def test_whitespace_only_is_empty(self):
        assert ChangeSet(text="  \n\t").is_empty is True
        assert ChangeSet(text="+x").is_empty is False


class TestChangesSummary:

    def test_total(self):
        summary = ChangesSummary(modified=2, added=1, deleted=1, renamed=1, untracked=3)
        assert summary.total == 8


class TestDiffTooLargeError:

    def test_message_reports_megabytes_with_two_decimals(self):
        err = DiffTooLargeError(6 * 1024 * 1024, 5 * 1024 * 1024)
        assert str(err) == "Diff too large (6.00 MB). Maximum size is 5.00 MB."

    def test_is_a_git_error(self):
        assert isinstance(DiffTooLargeError(10, 5), GitError)


# ---------------------------------------------------------------------------
# Repository detection
# ---------------------------------------------------------------------------

@requires_git
class TestRepositoryDetection:

    def test_file_inside_repository(self, git, repo):
        assert git.is_repository(str(repo / "app.py")) is True

    def test_directory_inside_repository(self, git, repo):
        assert git.is_repository(str(repo)) is True

    def test_outside_repository(self, git, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()
        (outside / "notes.txt").write_text("hi")
        assert git.is_repository(str(outside / "notes.txt")) is False

    def test_missing_directory_does_not_raise(self, git, tmp_path):
        assert git.is_repository(str(tmp_path / "gone" / "file.py")) is False

    def test_repository_root_from_nested_file(self, git, repo):
        nested = repo / "pkg" / "sub"
        nested.mkdir(parents=True)
        (nested / "mod.py").write_text("x = 1\n")
        root = git.repository_root(str(nested / "mod.py"))
        assert os.path.realpath(root) == os.path.realpath(repo)

    def test_repository_root_outside_is_none(self, git, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()
        assert git.repository_root(str(outside)) is None


# ---------------------------------------------------------------------------
# Single-file diff (save path)
# ---------------------------------------------------------------------------

@requires_git
class TestSingleFileDiff:

    def test_modified_tracked_file(self, git, repo):
        (repo / "app.py").write_text("def add(a, b):\n    return b + a\n")
        changes = git.single_file_diff(str(repo / "app.py"))
        assert "diff --git a/app.py b/app.py" in changes.text
        assert "+    return b + a" in changes.text
        assert changes.sections == ["app.py"]

    def test_unchanged_file_is_empty(self, git, repo):
        assert git.single_file_diff(str(repo / "app.py")).is_empty

    def test_untracked_file_is_empty(self, git, repo, log_messages):
        (repo / "new.py").write_text("print('new')\n")
        assert git.single_file_diff(str(repo / "new.py")).is_empty
        assert any("not tracked" in m for m in log_messages)

    def test_only_the_saved_file_is_included(self, git, repo):
        (repo / "other.py").write_text("a = 1\n")
        run_git(repo, 'add', 'other.py')
        run_git(repo, 'commit', '-q', '-m', 'other')
        (repo / "other.py").write_text("a = 2\n")
        (repo / "app.py").write_text("changed\n")

        changes = git.single_file_diff(str(repo / "app.py"))
        assert "app.py" in changes.text
        assert "other.py" not in changes.text

    def test_nested_file_uses_forward_slashes(self, git, repo):
        nested = repo / "pkg" / "sub"
        nested.mkdir(parents=True)
        (nested / "mod.py").write_text("x = 1\n")
        run_git(repo, 'add', '.')
        run_git(repo, 'commit', '-q', '-m', 'nested')
        (nested / "mod.py").write_text("x = 2\n")

        changes = git.single_file_diff(str(nested / "mod.py"))
        assert "a/pkg/sub/mod.py" in changes.text
        assert changes.sections == ["pkg/sub/mod.py"]

    def test_oversized_diff_is_dropped_silently(self, repo, log_messages):
        (repo / "app.py").write_text("x = 1\n" * 200)
        small = GitQuery(max_diff_size=100)
        changes = small.single_file_diff(str(repo / "app.py"))
        assert changes.is_empty
        assert any("Diff too large" in m for m in log_messages)

    def test_outside_repository_is_empty(self, git, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()
        (outside / "a.py").write_text("x")
        assert git.single_file_diff(str(outside / "a.py")).is_empty


# ---------------------------------------------------------------------------
# Repository diff (manual path)
# ---------------------------------------------------------------------------

@requires_git
class TestRepositoryDiff:

    def test_all_three_sections_in_order(self, git, repo):
        (repo / "app.py").write_text("unstaged edit\n")
        (repo / "staged.py").write_text("staged = True\n")
        run_git(repo, 'add', 'staged.py')
        (repo / "loose.txt").write_text("untracked\n")

        changes = git.repository_diff(str(repo))
        assert changes.sections == [UNSTAGED_LABEL, STAGED_LABEL, UNTRACKED_LABEL]
        text = changes.text
        assert text.index(UNSTAGED_LABEL) < text.index(STAGED_LABEL) < text.index(UNTRACKED_LABEL)
        assert "+unstaged edit" in text
        assert "+staged = True" in text
        assert "loose.txt" in text

    def test_empty_sections_are_omitted(self, git, repo):
        (repo / "loose.txt").write_text("untracked\n")
        changes = git.repository_diff(str(repo))
        assert changes.sections == [UNTRACKED_LABEL]
        assert UNSTAGED_LABEL not in changes.text
        assert STAGED_LABEL not in changes.text

    def test_ignored_files_are_not_listed(self, git, repo):
        (repo / ".gitignore").write_text("*.log\n")
        (repo / "debug.log").write_text("noise\n")
        changes = git.repository_diff(str(repo))
        assert ".gitignore" in changes.text
        assert "debug.log" not in changes.text

    def test_clean_repository_is_empty(self, git, repo):
        changes = git.repository_diff(str(repo))
        assert changes.is_empty
        assert changes.sections == []

    def test_oversized_diff_raises(self, repo):
        (repo / "app.py").write_text("y = 2\n" * 500)
        small = GitQuery(max_diff_size=200)
        with pytest.raises(DiffTooLargeError) as exc_info:
            small.repository_diff(str(repo))
        assert "Diff too large" in str(exc_info.value)
        assert exc_info.value.size > 200


# ---------------------------------------------------------------------------
# Status queries
# ---------------------------------------------------------------------------

@requires_git
class TestStatusQueries:

    def test_clean_repository_has_no_changes(self, git, repo):
        assert git.has_changes(str(repo)) is False

    def test_modified_file_counts_as_change(self, git, repo):
        (repo / "app.py").write_text("changed\n")
        assert git.has_changes(str(repo)) is True

    def test_has_changes_outside_repository(self, git, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()
        assert git.has_changes(str(outside)) is False

    def test_summary_counts_each_status(self, git, repo):
        for name in ("util.py", "old.py"):
            (repo / name).write_text(f"# {name}\n")
        run_git(repo, 'add', '.')
        run_git(repo, 'commit', '-q', '-m', 'more files')

        (repo / "app.py").write_text("modified\n")
        run_git(repo, 'mv', 'util.py', 'helpers.py')
        run_git(repo, 'rm', '-q', 'old.py')
        (repo / "added.py").write_text("new\n")
        run_git(repo, 'add', 'added.py')
        (repo / "scratch.txt").write_text("untracked\n")

        summary = git.changes_summary(str(repo))
        assert summary == ChangesSummary(modified=1, added=1, deleted=1, renamed=1, untracked=1)
        assert summary.total == 5

    def test_summary_outside_repository_is_zero(self, git, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()
        assert git.changes_summary(str(outside)) == ChangesSummary()


# ---------------------------------------------------------------------------
# Process failures (no real git needed)
# ---------------------------------------------------------------------------

class TestProcessFailures:

    def _fake_run(self, monkeypatch, behaviour):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return behaviour(cmd, kwargs)

        monkeypatch.setattr("commitect.git.repository.subprocess.run", fake_run)
        return calls

    def test_diff_exit_code_one_means_no_differences(self, monkeypatch, tmp_path):
        def behaviour(cmd, kwargs):
            if cmd[1:3] == ['diff', '--']:
                raise subprocess.CalledProcessError(1, cmd, output="", stderr="")
            if cmd[1] == 'rev-parse':
                return subprocess.CompletedProcess(cmd, 0, stdout=f"{tmp_path}\n", stderr="")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        self._fake_run(monkeypatch, behaviour)
        changes = GitQuery().single_file_diff(str(tmp_path / "a.py"))
        assert changes.is_empty

    def test_other_diff_failures_propagate(self, monkeypatch, tmp_path):
        def behaviour(cmd, kwargs):
            if cmd[1:3] == ['diff', '--']:
                raise subprocess.CalledProcessError(128, cmd, output="", stderr="fatal: bad object")
            if cmd[1] == 'rev-parse':
                return subprocess.CompletedProcess(cmd, 0, stdout=f"{tmp_path}\n", stderr="")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        self._fake_run(monkeypatch, behaviour)
        with pytest.raises(GitError, match="bad object"):
            GitQuery().single_file_diff(str(tmp_path / "a.py"))

    def test_timeouts_are_passed_per_command(self, monkeypatch, tmp_path):
        def behaviour(cmd, kwargs):
            if cmd[1] == 'rev-parse':
                return subprocess.CompletedProcess(cmd, 0, stdout=f"{tmp_path}\n", stderr="")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        calls = self._fake_run(monkeypatch, behaviour)
        GitQuery().single_file_diff(str(tmp_path / "a.py"))

        timeouts = {cmd[1]: kwargs['timeout'] for cmd, kwargs in calls}
        assert timeouts['rev-parse'] == 5.0
        assert timeouts['ls-files'] == 5.0
        assert timeouts['diff'] == 10.0

    def test_timeout_raises_git_timeout(self, monkeypatch, tmp_path):
        def behaviour(cmd, kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs['timeout'])

        self._fake_run(monkeypatch, behaviour)
        with pytest.raises(GitTimeout):
            GitQuery().repository_diff(str(tmp_path))

    def test_timeout_during_detection_is_not_a_repository(self, monkeypatch, tmp_path):
        def behaviour(cmd, kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs['timeout'])

        self._fake_run(monkeypatch, behaviour)
        assert GitQuery().is_repository(str(tmp_path)) is False

    def test_missing_git_binary(self, monkeypatch, tmp_path):
        def behaviour(cmd, kwargs):
            raise FileNotFoundError("git")

        self._fake_run(monkeypatch, behaviour)
        with pytest.raises(GitError, match="not installed"):
            GitQuery().repository_diff(str(tmp_path))
