"""Git Repository - Query repository state and extract diffs."""

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger


MAX_DIFF_SIZE = 5 * 1024 * 1024
GIT_COMMAND_TIMEOUT = 5.0
GIT_DIFF_TIMEOUT = 10.0
GIT_METADATA_BUFFER = 1024 * 1024

UNSTAGED_LABEL = "=== Unstaged Changes ==="
STAGED_LABEL = "=== Staged Changes ==="
UNTRACKED_LABEL = "=== Untracked Files ==="


def _format_mb(size: int) -> str:
    return f"{size / (1024 * 1024):.2f} MB"


@dataclass
class ChangeSet:
    """A diff ready to be classified, possibly empty."""
    text: str = ""
    sections: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Size in bytes as it goes over the wire."""
        return len(self.text.encode('utf-8'))

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass
class ChangesSummary:
    """Per-status file counts from 'git status --porcelain'."""
    modified: int = 0
    added: int = 0
    deleted: int = 0
    renamed: int = 0
    untracked: int = 0

    @property
    def total(self) -> int:
        return self.modified + self.added + self.deleted + self.renamed + self.untracked


class GitError(Exception):
    """Raised when git operations fail."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class GitTimeout(GitError):
    """Raised when a git command runs past its timeout."""
    pass


class GitOutputTooLarge(GitError):
    """Raised when a git command produces more output than allowed."""

    def __init__(self, message: str, size: int):
        super().__init__(message)
        self.size = size


class DiffTooLargeError(GitError):
    """Raised when a repository diff exceeds the maximum transmit size."""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"Diff too large ({_format_mb(size)}). Maximum size is {_format_mb(max_size)}.")
        self.size = size
        self.max_size = max_size


class GitQuery:
    """Runs git from a given directory with bounded time and output."""

    def __init__(self, max_diff_size: int = MAX_DIFF_SIZE,
                 command_timeout: float = GIT_COMMAND_TIMEOUT,
                 diff_timeout: float = GIT_DIFF_TIMEOUT):
        self.max_diff_size = max_diff_size
        self.command_timeout = command_timeout
        self.diff_timeout = diff_timeout

    @classmethod
    def from_config(cls, config) -> 'GitQuery':
        return cls(max_diff_size=config.max_diff_size)

    def _run_git(self, *args: str, cwd: str, timeout: float | None = None,
                 max_output: int = GIT_METADATA_BUFFER) -> str:
        """Run a git command in cwd and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                timeout=timeout or self.command_timeout,
            )
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}",
                           returncode=e.returncode, stderr=e.stderr or "")
        except subprocess.TimeoutExpired:
            raise GitTimeout(f"Git command timed out after {timeout or self.command_timeout:g}s: git {' '.join(args)}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")
        except NotADirectoryError:
            raise GitError(f"Not a directory: {cwd}")

        size = len(result.stdout.encode('utf-8'))
        if size > max_output:
            raise GitOutputTooLarge(f"Output of git {' '.join(args)} exceeded {max_output} bytes", size)
        return result.stdout

    def _run_diff(self, *args: str, cwd: str) -> str:
        """Run a diff command; exit code 1 means 'no differences'."""
        try:
            return self._run_git(*args, cwd=cwd, timeout=self.diff_timeout,
                                 max_output=self.max_diff_size)
        except GitError as e:
            if e.returncode == 1:
                return ""
            raise

    @staticmethod
    def _working_dir(path: str) -> str:
        return path if os.path.isdir(path) else os.path.dirname(path) or '.'

    def is_repository(self, path: str) -> bool:
        """True if path lives inside a git work tree. Never raises."""
        try:
            output = self._run_git('rev-parse', '--git-dir', cwd=self._working_dir(path))
            return bool(output.strip())
        except GitError:
            logger.debug(f"Not a git repository: {path}")
            return False

    def repository_root(self, path: str) -> str | None:
        """Absolute top-level directory of the repository containing path."""
        try:
            root = self._run_git('rev-parse', '--show-toplevel', cwd=self._working_dir(path)).strip()
        except GitError:
            return None
        return root or None

    def single_file_diff(self, path: str) -> ChangeSet:
        """Working-tree diff for one tracked file.

        Untracked files, unchanged files and oversized diffs all yield an
        empty ChangeSet. Real git faults raise GitError.
        """
        root = self.repository_root(path)
        if not root:
            logger.debug("Could not determine git repository root")
            return ChangeSet()

        relative = Path(os.path.relpath(os.path.realpath(path), os.path.realpath(root))).as_posix()

        try:
            self._run_git('ls-files', '--error-unmatch', '--', relative, cwd=root)
        except GitError:
            logger.debug(f"File not tracked by git: {path}")
            return ChangeSet()

        try:
            diff = self._run_diff('diff', '--', relative, cwd=root)
        except GitOutputTooLarge:
            logger.warning(f"Diff too large, skipping: {path}")
            return ChangeSet()

        changes = ChangeSet(text=diff, sections=[relative] if diff else [])
        if changes.size > self.max_diff_size:
            logger.warning(f"Diff too large, skipping: {changes.size} bytes")
            return ChangeSet()
        return changes

    def repository_diff(self, root: str) -> ChangeSet:
        """Unstaged, staged and untracked changes of the whole repository.

        Raises DiffTooLargeError when the combined text exceeds the
        maximum size.
        """
        sections = []
        labels = []
        try:
            for label, args in (
                (UNSTAGED_LABEL, ('diff',)),
                (STAGED_LABEL, ('diff', '--cached')),
                (UNTRACKED_LABEL, ('ls-files', '--others', '--exclude-standard')),
            ):
                output = self._run_diff(*args, cwd=root)
                if output.strip():
                    sections.append(f"{label}\n{output}")
                    labels.append(label)
        except GitOutputTooLarge as e:
            raise DiffTooLargeError(e.size, self.max_diff_size)

        changes = ChangeSet(text="\n\n".join(sections), sections=labels)
        if changes.size > self.max_diff_size:
            raise DiffTooLargeError(changes.size, self.max_diff_size)
        return changes

    def changes_summary(self, root: str) -> ChangesSummary:
        """Count changed paths by status. All zeros if git fails."""
        summary = ChangesSummary()
        try:
            output = self._run_git('status', '--porcelain', cwd=root)
        except GitError as e:
            logger.debug(f"Could not read repository status: {e}")
            return summary

        for line in output.splitlines():
            if len(line) < 3:
                continue
            code = line[:2]
            if code == '??':
                summary.untracked += 1
            elif 'R' in code:
                summary.renamed += 1
            elif 'A' in code:
                summary.added += 1
            elif 'D' in code:
                summary.deleted += 1
            else:
                summary.modified += 1
        return summary

    def has_changes(self, root: str) -> bool:
        try:
            return bool(self._run_git('status', '--porcelain', cwd=root).strip())
        except GitError:
            return False
