"""Git Operations Package"""

from commitect.git.filter import should_process, BINARY_FILE_EXTENSIONS, IGNORE_PATTERNS
from commitect.git.repository import (
    GitQuery, GitError, GitTimeout, GitOutputTooLarge, DiffTooLargeError,
    ChangeSet, ChangesSummary, MAX_DIFF_SIZE,
)

__all__ = [
    "should_process",
    "BINARY_FILE_EXTENSIONS",
    "IGNORE_PATTERNS",
    "GitQuery",
    "GitError",
    "GitTimeout",
    "GitOutputTooLarge",
    "DiffTooLargeError",
    "ChangeSet",
    "ChangesSummary",
    "MAX_DIFF_SIZE",
]
