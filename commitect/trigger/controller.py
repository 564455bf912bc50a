"""Trigger Controller - Run one analysis per save burst or manual request."""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from loguru import logger

from commitect.api import IntentClient
from commitect.cli.utils import copy_to_clipboard
from commitect.git import GitQuery, should_process
from commitect.intent import Choice, ParsedIntent, parse_intent
from commitect.trigger.presenter import Presenter, StatusSink
from commitect.trigger.timer import DebounceTimer

MANUAL_TRIGGER_COMMAND = "commitect"


class Stage(Enum):
    IDLE = "idle"
    CHECKING = "checking"
    DIFFING = "diffing"
    CLASSIFYING = "classifying"
    PRESENTING = "presenting"
    ERROR = "error"


class Outcome(Enum):
    PRESENTED = "presented"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    FAILED = "failed"
    DISABLED = "disabled"


@dataclass
class RunResult:
    """How one pipeline run ended."""
    outcome: Outcome
    stage: Stage
    intent: ParsedIntent | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome not in (Outcome.FAILED, Outcome.DISABLED)


class TriggerController:
    """
    Drives filter -> git -> classifier -> presenter.

    Save events are debounced through a single timer slot; manual runs
    execute immediately on the caller's thread. Both paths catch every
    exception at the pipeline boundary and report it, never re-raise.
    """

    def __init__(
        self,
        presenter: Presenter,
        status: StatusSink,
        git_factory: Callable[..., GitQuery] = GitQuery.from_config,
        client: IntentClient | None = None,
        copy: Callable[[str], tuple[bool, str]] = copy_to_clipboard,
        timer: DebounceTimer | None = None,
    ):
        self.presenter = presenter
        self.status = status
        self._git_factory = git_factory
        self.client = client or IntentClient()
        self._copy = copy
        self.timer = timer or DebounceTimer()
        # Save runs happen on the timer thread, manual runs on the caller's
        self._run = threading.local()

    @property
    def stage(self) -> Stage:
        """Stage of the run on the current thread."""
        return getattr(self._run, 'stage', Stage.IDLE)

    # -------------------------------------------------------------------------
    # Save-triggered path
    # -------------------------------------------------------------------------

    def handle_save(self, path: str, config) -> bool:
        """Schedule analysis of a saved file. Returns True if scheduled."""
        if not config.enabled:
            logger.debug("Commitect is disabled")
            return False
        if not should_process(path):
            return False

        logger.debug(f"File saved: {path}")
        self.timer.schedule(config.debounce_delay / 1000,
                            lambda: self.run_save_pipeline(path, config))
        return True

    def run_save_pipeline(self, path: str, config) -> RunResult:
        try:
            self._enter(Stage.CHECKING)
            git = self._git_factory(config)

            if not git.is_repository(path):
                logger.debug(f"File is not in a git repository, skipping intent detection: {path}")
                return self._skip(Stage.CHECKING)

            self._enter(Stage.DIFFING)
            changes = git.single_file_diff(path)
            if changes.is_empty:
                logger.debug("Diff is empty, skipping intent detection")
                return self._skip(Stage.DIFFING)
            logger.debug(f"Git diff retrieved, length: {changes.size} bytes")
            self.status.set_busy("Analyzing commit intent...")
            return self._classify_and_present(changes.text, config)
        except Exception as e:
            return self._fail("Failed to detect commit intent", e)

    # -------------------------------------------------------------------------
    # Manual path
    # -------------------------------------------------------------------------

    def run_manual(self, folders: list[str], config) -> RunResult:
        """Analyze every change in one workspace folder right now."""
        if not config.enabled:
            self.presenter.show_warning("Commitect is disabled. Set \"enabled\": true in .commitectrc.")
            return RunResult(Outcome.DISABLED, Stage.IDLE)

        if not folders:
            self.presenter.show_error("No workspace folder is open. Please open a folder or workspace.")
            return RunResult(Outcome.FAILED, Stage.IDLE, error="no workspace folder")

        folder = folders[0]
        if len(folders) > 1:
            folder = self.presenter.choose_folder(folders)
            if folder is None:
                return RunResult(Outcome.CANCELLED, Stage.IDLE)

        logger.debug(f"Analyzing workspace: {folder}")

        try:
            self._enter(Stage.CHECKING)
            self.status.set_busy("Checking repository...")
            git = self._git_factory(config)

            root = git.repository_root(folder)
            if not root:
                self.presenter.show_warning("This is not a Git repository. Initialize Git first.")
                return self._skip(Stage.CHECKING)
            logger.debug(f"Git repository found: {root}")

            if not git.has_changes(root):
                self.presenter.show_info("No changes detected in the repository. Nothing to commit!")
                return self._skip(Stage.CHECKING)

            summary = git.changes_summary(root)
            logger.debug(f"Changes summary: {summary}")

            self._enter(Stage.DIFFING)
            self.status.set_busy(f"Analyzing {summary.total} file(s)...")
            changes = git.repository_diff(root)
            if changes.is_empty:
                self.presenter.show_info("No diff content available. All changes may be binary files.")
                return self._skip(Stage.DIFFING)
            logger.debug(f"Repository diff retrieved, length: {changes.size} bytes")

            self.status.set_busy("Generating commit message...")
            return self._classify_and_present(changes.text, config)
        except Exception as e:
            return self._fail("Failed to generate commit message", e)

    # -------------------------------------------------------------------------
    # Shared stages
    # -------------------------------------------------------------------------

    def _classify_and_present(self, diff: str, config) -> RunResult:
        self._enter(Stage.CLASSIFYING)
        raw = self.client.classify(diff, config)
        logger.debug(f"Detected intent: {raw}")

        self._enter(Stage.PRESENTING)
        intent = parse_intent(raw)
        self.status.clear()
        choice = self.presenter.show_result(intent)
        self._apply_choice(intent, choice)
        self.status.set_result(f"Intent: {' '.join(raw.split())}", MANUAL_TRIGGER_COMMAND)

        self._enter(Stage.IDLE)
        return RunResult(Outcome.PRESENTED, Stage.PRESENTING, intent=intent)

    def _apply_choice(self, intent: ParsedIntent, choice: Choice) -> None:
        text = intent.text_for(choice)
        if text is None:
            return
        copied, reason = self._copy(text)
        if copied:
            self.presenter.show_info("Copied to clipboard")
        else:
            self.presenter.show_warning(f"Could not copy to clipboard{': ' + reason if reason else ''}")

    def _enter(self, stage: Stage) -> None:
        self._run.stage = stage

    def _skip(self, stage: Stage) -> RunResult:
        self.status.clear()
        self._enter(Stage.IDLE)
        return RunResult(Outcome.SKIPPED, stage)

    def _fail(self, prefix: str, exc: Exception) -> RunResult:
        failed_at = self.stage
        message = str(exc) or "Unknown error occurred"
        logger.error(f"{prefix} during {failed_at.value}: {message}")
        self._enter(Stage.ERROR)
        self.presenter.show_error(f"{prefix}: {message}")
        self.status.clear()
        self._enter(Stage.IDLE)
        return RunResult(Outcome.FAILED, Stage.ERROR, error=message)

    def shutdown(self) -> None:
        """Drop any pending save analysis and hide the status line."""
        self.timer.cancel_pending()
        self.status.clear()
