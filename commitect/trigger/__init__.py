"""Trigger Package - Save and manual triggers for intent analysis."""

from commitect.trigger.timer import DebounceTimer
from commitect.trigger.presenter import Presenter, StatusSink, TerminalPresenter, TerminalStatus
from commitect.trigger.controller import TriggerController, RunResult, Stage, Outcome, MANUAL_TRIGGER_COMMAND
from commitect.trigger.watcher import SaveWatcher, SaveEventHandler, is_watch_noise

__all__ = [
    "DebounceTimer",
    "Presenter",
    "StatusSink",
    "TerminalPresenter",
    "TerminalStatus",
    "TriggerController",
    "RunResult",
    "Stage",
    "Outcome",
    "MANUAL_TRIGGER_COMMAND",
    "SaveWatcher",
    "SaveEventHandler",
    "is_watch_noise",
]
