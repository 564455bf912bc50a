"""Presentation Boundary - Where results, errors and status end up."""

import sys
import threading
from abc import ABC, abstractmethod
from typing import Callable

from commitect.intent import Choice, ParsedIntent
from commitect.output import (
    UNICODE_ENABLED, CHECK, bold, dim, info, success, colorize_intent_type,
    print_box, print_error, print_info, print_warning,
)


class StatusSink(ABC):
    """A single shared status indicator. Last write wins."""

    @abstractmethod
    def set_busy(self, text: str) -> None:
        pass

    @abstractmethod
    def set_result(self, text: str, action: str | None = None) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class Presenter(ABC):
    """Shows outcomes to the user and asks the questions the pipeline needs."""

    @abstractmethod
    def show_result(self, intent: ParsedIntent) -> Choice:
        """Display a result and return what to copy, if anything."""
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        pass

    @abstractmethod
    def show_warning(self, message: str) -> None:
        pass

    @abstractmethod
    def show_info(self, message: str) -> None:
        pass

    @abstractmethod
    def choose_folder(self, folders: list[str]) -> str | None:
        """Pick one folder out of several. None means the user cancelled."""
        pass


# =============================================================================
# Terminal implementations
# =============================================================================

class TerminalStatus(StatusSink):
    """Status line for a terminal.

    set_busy() animates a spinner next to the text on a TTY and prints a
    plain line otherwise.
    """
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, enabled: bool = True, stream=None):
        self.enabled = enabled
        self._stream = stream
        self._lock = threading.Lock()
        self._thread = None
        self._stop_event = threading.Event()
        self._text = ""
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    @property
    def stream(self):
        return self._stream or sys.stdout

    @property
    def is_tty(self) -> bool:
        return hasattr(self.stream, 'isatty') and self.stream.isatty()

    def _spin(self):
        idx = 0
        while True:
            frame = self._frames[idx % len(self._frames)]
            print(f'\r\033[K{frame} {self._text}', end='', flush=True, file=self.stream)
            idx += 1
            if self._stop_event.wait(0.08):
                break

    def _stop(self):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            print('\r\033[K', end='', flush=True, file=self.stream)

    def set_busy(self, text: str) -> None:
        with self._lock:
            self._stop()
            if not self.enabled:
                return
            self._text = text
            if self.is_tty:
                self._stop_event.clear()
                self._thread = threading.Thread(target=self._spin, daemon=True)
                self._thread.start()
            else:
                print(dim(f"... {text}"), file=self.stream)

    def set_result(self, text: str, action: str | None = None) -> None:
        with self._lock:
            self._stop()
            if not self.enabled:
                return
            print(f"{success(CHECK)} {text}", file=self.stream)
            if action:
                print(dim(f"  Run '{action}' to analyze all repository changes"), file=self.stream)

    def clear(self) -> None:
        with self._lock:
            self._stop()


class TerminalPresenter(Presenter):
    """Prints to the terminal; asks questions only when interactive.

    default_choice answers the copy question up front; None means ask.
    """

    def __init__(self, interactive: bool = False, default_choice: Choice | None = None,
                 input_fn: Callable[[str], str] = input):
        self.interactive = interactive
        self.default_choice = default_choice
        self._input = input_fn

    def show_result(self, intent: ParsedIntent) -> Choice:
        if intent.is_structured:
            headline = f"{colorize_intent_type(intent.type)}: {bold(intent.message)}"
            width = max(len(intent.full_text), 40)
            print(f"\n{dim('─' * width)}")
            print(headline)
            print(dim('─' * width))
        else:
            print(f"\n{bold(intent.display_type)}")
            print_box(intent.raw.strip() or "(empty response)")
        return self._ask_choice()

    def _ask_choice(self) -> Choice:
        if self.default_choice is not None:
            return self.default_choice
        if not self.interactive:
            return Choice.NONE
        try:
            answer = self._input(dim("\nCopy (m)essage, (f)ull text, or Enter to skip: ")).strip().lower()
        except (KeyboardInterrupt, EOFError):
            return Choice.NONE
        if answer == 'm':
            return Choice.COPY_MESSAGE
        if answer == 'f':
            return Choice.COPY_FULL
        return Choice.NONE

    def show_error(self, message: str) -> None:
        print_error(message)

    def show_warning(self, message: str) -> None:
        print_warning(message)

    def show_info(self, message: str) -> None:
        print_info(message)

    def choose_folder(self, folders: list[str]) -> str | None:
        if not self.interactive:
            return None

        print(bold("\nSelect a workspace folder to analyze:\n"))
        for i, folder in enumerate(folders, 1):
            print(f"  {info(f'[{i}]')} {folder}")
        print()

        while True:
            try:
                choice = self._input(f"Select [1-{len(folders)}] or (q)uit: ").strip().lower()
            except (KeyboardInterrupt, EOFError):
                return None
            if choice == 'q':
                return None
            if choice.isdigit() and 1 <= int(choice) <= len(folders):
                return folders[int(choice) - 1]
            print(f"Enter 1-{len(folders)} or q")
