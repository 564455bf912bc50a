"""Save Watcher - Turn file system events into save notifications."""

import os
import threading
from fnmatch import fnmatch
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from commitect.trigger.controller import TriggerController

# Writes under these directories are tooling churn, not edits
WATCH_IGNORE_DIRS = frozenset([
    "__pycache__", ".venv", "venv", ".pytest_cache", ".mypy_cache",
    ".tox", ".eggs", ".idea",
])
# Compiled files, editor swap/backup/lock files
WATCH_IGNORE_FILES = [
    "*.pyc", "*.pyo", "*.swp", "*.swx", "*.swo", "*~", "#*#", ".#*", "4913",
]


def is_watch_noise(path: str) -> bool:
    """True for writes no user save produces: caches, swap and backup files."""
    parts = Path(path).parts
    if any(part in WATCH_IGNORE_DIRS or part.endswith(".egg-info") for part in parts[:-1]):
        return True
    name = parts[-1] if parts else ""
    return any(fnmatch(name, pattern) for pattern in WATCH_IGNORE_FILES)


class SaveEventHandler(FileSystemEventHandler):
    """Reports every written or renamed-into-place file as a save.

    Editors that save atomically write a temp file and move it over the
    original, so moves report their destination.
    """

    def __init__(self, on_save: Callable[[str], None]):
        super().__init__()
        self.on_save = on_save

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.on_save(os.fsdecode(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.on_save(os.fsdecode(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.on_save(os.fsdecode(event.dest_path))


class SaveWatcher:
    """
    Watches a directory tree and feeds saves to a TriggerController.

    Saving the loaded config file itself does not trigger analysis; it
    calls on_config_change so the caller can reload settings. A config
    file outside the tree gets its own non-recursive watch on its
    directory, and only the config file is reported from there.
    """

    def __init__(
        self,
        root: str,
        controller: TriggerController,
        get_config: Callable[[], object],
        config_path: Optional[Path] = None,
        on_config_change: Optional[Callable[[], None]] = None,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        self.root = os.path.abspath(root)
        self.controller = controller
        self._get_config = get_config
        self._config_path = Path(config_path).resolve() if config_path else None
        self._on_config_change = on_config_change
        self._observer_factory = observer_factory
        self._observer = None
        self.handler = SaveEventHandler(self._on_save)

    def _is_config_file(self, path: str) -> bool:
        return self._config_path is not None and Path(path).resolve() == self._config_path

    def _is_inside_root(self, path: str) -> bool:
        return Path(path).resolve().is_relative_to(Path(self.root).resolve())

    def _config_dir_outside_root(self) -> Optional[Path]:
        if self._config_path is None:
            return None
        parent = self._config_path.parent
        if self._is_inside_root(str(parent)):
            return None
        return parent

    def _on_save(self, path: str) -> None:
        if self._is_config_file(path):
            logger.info("Configuration changed, reloading settings")
            if self._on_config_change:
                self._on_config_change()
            return
        if not self._is_inside_root(path):
            return
        if is_watch_noise(path):
            logger.debug(f"Ignoring tooling write: {path}")
            return
        self.controller.handle_save(path, self._get_config())

    def start(self) -> None:
        if not os.path.isdir(self.root):
            raise FileNotFoundError(f"Directory not found: {self.root}")
        self._observer = self._observer_factory()
        self._observer.schedule(self.handler, self.root, recursive=True)

        config_dir = self._config_dir_outside_root()
        if config_dir is not None and config_dir.is_dir():
            self._observer.schedule(self.handler, str(config_dir), recursive=False)
            logger.debug(f"Watching {self._config_path} for configuration changes")

        self._observer.start()
        logger.info(f"Watching {self.root} for saved files")

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self.controller.shutdown()

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        """Block until stop_event is set or Ctrl+C, then shut down."""
        stop_event = stop_event or threading.Event()
        self.start()
        try:
            while not stop_event.wait(0.5):
                pass
        except KeyboardInterrupt:
            logger.info("Stopping watcher")
        finally:
            self.stop()
