"""
Subset configuration file watcher.

Reloads configuration snapshots when their backing files change on disk.
Used when the editor does not forward file change notifications itself.
"""

import asyncio
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Set, Union

from watchdog.events import FileSystemEvent as WatchdogEvent
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from config.loader import SubsetConfigStore
from core.models.config import SubsetConfig

logger = logging.getLogger(__name__)


class ConfigFileWatcher:
    """
    Watches the directories of loaded configuration files with watchdog.

    Events arrive on the watchdog thread. With an event loop attached they
    are debounced on that loop; otherwise the reload runs immediately on the
    watchdog thread, which the store's atomic publish makes safe.
    """

    def __init__(self, store: SubsetConfigStore, debounce_ms: int = 200):
        self.store = store
        self.debounce_ms = debounce_ms

        self.observer: Optional[Observer] = None
        self.event_handler: Optional["ConfigFileEventHandler"] = None

        self._watched_files: Set[Path] = set()
        self._scheduled_dirs: Dict[Path, object] = {}
        self._lock = threading.Lock()

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: Dict[Path, asyncio.TimerHandle] = {}

        self.store.add_listener(self._on_snapshot_published)

    @property
    def is_running(self) -> bool:
        return self.observer is not None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> bool:
        """
        Start watching every path the store knows about.

        Returns:
            True if the observer is running
        """
        if self.observer is not None:
            logger.debug("Config watcher already running")
            return True

        self._loop = loop
        self.event_handler = ConfigFileEventHandler(self)

        try:
            self.observer = Observer()
            for path in self.store.paths():
                self._watched_files.add(path)
            for path in list(self._watched_files):
                self._schedule_directory(path.parent)
            self.observer.start()
        except Exception as e:
            logger.error(f"Failed to start config watcher: {e}")
            self.observer = None
            self.event_handler = None
            return False

        logger.info(f"Watching {len(self._watched_files)} subset config files")
        return True

    def stop(self) -> None:
        """Stop the observer and cancel pending reloads"""
        if self.observer is None:
            return

        try:
            self.observer.stop()
            self.observer.join(timeout=5.0)
        except Exception as e:
            logger.warning(f"Error stopping config watcher: {e}")
        finally:
            self.observer = None
            self.event_handler = None
            with self._lock:
                self._scheduled_dirs.clear()

        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()
        logger.info("Stopped config watcher")

    def watch(self, path: Union[str, Path]) -> None:
        """Start tracking a configuration file"""
        path = Path(path).expanduser().resolve()
        with self._lock:
            self._watched_files.add(path)
        if self.observer is not None:
            self._schedule_directory(path.parent)

    def is_watched(self, path: Union[str, Path]) -> bool:
        return Path(path).expanduser().resolve() in self._watched_files

    def _schedule_directory(self, directory: Path) -> None:
        with self._lock:
            if directory in self._scheduled_dirs or self.observer is None:
                return
            if not directory.is_dir():
                logger.warning(f"Config directory does not exist, not watching: {directory}")
                return
            self._scheduled_dirs[directory] = self.observer.schedule(
                self.event_handler, str(directory), recursive=False
            )
            logger.debug(f"Watching config directory {directory}")

    def _on_snapshot_published(self, path: Path, snapshot: Optional[SubsetConfig]) -> None:
        if not self.is_watched(path):
            self.watch(path)

    def handle_event(self, event: WatchdogEvent) -> None:
        """Map a watchdog event to reloads of the affected config files"""
        if event.is_directory:
            return

        candidates = [event.src_path, getattr(event, "dest_path", None)]
        for raw in candidates:
            if not raw:
                continue
            path = Path(raw).resolve()
            if path in self._watched_files:
                logger.debug(f"Config file event {event.event_type} for {path}")
                self._schedule_reload(path)

    def _schedule_reload(self, path: Path) -> None:
        loop = self._loop
        if loop is not None and not loop.is_closed():
            try:
                loop.call_soon_threadsafe(self._debounce_reload, path)
                return
            except RuntimeError as e:
                logger.debug(f"Event loop unavailable, reloading inline: {e}")
        self._reload(path)

    def _debounce_reload(self, path: Path) -> None:
        existing = self._pending.pop(path, None)
        if existing is not None:
            existing.cancel()
        self._pending[path] = self._loop.call_later(
            self.debounce_ms / 1000.0, self._reload, path
        )

    def _reload(self, path: Path) -> None:
        self._pending.pop(path, None)
        logger.info(f"Reloading subset config {path}")
        self.store.reload(path)


class ConfigFileEventHandler(FileSystemEventHandler):
    """Forwards watchdog events to ConfigFileWatcher"""

    def __init__(self, watcher: ConfigFileWatcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event: WatchdogEvent) -> None:
        if event.event_type not in ("created", "modified", "deleted", "moved"):
            return
        try:
            self.watcher.handle_event(event)
        except Exception as e:
            logger.error(f"Error handling config file event {event}: {e}", exc_info=True)
