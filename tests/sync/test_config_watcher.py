"""
Tests for ConfigFileWatcher event handling and debouncing.
"""

import asyncio
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from config.loader import SubsetConfigStore
from core.sync.watcher import ConfigFileEventHandler, ConfigFileWatcher


def write_config(path: Path, color: str) -> Path:
    path.write_text(json.dumps({"subsets": {"color": [color]}}), encoding="utf-8")
    return path


class TestConfigFileWatcher:
    """Test mapping of watchdog events to store reloads"""

    def setup_method(self):
        self.store = SubsetConfigStore()
        self.watcher = ConfigFileWatcher(self.store, debounce_ms=50)

    def teardown_method(self):
        self.watcher.stop()

    def test_watch(self, tmp_path):
        path = tmp_path / ".subsetcss.json"

        assert not self.watcher.is_watched(path)
        self.watcher.watch(path)
        assert self.watcher.is_watched(path)

    def test_published_snapshots_are_watched(self, tmp_path):
        path = write_config(tmp_path / ".subsetcss.json", "red")

        self.store.get(path)

        assert self.watcher.is_watched(path)

    @pytest.mark.parametrize("event_cls", [FileModifiedEvent, FileCreatedEvent, FileDeletedEvent])
    def test_event_reloads_watched_file(self, tmp_path, event_cls):
        path = tmp_path / ".subsetcss.json"
        self.watcher.watch(path)

        with patch.object(self.store, "reload") as reload:
            self.watcher.handle_event(event_cls(str(path)))

        reload.assert_called_once_with(path.resolve())

    def test_move_onto_watched_file(self, tmp_path):
        path = tmp_path / ".subsetcss.json"
        self.watcher.watch(path)

        with patch.object(self.store, "reload") as reload:
            self.watcher.handle_event(FileMovedEvent(str(tmp_path / "tmp123"), str(path)))

        reload.assert_called_once_with(path.resolve())

    def test_unrelated_file_ignored(self, tmp_path):
        self.watcher.watch(tmp_path / ".subsetcss.json")

        with patch.object(self.store, "reload") as reload:
            self.watcher.handle_event(FileModifiedEvent(str(tmp_path / "styles.css")))

        reload.assert_not_called()

    def test_directory_events_ignored(self, tmp_path):
        self.watcher.watch(tmp_path / ".subsetcss.json")

        with patch.object(self.store, "reload") as reload:
            self.watcher.handle_event(DirCreatedEvent(str(tmp_path / ".subsetcss.json")))

        reload.assert_not_called()

    def test_deleted_file_publishes_none(self, tmp_path):
        path = write_config(tmp_path / ".subsetcss.json", "red")
        assert self.store.get(path) is not None

        path.unlink()
        self.watcher.handle_event(FileDeletedEvent(str(path)))

        assert self.store.get(path) is None

    def test_modified_file_publishes_new_snapshot(self, tmp_path):
        path = write_config(tmp_path / ".subsetcss.json", "red")
        self.store.get(path)

        write_config(path, "blue")
        self.watcher.handle_event(FileModifiedEvent(str(path)))

        assert self.store.get(path).subsets["color"] == ("blue",)

    def test_start_and_stop_are_idempotent(self, tmp_path):
        path = write_config(tmp_path / ".subsetcss.json", "red")
        self.store.get(path)

        assert self.watcher.start()
        assert self.watcher.start()
        assert self.watcher.is_running

        self.watcher.stop()
        self.watcher.stop()
        assert not self.watcher.is_running

    def test_missing_directory_not_scheduled(self, tmp_path):
        assert self.watcher.start()
        self.watcher.watch(tmp_path / "missing" / ".subsetcss.json")

        assert self.watcher.is_running
        assert self.watcher.is_watched(tmp_path / "missing" / ".subsetcss.json")

    @pytest.mark.asyncio
    async def test_events_debounced_on_loop(self, tmp_path):
        path = write_config(tmp_path / ".subsetcss.json", "red")
        self.store.get(path)
        assert self.watcher.start(asyncio.get_running_loop())

        with patch.object(self.store, "reload") as reload:
            for _ in range(3):
                self.watcher.handle_event(FileModifiedEvent(str(path)))
            await asyncio.sleep(0.3)

        reload.assert_called_once_with(path.resolve())


class TestConfigFileEventHandler:
    """Test the watchdog handler forwarding"""

    def test_forwards_events(self, tmp_path):
        store = SubsetConfigStore()
        watcher = ConfigFileWatcher(store)
        handler = ConfigFileEventHandler(watcher)
        event = FileModifiedEvent(str(tmp_path / "a.json"))

        with patch.object(watcher, "handle_event") as handle_event:
            handler.on_any_event(event)

        handle_event.assert_called_once_with(event)

    def test_handler_errors_are_logged(self, tmp_path):
        watcher = ConfigFileWatcher(SubsetConfigStore())
        handler = ConfigFileEventHandler(watcher)

        with patch.object(watcher, "handle_event", side_effect=RuntimeError("boom")):
            handler.on_any_event(FileModifiedEvent(str(tmp_path / "a.json")))
