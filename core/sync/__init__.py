"""
Configuration file synchronization.

Key Components:
- ConfigFileWatcher: watchdog-based reloads of subset configuration files
- ConfigFileEventHandler: forwards watchdog events to the watcher
"""

from .watcher import ConfigFileEventHandler, ConfigFileWatcher

__all__ = [
    "ConfigFileWatcher",
    "ConfigFileEventHandler",
]
