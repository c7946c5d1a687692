"""
Subset configuration loading and snapshot management.

Loads the project's subset configuration file, validates it, and publishes
immutable snapshots that in-flight completion requests can keep using while
a reload swaps in a new one.
"""

import json
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union
import logging

from pydantic import ValidationError

from core.models.config import SubsetConfig
from .defaults import DEFAULT_CONFIG_FILENAME

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Path, Optional[SubsetConfig]], None]


class ConfigLoadError(Exception):
    """Raised when a subset configuration file cannot be loaded"""

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class SubsetConfigLoader:
    """Load and validate subset configuration files"""

    def __init__(self, default_filename: str = DEFAULT_CONFIG_FILENAME):
        self.default_filename = default_filename

    def resolve_path(
        self,
        config_path: Optional[Union[str, Path]] = None,
        root: Optional[Union[str, Path]] = None
    ) -> Path:
        """Resolve a configured path against the workspace root"""
        path = Path(config_path or self.default_filename).expanduser()
        if not path.is_absolute() and root is not None:
            path = Path(root) / path
        return path.resolve()

    def load(self, path: Union[str, Path]) -> SubsetConfig:
        """
        Load a subset configuration file.

        Args:
            path: Path to the JSON configuration file

        Returns:
            Validated, frozen SubsetConfig

        Raises:
            ConfigLoadError: If the file is missing or unreadable, not JSON, or fails validation
        """
        path = Path(path)

        try:
            exists = path.exists()
            is_file = exists and path.is_file()
        except OSError as e:
            raise ConfigLoadError(path, f"Cannot access config: {e}") from e

        if not exists:
            raise ConfigLoadError(path, "Config file not found")
        if not is_file:
            raise ConfigLoadError(path, "Config path is not a file")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(path, f"Invalid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(path, f"Cannot read config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigLoadError(path, "Config must be a JSON object")

        try:
            config = SubsetConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(path, f"Invalid subset config: {e}") from e

        logger.info(
            f"Loaded subset config from {path}: {len(config.subsets)} properties, "
            f"{len(config.overrides)} override lists"
        )
        return config


class SubsetConfigStore:
    """
    Per-path subset configuration snapshots.

    Reads never lock: the snapshot mapping is replaced wholesale under a
    single writer lock, so a reader sees either the previous or the new
    mapping. A path whose file fails to load maps to ``None``, which the
    resolution pipeline treats as an empty configuration.
    """

    def __init__(self, loader: Optional[SubsetConfigLoader] = None):
        self.loader = loader or SubsetConfigLoader()
        self._snapshots: Dict[Path, Optional[SubsetConfig]] = {}
        self._write_lock = threading.Lock()
        self._listeners: List[SnapshotListener] = []

    @staticmethod
    def _key(path: Union[str, Path]) -> Path:
        return Path(path).expanduser().resolve()

    def get(self, path: Union[str, Path]) -> Optional[SubsetConfig]:
        """Current snapshot for a path, loading it on first use"""
        key = self._key(path)
        snapshots = self._snapshots
        if key in snapshots:
            return snapshots[key]
        return self.reload(key)

    def reload(self, path: Union[str, Path]) -> Optional[SubsetConfig]:
        """Load a path again and publish the result, replacing the old snapshot"""
        key = self._key(path)
        try:
            snapshot: Optional[SubsetConfig] = self.loader.load(key)
        except ConfigLoadError as e:
            logger.error(f"Failed to load subset config: {e}")
            snapshot = None

        self._publish(key, snapshot)
        return snapshot

    def _publish(self, key: Path, snapshot: Optional[SubsetConfig]) -> None:
        with self._write_lock:
            snapshots = dict(self._snapshots)
            snapshots[key] = snapshot
            self._snapshots = snapshots

            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(key, snapshot)
            except Exception as e:
                logger.error(f"Config snapshot listener failed for {key}: {e}", exc_info=True)

    def is_tracked(self, path: Union[str, Path]) -> bool:
        return self._key(path) in self._snapshots

    def paths(self) -> List[Path]:
        """Paths with a published snapshot (loaded or failed)"""
        return list(self._snapshots.keys())

    def add_listener(self, listener: SnapshotListener) -> None:
        with self._write_lock:
            self._listeners.append(listener)

    def clear(self) -> None:
        """Drop every snapshot"""
        with self._write_lock:
            self._snapshots = {}
        logger.info("Subset config snapshots cleared")
