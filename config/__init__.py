"""
Configuration management for subsetcss

Handles loading, validation, and snapshot publishing of subset configurations.
"""

from .loader import ConfigLoadError, SubsetConfigLoader, SubsetConfigStore
from .defaults import DEFAULT_CONFIG_FILENAME, DEFAULT_SETTINGS

__all__ = [
    "ConfigLoadError",
    "SubsetConfigLoader",
    "SubsetConfigStore",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_SETTINGS"
]
