"""
Test suite for configuration file watching.

- ConfigFileWatcher event mapping, debouncing and lifecycle
- ConfigFileEventHandler forwarding
"""
