"""Configuration and persisted preferences."""

from skillshelf.config.manager import ConfigManager
from skillshelf.config.store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = ["ConfigManager", "JsonFileStore", "KeyValueStore", "MemoryStore"]
