"""Key-value persistence backends for the settings blob."""

from .base import DataStore
from .json_file import JsonFileDataStore
from .memory import MemoryDataStore

__all__ = [
    "DataStore",
    "JsonFileDataStore",
    "MemoryDataStore",
]
