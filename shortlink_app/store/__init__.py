"""
Persistent record store module.
Implements Strategy Pattern for flexible store backends.
"""

from .strategies import RecordStore, SQLRecordStore, InMemoryRecordStore
from .factory import StoreFactory, StoreBackend

__all__ = [
    "RecordStore",
    "SQLRecordStore",
    "InMemoryRecordStore",
    "StoreFactory",
    "StoreBackend",
]
