"""Store implementations for fixture-spine.

Modules
-------
memory    MemoryStore: dict-backed Store Interface for single-process use and tests

Tags:
    fixture-spine, store

Doc-Types:
    package-overview
"""

from fixturespine.store.memory import (
    MemoryCollection,
    MemoryNotificationSink,
    MemoryRecord,
    MemoryRelatedRecord,
    MemoryStore,
)

__all__ = [
    "MemoryCollection",
    "MemoryNotificationSink",
    "MemoryRecord",
    "MemoryRelatedRecord",
    "MemoryStore",
]
