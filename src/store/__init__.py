"""Snapshot store models and reading.

Discovery and watching live in ``store.discovery`` and ``store.listener``.
"""

from store.disk import DiskState, StoreError, empty_disk, load_disk, read_disk
from store.models import Disk, DiskMetadata, Snapshot, SnapshotCode, SnapshotStatus

__all__ = [
    "Disk",
    "DiskMetadata",
    "DiskState",
    "Snapshot",
    "SnapshotCode",
    "SnapshotStatus",
    "StoreError",
    "empty_disk",
    "load_disk",
    "read_disk",
]
