"""Reading the snapshot store and holding the latest copy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from store.models import Disk

if TYPE_CHECKING:
    from pathlib import Path


class StoreError(Exception):
    """Raised when the snapshot store cannot be read or is malformed."""


def empty_disk() -> Disk:
    return Disk()


def load_disk(payload: bytes | str) -> Disk:
    """Decode and validate a serialized store."""
    try:
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in snapshot store: {exc}"
        raise StoreError(msg) from exc

    try:
        return Disk.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid snapshot store: {exc}"
        raise StoreError(msg) from exc


def read_disk(path: Path) -> Disk:
    """Read the whole store at ``path``.

    Raises:
        StoreError: If the file cannot be read, decoded or validated.
    """
    try:
        payload = path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read snapshot store {path}: {exc}"
        raise StoreError(msg) from exc

    try:
        return load_disk(payload)
    except StoreError as exc:
        msg = f"{path}: {exc}"
        raise StoreError(msg) from exc


class DiskState:
    """Latest store contents, replaced wholesale on each update."""

    def __init__(self, disk: Disk | None = None) -> None:
        self._disk = disk if disk is not None else empty_disk()

    @property
    def current(self) -> Disk:
        return self._disk

    def update(self, disk: Disk) -> None:
        self._disk = disk


__all__ = ["DiskState", "StoreError", "empty_disk", "load_disk", "read_disk"]
