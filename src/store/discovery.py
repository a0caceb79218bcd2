"""Locating the snapshot store inside a workspace."""

from __future__ import annotations

from typing import TYPE_CHECKING

from common.logger import get_logger
from scan.files import DEFAULT_EXCLUDE_PATTERNS, find_store_files

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = get_logger(__name__)


class StoreDiscoveryError(Exception):
    """Raised when no single snapshot store can be chosen."""


class StoreNotFoundError(StoreDiscoveryError):
    """Raised when the workspace has no snapshot store yet."""


class MultipleStoresError(StoreDiscoveryError):
    """Raised when the workspace has more than one snapshot store."""

    def __init__(self, paths: list[Path]) -> None:
        self.paths = paths
        listing = "\n".join(str(path) for path in paths)
        super().__init__(
            f"Multiple snapshot stores found:\n{listing}\nYou should only have one."
        )


def find_disk_path(
    root: Path,
    *,
    exclude_patterns: Iterable[str] | None = DEFAULT_EXCLUDE_PATTERNS,
) -> Path:
    """Return the single ``.functions/cache.json`` under ``root``.

    Raises:
        StoreNotFoundError: If there is no store.
        MultipleStoresError: If there is more than one store; never guesses.
    """
    paths = find_store_files(root, exclude_patterns=exclude_patterns)
    if len(paths) > 1:
        raise MultipleStoresError(paths)
    if not paths:
        msg = f"No snapshot store found under {root}"
        raise StoreNotFoundError(msg)

    logger.info("Found snapshot store at %s", paths[0])
    return paths[0].resolve()


__all__ = [
    "MultipleStoresError",
    "StoreDiscoveryError",
    "StoreNotFoundError",
    "find_disk_path",
]
