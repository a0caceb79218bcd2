"""Watching the snapshot store and delivering fresh copies.

Discovery is retried with a fixed backoff until exactly one store exists.
After that the store's directory is watched: every change or creation
re-reads the whole store and hands it to ``on_update``; a deletion tears the
watch down and starts discovery again.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from common.logger import get_logger
from store.discovery import MultipleStoresError, StoreDiscoveryError, find_disk_path
from store.disk import StoreError, read_disk

if TYPE_CHECKING:
    from collections.abc import Callable

    from watchdog.observers.api import BaseObserver

    from store.models import Disk

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 5.0


def poll(
    fn: Callable[[], T],
    *,
    wait: float = DEFAULT_POLL_INTERVAL,
    stop: threading.Event | None = None,
) -> T | None:
    """Call ``fn`` until it stops raising ``StoreDiscoveryError``.

    Returns None only when ``stop`` is set while waiting between attempts.
    """
    stop = stop if stop is not None else threading.Event()
    while True:
        try:
            return fn()
        except StoreDiscoveryError as exc:
            logger.debug("Store discovery failed, retrying in %ss: %s", wait, exc)
        if stop.wait(wait):
            return None


def _event_path(raw: bytes | str) -> Path:
    return Path(os.fsdecode(raw))


class StoreEventHandler(FileSystemEventHandler):
    """Routes watchdog events for one store file to change/delete callbacks."""

    def __init__(
        self,
        store_path: Path,
        on_change: Callable[[], None],
        on_delete: Callable[[], None],
    ) -> None:
        super().__init__()
        self.store_path = store_path
        self.on_change = on_change
        self.on_delete = on_delete

    def _is_store(self, raw: bytes | str) -> bool:
        return _event_path(raw) == self.store_path

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_store(event.src_path):
            self.on_change()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_store(event.src_path):
            self.on_change()

    def on_deleted(self, event: FileSystemEvent) -> None:
        # Removing the .functions directory also removes the store.
        if self._is_store(event.src_path) or _event_path(event.src_path) == (
            self.store_path.parent
        ):
            self.on_delete()

    def on_moved(self, event: FileSystemEvent) -> None:
        if self._is_store(event.src_path):
            self.on_delete()
        elif self._is_store(event.dest_path):
            self.on_change()


class StoreListener:
    """Keeps ``on_update`` supplied with complete store snapshots.

    Args:
        root: Workspace root to search for ``.functions/cache.json``
        on_update: Called with each freshly read ``Disk``
        on_error: Called with a user-facing message when several stores exist
        store_path: Explicit store location; skips discovery when given
        poll_interval: Seconds between discovery attempts
    """

    def __init__(
        self,
        root: Path,
        on_update: Callable[[Disk], None],
        *,
        on_error: Callable[[str], None] | None = None,
        store_path: Path | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.root = root
        self.on_update = on_update
        self.on_error = on_error
        self.store_path = store_path
        self.poll_interval = poll_interval
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._observer: BaseObserver | None = None
        self._thread: threading.Thread | None = None
        self.disk_path: Path | None = None

    def start(self) -> None:
        self._stop.clear()
        self._spawn(self._run)

    def stop(self) -> None:
        self._stop.set()
        self._unwatch()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _spawn(self, target: Callable[[], None]) -> None:
        self._thread = threading.Thread(
            target=target, name="autolens-store-listener", daemon=True
        )
        self._thread.start()

    def _discover(self) -> Path:
        if self.store_path is not None:
            if not self.store_path.is_file():
                msg = f"Snapshot store {self.store_path} does not exist yet"
                raise StoreDiscoveryError(msg)
            return self.store_path.resolve()

        try:
            return find_disk_path(self.root)
        except MultipleStoresError as exc:
            logger.error("%s", exc)
            if self.on_error is not None:
                self.on_error(str(exc))
            raise

    def _run(self) -> None:
        disk_path = poll(self._discover, wait=self.poll_interval, stop=self._stop)
        if disk_path is None:
            return
        self.disk_path = disk_path
        self.refresh()
        self._watch(disk_path)

    def refresh(self) -> None:
        """Re-read the whole store and deliver it; read failures are logged."""
        if self.disk_path is None:
            return
        try:
            disk = read_disk(self.disk_path)
        except StoreError as exc:
            logger.warning("Could not read snapshot store: %s", exc)
            return
        self.on_update(disk)

    def _watch(self, disk_path: Path) -> None:
        handler = StoreEventHandler(
            disk_path,
            on_change=self.refresh,
            on_delete=self._handle_delete,
        )
        observer = Observer()
        observer.schedule(handler, str(disk_path.parent), recursive=False)
        with self._lock:
            if self._stop.is_set():
                return
            self._observer = observer
            observer.start()

    def _unwatch(self) -> None:
        with self._lock:
            observer = self._observer
            self._observer = None
        if observer is not None:
            observer.stop()
            if observer is not threading.current_thread():
                observer.join()

    def _handle_delete(self) -> None:
        logger.info("Snapshot store %s was removed; rediscovering", self.disk_path)
        self.disk_path = None
        # Runs on the observer thread, which cannot join itself.
        self._spawn(self._restart)

    def _restart(self) -> None:
        self._unwatch()
        if not self._stop.is_set():
            self._run()


__all__ = ["DEFAULT_POLL_INTERVAL", "StoreEventHandler", "StoreListener", "poll"]
