"""Lens provider: recomputes lenses per request from the latest store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from common.logger import get_logger
from lens.lenses import build_lenses
from parse.treesitter_calls import ParseError
from resolve.resolver import analyze
from store.disk import DiskState

if TYPE_CHECKING:
    from collections.abc import Callable

    from lens.lenses import Lens
    from resolve.models import Decision
    from store.models import Disk

logger = get_logger(__name__)


class LensProvider:
    """Holds the latest ``Disk`` and turns document text into lenses.

    Nothing is cached between requests; call sites are re-extracted from the
    text every time.
    """

    def __init__(self, state: DiskState | None = None) -> None:
        self.state = state if state is not None else DiskState()
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback fired when lenses need recomputing.

        Returns a function that removes the callback again.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def update_disk(self, disk: Disk) -> None:
        self.state.update(disk)
        for callback in list(self._listeners):
            callback()

    def provide_decisions(self, document: str, text: str) -> list[Decision]:
        """Resolve ``text``; unparsable text yields no decisions."""
        try:
            return analyze(text, self.state.current)
        except ParseError as exc:
            logger.debug("Cannot parse %s: %s", document, exc)
            return []

    def provide_lenses(self, document: str, text: str) -> list[Lens]:
        return build_lenses(document, self.provide_decisions(document, text))


__all__ = ["LensProvider"]
