"""User actions triggered from lenses, delegated to the host editor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, cast

from common.logger import get_logger
from lens.lenses import COMMAND_COPY_ERROR, COMMAND_INSERT_CODE

if TYPE_CHECKING:
    from lens.lenses import Lens

logger = get_logger(__name__)


class HostError(Exception):
    """Raised by a host when an editor operation fails."""


class Host(Protocol):
    def insert_text(self, document: str, offset: int, text: str) -> bool: ...

    def copy_to_clipboard(self, text: str) -> None: ...

    def show_message(self, message: str) -> None: ...


def insert_code(host: Host, document: str, offset: int, text: str) -> bool:
    """Insert generated code; a rejected edit is reported to the user."""
    try:
        applied = host.insert_text(document, offset, text)
    except HostError as exc:
        logger.warning("Insert into %s failed: %s", document, exc)
        host.show_message(f"Could not insert code: {exc}")
        return False

    if not applied:
        host.show_message("Could not insert code: the edit was rejected.")
    return applied


def copy_error(host: Host, error: str) -> bool:
    try:
        host.copy_to_clipboard(error)
    except HostError as exc:
        logger.warning("Copy to clipboard failed: %s", exc)
        host.show_message(f"Could not copy error: {exc}")
        return False

    host.show_message("Error copied to clipboard.")
    return True


def dispatch(host: Host, lens: Lens) -> bool:
    """Run the action behind ``lens``. Display-only lenses do nothing."""
    if lens.command == COMMAND_INSERT_CODE:
        document, offset, text = lens.arguments
        return insert_code(host, str(document), cast("int", offset), str(text))
    if lens.command == COMMAND_COPY_ERROR:
        (error,) = lens.arguments
        return copy_error(host, str(error))
    return False


__all__ = ["Host", "HostError", "copy_error", "dispatch", "insert_code"]
