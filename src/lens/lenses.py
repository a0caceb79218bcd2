"""Mapping display decisions to inline lens items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from resolve.models import Decision

COMMAND_INSERT_CODE = "autolens.insertCode"
COMMAND_COPY_ERROR = "autolens.copyError"

_STATUS_TITLES = {
    "pending": "Waiting for compilation",
    "in-progress": "Compiling…",
    "failed": "Compilation failed",
    "ready": "Compiled",
}


@dataclass(frozen=True)
class Lens:
    """One inline affordance; ``command`` is empty for display-only items."""

    offset: int
    title: str
    command: str = ""
    arguments: tuple[object, ...] = field(default_factory=tuple)


def lenses_for_decision(document: str, decision: Decision) -> list[Lens]:
    offset = decision.anchor.start
    lenses = [Lens(offset=offset, title=_STATUS_TITLES[decision.kind])]

    if decision.kind == "failed" and decision.error is not None:
        lenses.append(
            Lens(
                offset=offset,
                title="Copy error",
                command=COMMAND_COPY_ERROR,
                arguments=(decision.error,),
            )
        )
    elif decision.kind == "ready" and decision.insertion is not None:
        lenses.append(
            Lens(
                offset=offset,
                title="Insert code",
                command=COMMAND_INSERT_CODE,
                arguments=(
                    document,
                    decision.insertion.offset,
                    decision.insertion.text,
                ),
            )
        )
    return lenses


def build_lenses(document: str, decisions: Sequence[Decision]) -> list[Lens]:
    """Flatten decisions for ``document`` into lens items, in order."""
    lenses: list[Lens] = []
    for decision in decisions:
        lenses.extend(lenses_for_decision(document, decision))
    return lenses


__all__ = [
    "COMMAND_COPY_ERROR",
    "COMMAND_INSERT_CODE",
    "Lens",
    "build_lenses",
    "lenses_for_decision",
]
