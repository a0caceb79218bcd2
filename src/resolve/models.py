"""Display decisions produced by call-site resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DecisionKind = Literal["pending", "in-progress", "failed", "ready"]


@dataclass(frozen=True)
class AnchorRange:
    """Offsets of the matched call chunk in the current text."""

    start: int
    end: int


@dataclass(frozen=True)
class Insertion:
    offset: int
    text: str


@dataclass(frozen=True)
class Decision:
    """What to show for one call site in one pass.

    ``error`` is set for ``failed`` decisions and ``insertion`` for ``ready``
    decisions; both are None otherwise.
    """

    kind: DecisionKind
    anchor: AnchorRange
    snapshot_id: str | None = None
    error: str | None = None
    insertion: Insertion | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "start": self.anchor.start,
            "end": self.anchor.end,
            "snapshot_id": self.snapshot_id,
            "error": self.error,
            "insertion": (
                None
                if self.insertion is None
                else {"offset": self.insertion.offset, "text": self.insertion.text}
            ),
        }


__all__ = ["AnchorRange", "Decision", "DecisionKind", "Insertion"]
