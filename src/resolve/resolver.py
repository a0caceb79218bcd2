"""Correlating extracted call sites with build snapshots.

Each pass is a pure function of (text, call sites, disk):

1. re-locate the call's chunk pattern; no match means the call changed
   and nothing is shown for it;
2. collect snapshots whose ``do`` matches the description pattern;
3. pick the newest, breaking timestamp ties by the smallest snapshot id;
4. anything older than the store watermark is ``pending``; otherwise the
   snapshot status decides between ``in-progress``, ``failed`` and ``ready``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from common.logger import get_logger
from parse.functions import FunctionShapeError, to_async_arrow
from parse.treesitter_calls import extract_compiler_calls
from resolve.models import AnchorRange, Decision, Insertion

if TYPE_CHECKING:
    import re
    from collections.abc import Sequence

    from parse.models import CallSite
    from store.models import Disk, Snapshot

logger = get_logger(__name__)

INSERTION_SEPARATOR = ", "


class PayloadError(ValueError):
    """Raised when a successful snapshot cannot be turned into an insertion."""


def find_anchor(text: str, call: CallSite) -> AnchorRange | None:
    match = call.chunk.search(text)
    if match is None:
        return None
    return AnchorRange(start=match.start(), end=match.end())


def matching_snapshots(
    disk: Disk, description: re.Pattern[str]
) -> list[tuple[str, Snapshot]]:
    """Return every (id, snapshot) whose ``do`` matches the description."""
    return [
        (snapshot_id, snapshot)
        for snapshot_id, snapshot in disk.data.items()
        if description.search(snapshot.do)
    ]


def select_snapshot(
    candidates: Sequence[tuple[str, Snapshot]],
) -> tuple[str, Snapshot] | None:
    """Pick the newest candidate; equal timestamps go to the smallest id."""
    if not candidates:
        return None
    return min(candidates, key=lambda item: (-item[1].timestamp, item[0]))


def is_stale(snapshot: Snapshot, disk: Disk) -> bool:
    return snapshot.timestamp < disk.metadata.last_updated


def insertion_offset(text: str, anchor: AnchorRange) -> int:
    """Offset just past the last ``}`` inside the anchor range.

    Raises:
        PayloadError: If the anchor range holds no closing brace.
    """
    index = text.rfind("}", anchor.start, anchor.end)
    if index < 0:
        msg = f"no closing brace in anchor range {anchor.start}-{anchor.end}"
        raise PayloadError(msg)
    return index + 1


def build_insertion(text: str, anchor: AnchorRange, snapshot: Snapshot) -> Insertion:
    """Build the trailing-argument insertion for a successful snapshot.

    Raises:
        PayloadError: If there is no code or no insertion point.
        FunctionShapeError: If the code is not an async function.
    """
    if snapshot.code is None:
        msg = "successful snapshot has no code"
        raise PayloadError(msg)

    arrow = to_async_arrow(snapshot.code.fn)
    return Insertion(
        offset=insertion_offset(text, anchor),
        text=f"{INSERTION_SEPARATOR}{arrow}",
    )


def resolve_call(text: str, call: CallSite, disk: Disk) -> Decision | None:
    """Decide what to show for one call site, or None to show nothing."""
    anchor = find_anchor(text, call)
    if anchor is None:
        return None

    selected = select_snapshot(matching_snapshots(disk, call.description))
    if selected is None:
        return Decision(kind="pending", anchor=anchor)

    snapshot_id, snapshot = selected
    if is_stale(snapshot, disk):
        return Decision(kind="pending", anchor=anchor, snapshot_id=snapshot_id)

    if snapshot.status == "compiling":
        return Decision(kind="in-progress", anchor=anchor, snapshot_id=snapshot_id)

    if snapshot.status == "failure":
        return Decision(
            kind="failed",
            anchor=anchor,
            snapshot_id=snapshot_id,
            error=snapshot.error or "",
        )

    try:
        insertion = build_insertion(text, anchor, snapshot)
    except (PayloadError, FunctionShapeError) as exc:
        logger.debug("Skipping call at L%d: %s", call.start_line, exc)
        return None

    return Decision(
        kind="ready",
        anchor=anchor,
        snapshot_id=snapshot_id,
        insertion=insertion,
    )


def resolve_calls(text: str, calls: Sequence[CallSite], disk: Disk) -> list[Decision]:
    decisions: list[Decision] = []
    for call in calls:
        decision = resolve_call(text, call, disk)
        if decision is not None:
            decisions.append(decision)
    return decisions


def analyze(text: str, disk: Disk) -> list[Decision]:
    """Run extraction and resolution over ``text``.

    Raises:
        ParseError: If ``text`` does not parse.
    """
    return resolve_calls(text, extract_compiler_calls(text), disk)


__all__ = [
    "INSERTION_SEPARATOR",
    "PayloadError",
    "analyze",
    "build_insertion",
    "find_anchor",
    "insertion_offset",
    "is_stale",
    "matching_snapshots",
    "resolve_call",
    "resolve_calls",
    "select_snapshot",
]
