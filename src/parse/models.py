"""Call-site model produced by compiler call extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class CallSite:
    """A compiler call located in one extraction pass.

    ``chunk`` re-locates the exact call text; ``description`` matches the
    ``do`` value of build snapshots. Line numbers are 1-based and only
    informational.
    """

    chunk: re.Pattern[str]
    description: re.Pattern[str]
    start_line: int
    end_line: int

    def to_dict(self) -> dict[str, object]:
        return {
            "start_line": self.start_line,
            "end_line": self.end_line,
            "chunk": self.chunk.pattern,
            "description": self.description.pattern,
        }


__all__ = ["CallSite"]
