"""Pattern construction for compiler call identity.

Two patterns identify a call site:

- the chunk pattern reproduces the call's full source lines with every
  whitespace run relaxed to ``\\s*``, so it only matches while the call's
  interior is unchanged;
- the description pattern is built from the literal value of the ``do``
  field and is used to find build snapshots for the call.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

_REGEX_METACHARACTERS = re.compile(r"[/\-\\^$*+?.()|[\]{}]")
_WHITESPACE_RUN = re.compile(r"\s+")

TEMPLATE_WILDCARD = ".*"


def escape_regex_characters(text: str) -> str:
    """Backslash-escape regex metacharacters, leaving whitespace untouched."""
    return _REGEX_METACHARACTERS.sub(r"\\\g<0>", text)


def chunk_pattern(code: str, start_line: int, end_line: int) -> re.Pattern[str] | None:
    """Build the chunk pattern for the 1-based inclusive line range.

    Whole lines are used rather than the call's column span, so siblings
    sharing a line with the call are part of the chunk.

    Returns None when the line range does not lie within ``code``.
    """
    if start_line < 1 or end_line < start_line:
        return None

    lines = code.split("\n")
    if end_line > len(lines):
        return None

    call = " ".join(line.strip() for line in lines[start_line - 1 : end_line])
    escaped = escape_regex_characters(call.strip())
    return re.compile(_WHITESPACE_RUN.sub(r"\\s*", escaped), re.MULTILINE)


def string_description_pattern(value: str) -> re.Pattern[str]:
    return re.compile(escape_regex_characters(value))


def template_description_pattern(segments: Sequence[str]) -> re.Pattern[str]:
    """Join the literal template segments with wildcards for interpolations."""
    return re.compile(
        TEMPLATE_WILDCARD.join(escape_regex_characters(segment) for segment in segments)
    )


__all__ = [
    "TEMPLATE_WILDCARD",
    "chunk_pattern",
    "escape_regex_characters",
    "string_description_pattern",
    "template_description_pattern",
]
