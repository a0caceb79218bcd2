"""Tree-sitter based extraction of compiler calls from TS/JS sources.

A compiler call is any call expression whose first argument is an object
literal with a ``do`` field holding a string or template literal:

    export const sum = compiler({
      do: "adds numbers",
      in: z.number().array(),
      out: z.number(),
    });
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from parse.models import CallSite
from parse.patterns import (
    chunk_pattern,
    string_description_pattern,
    template_description_pattern,
)
from parse.treesitter_language import (
    _decode_node_text,
    _describe_syntax_error,
    _get_parser,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node

DESCRIPTION_KEY = "do"

# Bare carriage returns end a line in JS but not for the parser.
_BARE_CARRIAGE_RETURN = re.compile(r"\r(?!\n)")

_ESCAPE_SEQUENCE = re.compile(
    r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|\r\n|[\s\S])"
)
_SINGLE_CHAR_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


class ParseError(Exception):
    """Raised when source text cannot be parsed without syntax errors."""


def _decode_escape(match: re.Match[str]) -> str:
    sequence = match.group(1)
    if sequence in _LINE_CONTINUATIONS:
        return ""
    if sequence.startswith("u{"):
        return chr(int(sequence[2:-1], 16))
    if len(sequence) > 1 and sequence[0] in "ux":
        return chr(int(sequence[1:], 16))
    return _SINGLE_CHAR_ESCAPES.get(sequence, sequence)


def _cook(raw: str) -> str:
    """Decode JS escape sequences the way the runtime value would read.

    Raises:
        ValueError: If an escape names a code point outside Unicode.
    """
    cooked = _ESCAPE_SEQUENCE.sub(_decode_escape, raw)
    # \uD83D\uDE00 style pairs decode to lone surrogates; recombine them.
    return cooked.encode("utf-16", "surrogatepass").decode("utf-16")


def _template_segments(source_bytes: bytes, node: Node) -> list[str]:
    """Return the cooked literal text between the template's substitutions."""
    segments: list[str] = []
    cursor = node.start_byte + 1
    for child in node.named_children:
        if child.type != "template_substitution":
            continue
        segments.append(source_bytes[cursor : child.start_byte].decode("utf8"))
        cursor = child.end_byte
    segments.append(source_bytes[cursor : node.end_byte - 1].decode("utf8"))

    return [
        _cook(segment.replace("\r\n", "\n").replace("\r", "\n"))
        for segment in segments
    ]


def _unwrap_parentheses(node: Node) -> Node:
    while node.type == "parenthesized_expression" and node.named_child_count == 1:
        node = node.named_children[0]
    return node


def _description_pattern(source_bytes: bytes, value: Node) -> re.Pattern[str] | None:
    value = _unwrap_parentheses(value)
    try:
        if value.type == "string":
            raw = source_bytes[value.start_byte + 1 : value.end_byte - 1].decode("utf8")
            return string_description_pattern(_cook(raw))
        if value.type == "template_string":
            return template_description_pattern(_template_segments(source_bytes, value))
    except (UnicodeDecodeError, ValueError):
        return None
    return None


def _first_argument(call_node: Node) -> Node | None:
    arguments = call_node.child_by_field_name("arguments")
    # Tagged templates put a template_string in the arguments field.
    if arguments is None or arguments.type != "arguments":
        return None

    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def _iter_do_values(source_bytes: bytes, object_node: Node) -> Iterator[Node]:
    for prop in object_node.named_children:
        if prop.type != "pair":
            continue
        key = prop.child_by_field_name("key")
        if key is None or key.type != "property_identifier":
            continue
        if _decode_node_text(source_bytes, key) != DESCRIPTION_KEY:
            continue
        value = prop.child_by_field_name("value")
        if value is not None:
            yield value


def _call_sites_for(code: str, source_bytes: bytes, call_node: Node) -> list[CallSite]:
    first_arg = _first_argument(call_node)
    if first_arg is None or first_arg.type != "object":
        return []

    start_line = call_node.start_point[0] + 1
    end_line = call_node.end_point[0] + 1

    sites: list[CallSite] = []
    for value in _iter_do_values(source_bytes, first_arg):
        chunk = chunk_pattern(code, start_line, end_line)
        description = _description_pattern(source_bytes, value)
        if chunk is not None and description is not None:
            sites.append(
                CallSite(
                    chunk=chunk,
                    description=description,
                    start_line=start_line,
                    end_line=end_line,
                )
            )
    return sites


def extract_compiler_calls(code: str) -> list[CallSite]:
    """Extract compiler call sites from TS/JS source text.

    Calls are returned in source order, an enclosing call before the calls
    nested inside it. Calls whose ``do`` value is not a string or template
    literal are left out.

    Raises:
        ParseError: If the source contains a syntax error.
    """
    code = _BARE_CARRIAGE_RETURN.sub("\n", code)
    source_bytes = code.encode("utf8")
    tree = _get_parser().parse(source_bytes)
    root_node = tree.root_node
    if root_node.has_error:
        raise ParseError(_describe_syntax_error(root_node))

    calls: list[CallSite] = []
    stack = [root_node]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            calls.extend(_call_sites_for(code, source_bytes, node))
        stack.extend(reversed(node.children))
    return calls


__all__ = ["DESCRIPTION_KEY", "ParseError", "extract_compiler_calls"]
