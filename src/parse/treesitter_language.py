"""Tree-sitter parser setup for TypeScript/JavaScript sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tree_sitter import Language, Parser
from tree_sitter_typescript import language_tsx

if TYPE_CHECKING:
    from tree_sitter import Node

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the TSX grammar.

    TSX is a superset covering both the typed dialect and embedded markup,
    so a single grammar handles .ts, .tsx, .js and .jsx sources.
    """
    global _PARSER
    if _PARSER is None:
        lang = Language(language_tsx())
        _PARSER = Parser(lang)

    return _PARSER


def _decode_node_text(source_bytes: bytes, node: Node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf8", errors="ignore")


def _first_error_node(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _describe_syntax_error(root: Node) -> str:
    node = _first_error_node(root)
    if node is None:
        return "syntax error"
    line = node.start_point[0] + 1
    col = node.start_point[1] + 1
    if node.is_missing:
        return f"missing {node.type!r} at L{line}:C{col}"
    return f"unexpected syntax at L{line}:C{col}"


__all__ = ["_decode_node_text", "_describe_syntax_error", "_get_parser"]
