"""Rewrite stored async function source into an inline async arrow."""

from __future__ import annotations

from typing import TYPE_CHECKING

from parse.treesitter_language import _decode_node_text, _get_parser

if TYPE_CHECKING:
    from tree_sitter import Node

_FUNCTION_NODE_TYPES = frozenset(
    {"function_expression", "function", "function_declaration"}
)


class FunctionShapeError(ValueError):
    """Raised when stored code is not a single async function."""


def _unwrap_function(node: Node) -> Node | None:
    while node.type in ("program", "expression_statement", "parenthesized_expression"):
        named = [child for child in node.named_children if child.type != "comment"]
        if len(named) != 1:
            return None
        node = named[0]
    return node if node.type in _FUNCTION_NODE_TYPES else None


def _is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def _arrow_type_parameters(text: str) -> str:
    # `<T>(x) =>` reads as a JSX tag in .tsx files; a trailing comma does not.
    inner = text[1:-1].rstrip()
    if inner.endswith(","):
        return text
    return f"<{inner},>"


def to_async_arrow(fn_source: str) -> str:
    """Convert ``async function name(params) { body }`` to an arrow form.

    The parameter list, return type annotation and body are kept verbatim.
    Type parameters gain a trailing comma so the arrow also parses in TSX:

        >>> to_async_arrow("async function(a,b){ return a+b; }")
        'async (a,b) => { return a+b; }'

    Raises:
        FunctionShapeError: If the source is not exactly one async function.
    """
    source = fn_source.strip()
    if source.endswith(";"):
        source = source[:-1]
    # The newline keeps a trailing line comment from swallowing the paren.
    wrapped = f"({source}\n)"
    source_bytes = wrapped.encode("utf8")
    tree = _get_parser().parse(source_bytes)
    root_node = tree.root_node
    if root_node.has_error:
        msg = "stored code does not parse as a function"
        raise FunctionShapeError(msg)

    function_node = _unwrap_function(root_node)
    if function_node is None:
        msg = "stored code is not a function expression"
        raise FunctionShapeError(msg)
    if not _is_async(function_node):
        msg = "stored code is not an async function"
        raise FunctionShapeError(msg)

    parameters = function_node.child_by_field_name("parameters")
    body = function_node.child_by_field_name("body")
    if parameters is None or body is None:
        msg = "stored function has no parameter list or body"
        raise FunctionShapeError(msg)

    type_parameters = function_node.child_by_field_name("type_parameters")
    return_type = function_node.child_by_field_name("return_type")

    head = "".join(
        _decode_node_text(source_bytes, node)
        for node in (parameters, return_type)
        if node is not None
    )
    if type_parameters is not None:
        type_text = _decode_node_text(source_bytes, type_parameters)
        head = _arrow_type_parameters(type_text) + head
    return f"async {head} => {_decode_node_text(source_bytes, body)}"


__all__ = ["FunctionShapeError", "to_async_arrow"]
