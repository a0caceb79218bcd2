"""Parsing utilities for compiler call identity."""

from parse.functions import FunctionShapeError, to_async_arrow
from parse.models import CallSite
from parse.patterns import (
    chunk_pattern,
    escape_regex_characters,
    string_description_pattern,
    template_description_pattern,
)
from parse.treesitter_calls import ParseError, extract_compiler_calls

__all__ = [
    "CallSite",
    "FunctionShapeError",
    "ParseError",
    "chunk_pattern",
    "escape_regex_characters",
    "extract_compiler_calls",
    "string_description_pattern",
    "template_description_pattern",
    "to_async_arrow",
]
