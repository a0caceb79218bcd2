from __future__ import annotations

import pytest

from parse.patterns import (
    chunk_pattern,
    escape_regex_characters,
    string_description_pattern,
    template_description_pattern,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("plain words", "plain words"),
        ("a.b", r"a\.b"),
        ("f(x) -> [y]", r"f\(x\) \-> \[y\]"),
        ("{^$|*+?}", r"\{\^\$\|\*\+\?\}"),
        ("path/to\\file", r"path\/to\\file"),
    ],
)
def test_escape_regex_characters(text: str, expected: str) -> None:
    assert escape_regex_characters(text) == expected


def test_chunk_pattern_collapses_whitespace_runs() -> None:
    code = "a\n  foo( x,\n    y );\nb"

    pattern = chunk_pattern(code, 2, 3)

    assert pattern is not None
    assert pattern.pattern == r"foo\(\s*x,\s*y\s*\);"
    assert pattern.search("foo(x,y);")
    assert pattern.search("foo(  x,\n\n y  );")
    assert not pattern.search("foo(x, z);")


@pytest.mark.parametrize(("start", "end"), [(0, 1), (3, 2), (1, 10)])
def test_chunk_pattern_rejects_unknown_lines(start: int, end: int) -> None:
    assert chunk_pattern("one\ntwo\nthree", start, end) is None


def test_string_description_pattern_is_a_substring_match() -> None:
    pattern = string_description_pattern("ABC")

    assert pattern.pattern == "ABC"
    assert pattern.search("ABC")
    assert pattern.search("xxABCxx")
    assert not pattern.search("AB")


def test_template_description_pattern_joins_with_wildcards() -> None:
    pattern = template_description_pattern(["convert ", " to ", "."])

    assert pattern.pattern == r"convert .* to .*\."
    assert pattern.search("convert metres to feet.")
    assert not pattern.search("convert metres into feet.")


def test_template_without_substitutions_is_literal() -> None:
    assert template_description_pattern(["A+B"]).pattern == r"A\+B"
