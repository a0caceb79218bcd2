from __future__ import annotations

import pytest

from parse.treesitter_calls import ParseError, extract_compiler_calls

DESCRIPTIONS = [
    ('"ABC"', "ABC"),
    ("'ABC'", "ABC"),
    ("`ABC`", "ABC"),
    ("`ABC${desc}ABC`", "ABC.*ABC"),
]

CALLS = [
    (
        ["export const sum = compiler({"],
        ["  in: z.number().array(),", "  out: z.number(),", "});"],
    ),
    (
        ["export const multiply = compiler({", "  in: z.number().array(),"],
        ["  out: z.number(),", "});"],
    ),
    (
        ["const divide = compiler({", "  in: z.number().array(),", "  out: z.number(),"],
        ["});"],
    ),
]

SCAFFOLD_START = [
    "// This is a scaffold for the sum function",
    "function testSum() {",
    "  const result = sum([1, 2, 3]);",
    "  console.log(result);",
    "}",
]
SCAFFOLD_END = ["// End of test for sum function"]


def _chunk(description: str, call: tuple[list[str], list[str]]) -> str:
    start, end = call
    return "\n".join([*start, f"\tdo: {description},", *end])


def _fixture(description: str, call: tuple[list[str], list[str]]) -> str:
    return "\n".join([*SCAFFOLD_START, _chunk(description, call), *SCAFFOLD_END])


@pytest.mark.parametrize(("description", "expected_pattern"), DESCRIPTIONS)
@pytest.mark.parametrize("call", CALLS)
def test_extracted_patterns_match_call_and_description(
    description: str,
    expected_pattern: str,
    call: tuple[list[str], list[str]],
) -> None:
    fixture = _fixture(description, call)

    calls = extract_compiler_calls(fixture)

    assert len(calls) == 1
    assert calls[0].chunk.search(_chunk(description, call))
    assert calls[0].chunk.search(fixture)
    assert calls[0].description.pattern == expected_pattern


def test_line_numbers_cover_the_call() -> None:
    source = "const a = 1;\nconst s = compiler({\n  do: 'x',\n});\n"

    calls = extract_compiler_calls(source)

    assert [(c.start_line, c.end_line) for c in calls] == [(2, 4)]


def test_template_description_matches_any_interpolation() -> None:
    calls = extract_compiler_calls("compiler({ do: `ABC${x}ABC` });\n")

    description = calls[0].description
    assert description.search("ABCABC")
    assert description.search("ABC anything at all ABC")
    assert not description.search("ABC only once")


def test_string_description_escapes_metacharacters() -> None:
    calls = extract_compiler_calls('compiler({ do: "sum (a.b) + [c]" });\n')

    description = calls[0].description
    assert description.pattern == r"sum \(a\.b\) \+ \[c\]"
    assert description.search("sum (a.b) + [c]")
    assert not description.search("sum (aXb) + [c]")


@pytest.mark.parametrize(
    ("literal", "value"),
    [
        (r'"tab\there"', "tab\there"),
        (r'"café"', "café"),
        (r'"quote \" inside"', 'quote " inside'),
        (r"'it\'s'", "it's"),
    ],
)
def test_string_values_are_cooked(literal: str, value: str) -> None:
    calls = extract_compiler_calls(f"compiler({{ do: {literal} }});\n")

    assert len(calls) == 1
    assert calls[0].description.fullmatch(value)


@pytest.mark.parametrize(
    "source",
    [
        'compiler("adds numbers");\n',
        "compiler();\n",
        "compiler({ do: description });\n",
        "compiler({ do: 'a' + 'b' });\n",
        "compiler({ ['do']: 'adds numbers' });\n",
        "compiler({ 'do': 'adds numbers' });\n",
        "compiler({ description: 'adds numbers' });\n",
        "compiler(...args, { do: 'adds numbers' });\n",
        "compiler(options, { do: 'adds numbers' });\n",
        "new Compiler({ do: 'adds numbers' });\n",
        "compiler`adds numbers`;\n",
    ],
)
def test_non_qualifying_calls_are_excluded(source: str) -> None:
    assert extract_compiler_calls(source) == []


def test_leading_comment_argument_is_skipped() -> None:
    calls = extract_compiler_calls("compiler(/* options */ { do: 'adds numbers' });\n")

    assert len(calls) == 1


def test_nested_calls_are_in_source_order() -> None:
    source = "\n".join(
        [
            "outer({",
            "  do: 'first',",
            "  helper: inner({ do: 'second' }),",
            "});",
            "last({ do: 'third' });",
        ]
    )

    calls = extract_compiler_calls(source)

    assert [call.description.pattern for call in calls] == ["first", "second", "third"]


def test_tsx_and_type_syntax_is_supported() -> None:
    source = "\n".join(
        [
            "interface Props { label: string }",
            "function identity<T>(value: T): T { return value; }",
            "const View = ({ label }: Props) => <div className='x'>{label}</div>;",
            "export const greet = compiler({",
            "  do: 'greets people',",
            "  in: z.string(),",
            "  out: z.string(),",
            "} as const);",
        ]
    )

    calls = extract_compiler_calls(source)

    # `{...} as const` is not an object literal argument.
    assert calls == []

    typed = source.replace("} as const);", "});")
    calls = extract_compiler_calls(typed)
    assert [call.description.pattern for call in calls] == ["greets people"]


def test_chunk_includes_siblings_on_the_same_line() -> None:
    source = "const a = 1; const s = compiler({ do: 'x' }); const b = 2;\n"

    call = extract_compiler_calls(source)[0]

    assert call.chunk.search(source)
    assert not call.chunk.search("const s = compiler({ do: 'x' });\n")


def test_chunk_survives_whitespace_only_edits() -> None:
    source = "\n".join(
        [
            "export const sum = compiler({",
            '  do: "adds numbers",',
            "  in: z.number().array(),",
            "});",
        ]
    )
    call = extract_compiler_calls(source)[0]

    reformatted = "\n".join(
        [
            "// moved down",
            "",
            "export   const sum = compiler({",
            '      do:   "adds numbers",',
            "",
            "      in: z.number().array(),",
            "  });",
        ]
    )

    assert call.chunk.search(reformatted)


@pytest.mark.parametrize(
    ("old", "new"),
    [
        ('"adds numbers"', '"adds two numbers"'),
        ("z.number().array()", "z.string().array()"),
        ("export const sum", "export const total"),
    ],
)
def test_chunk_rejects_content_edits(old: str, new: str) -> None:
    source = "\n".join(
        [
            "export const sum = compiler({",
            '  do: "adds numbers",',
            "  in: z.number().array(),",
            "});",
        ]
    )
    call = extract_compiler_calls(source)[0]

    assert not call.chunk.search(source.replace(old, new))


def test_chunk_round_trips_on_crlf_sources() -> None:
    source = 'export const sum = compiler({\r\n  do: "adds numbers",\r\n});\r\n'

    call = extract_compiler_calls(source)[0]

    assert call.chunk.search(source)


def test_duplicate_do_keys_yield_one_site_each() -> None:
    calls = extract_compiler_calls("compiler({ do: 'a', do: 'b' });\n")

    assert [call.description.pattern for call in calls] == ["a", "b"]


@pytest.mark.parametrize(
    "source",
    [
        "const x = compiler({ do: 'unterminated' ",
        "export const = compiler({ do: 'x' });",
        "compiler({ do: 'x' }))",
    ],
)
def test_malformed_source_raises_parse_error(source: str) -> None:
    with pytest.raises(ParseError):
        extract_compiler_calls(source)


def test_extraction_is_repeatable() -> None:
    source = "compiler({ do: `a${b}c` });\n"

    first = [call.to_dict() for call in extract_compiler_calls(source)]
    second = [call.to_dict() for call in extract_compiler_calls(source)]

    assert first == second


def test_bare_carriage_returns_end_lines() -> None:
    source = "a\rconst b = compiler({\r  do: 'x'\r});"

    calls = extract_compiler_calls(source)

    assert [(c.start_line, c.end_line) for c in calls] == [(2, 4)]
    assert calls[0].chunk.search(source)
    assert calls[0].description.pattern == "x"
