"""
Property-based tests for the template parser.
"""

import allure
import pytest
from hypothesis import given, settings, strategies as st

from promptline.constants import MAX_NESTING_DEPTH
from promptline.formatter import (
    FormatParser,
    Group,
    Literal,
    ParseError,
    StringFormatter,
    StyleVariable,
    Variable,
    parse,
)


SPECIAL_CHARS = "\\$[]()"

# Plain text that never needs escaping
literal_text = st.text(
    alphabet=st.characters(
        blacklist_characters=SPECIAL_CHARS,
        blacklist_categories=("Cs",),
    ),
    min_size=1,
    max_size=40,
)

identifier = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_0123456789"),
    min_size=1,
    max_size=12,
)


@allure.feature("Format Parser")
@allure.story("Plain text parses to a single literal")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(text=literal_text)
def test_plain_text_is_single_literal(text: str):
    """Any template without special characters is one literal node."""
    assert parse(text) == (Literal(text),)


@allure.feature("Format Parser")
@allure.story("Escapes produce the escaped character")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=50)
@given(char=st.sampled_from(SPECIAL_CHARS))
def test_escaped_special_character_is_literal(char: str):
    assert parse(f"a\\{char}b") == (Literal(f"a{char}b"),)


@allure.feature("Format Parser")
@allure.story("Variables are collected in order of first appearance")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(names=st.lists(identifier, min_size=1, max_size=6))
def test_variable_order_is_first_appearance(names: list[str]):
    template = " ".join(f"[${name}]" for name in names)
    expected = list(dict.fromkeys(names))
    assert StringFormatter(template).get_variables() == expected


@allure.feature("Format Parser")
@allure.story("Dotted identifiers")
@allure.severity(allure.severity_level.NORMAL)
def test_dotted_identifier():
    assert parse("$custom.docker") == (Variable("custom.docker"),)


@allure.feature("Format Parser")
@allure.story("Dotted identifiers")
@allure.severity(allure.severity_level.NORMAL)
def test_trailing_dot_is_literal():
    assert parse("$custom.") == (Variable("custom"), Literal("."))


@allure.feature("Format Parser")
@allure.story("Dotted identifiers")
@allure.severity(allure.severity_level.MINOR)
def test_double_dot_ends_identifier():
    assert parse("$a..b") == (Variable("a"), Literal("..b"))


@allure.feature("Format Parser")
@allure.story("Group structure")
@allure.severity(allure.severity_level.CRITICAL)
def test_group_with_style():
    nodes = parse("on [$symbol$branch](bold purple) ")

    assert nodes == (
        Literal("on "),
        Group(
            children=(Variable("symbol"), Variable("branch")),
            style="bold purple",
            variables=("symbol", "branch"),
        ),
        Literal(" "),
    )


@allure.feature("Format Parser")
@allure.story("Group structure")
@allure.severity(allure.severity_level.NORMAL)
def test_group_style_variable():
    (group,) = parse("[$x]( $style )")
    assert group.style == StyleVariable("style")


@allure.feature("Format Parser")
@allure.story("Group structure")
@allure.severity(allure.severity_level.NORMAL)
def test_group_without_style_and_empty_style():
    assert parse("[a]")[0].style is None
    assert parse("[a]()")[0].style is None


@allure.feature("Format Parser")
@allure.story("Group structure")
@allure.severity(allure.severity_level.NORMAL)
def test_nested_group_variables_bubble_up():
    (outer,) = parse("[via [$version[ $venv]]]")
    assert outer.variables == ("version", "venv")


@allure.feature("Format Parser")
@allure.story("Malformed templates raise ParseError")
@allure.severity(allure.severity_level.CRITICAL)
@pytest.mark.parametrize("template", [
    "[unclosed",
    "stray]",
    "$",
    "a $ b",
    "trailing\\",
    "(bare",
    "bare)",
    "[a](unclosed",
    "[a](x(y))",
    "[$x]($)",
    "[$x]($a b)",
])
def test_malformed_templates_raise(template: str):
    with pytest.raises(ParseError) as exc_info:
        parse(template)

    assert exc_info.value.position is not None
    assert "(position " in str(exc_info.value)


@allure.feature("Format Parser")
@allure.story("Nesting depth is bounded")
@allure.severity(allure.severity_level.NORMAL)
def test_nesting_depth_limit():
    ok = "[" * MAX_NESTING_DEPTH + "x" + "]" * MAX_NESTING_DEPTH
    too_deep = "[" + ok + "]"

    assert parse(ok)
    with pytest.raises(ParseError, match="nested deeper"):
        parse(too_deep)


@allure.feature("Format Parser")
@allure.story("Nesting depth is bounded")
@allure.severity(allure.severity_level.MINOR)
def test_custom_nesting_depth():
    with pytest.raises(ParseError):
        FormatParser("[[x]]", max_depth=1).parse()
    assert FormatParser("[x]", max_depth=1).parse()
