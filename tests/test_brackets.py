"""Tests for html2rmd/cleanup/brackets."""

from __future__ import annotations

import pytest

from html2rmd.cleanup.brackets import collapse_escaped_brackets, normalize_brackets, strip_attribute_braces


# ---------------------------------------------------------------------------
# Attribute braces
# ---------------------------------------------------------------------------


def test_class_braces_removed():
    assert strip_attribute_braces("# Heading {.unnumbered}") == "# Heading "


def test_braces_with_id_and_class_removed():
    assert strip_attribute_braces("text{#sec-1 .class key=\"v\"} more") == "text more"


def test_braces_spanning_lines_removed():
    assert strip_attribute_braces("a{.cell\nwidth=\"50%\"}b") == "ab"


def test_braces_without_dot_kept():
    assert strip_attribute_braces("\\frac{a}{b}") == "\\frac{a}{b}"


def test_braces_with_trailing_dot_only_kept():
    assert strip_attribute_braces("{end.}") == "{end.}"


def test_every_occurrence_removed():
    assert strip_attribute_braces("x{.a} y{.b} z") == "x y z"


# ---------------------------------------------------------------------------
# Over-escaped delimiters
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("\\\\\\\\[", "\\["),
        ("\\\\(", "\\("),
        ("\\\\\\]", "\\]"),
        ("\\\\\\\\\\)", "\\)"),
    ],
)
def test_backslash_runs_collapse_to_one(text, expected):
    assert collapse_escaped_brackets(text) == expected


def test_single_backslash_left_alone():
    assert collapse_escaped_brackets("\\[ x \\]") == "\\[ x \\]"


def test_backslashes_before_other_characters_left_alone():
    assert collapse_escaped_brackets("\\\\alpha \\\\{") == "\\\\alpha \\\\{"


# ---------------------------------------------------------------------------
# Literal brackets around escaped delimiters
# ---------------------------------------------------------------------------


def test_literal_bracket_before_escaped_open_folded():
    assert collapse_escaped_brackets("[ \\[x") == "\\[x"
    assert collapse_escaped_brackets("[\\(x") == "\\(x"


def test_literal_bracket_after_escaped_close_folded():
    assert collapse_escaped_brackets("x\\]  ]") == "x\\]"
    assert collapse_escaped_brackets("x\\) ]") == "x\\)"


def test_folding_does_not_cross_lines():
    text = "[\n\\[x\\]\n]"
    assert collapse_escaped_brackets(text) == text


def test_unescaped_brackets_untouched():
    assert collapse_escaped_brackets("[a] (b)") == "[a] (b)"


# ---------------------------------------------------------------------------
# Combined stage
# ---------------------------------------------------------------------------


def test_normalize_brackets_on_converter_output():
    text = "Equation: [ \\\\\\[ x^2 \\\\\\] ]{.math .display}\n"
    assert normalize_brackets(text) == "Equation: \\[ x^2 \\]\n"


def test_normalize_brackets_idempotent():
    text = "[ \\\\[a\\\\] ] {.x} \\\\(b\\\\)"
    once = normalize_brackets(text)
    assert normalize_brackets(once) == once
