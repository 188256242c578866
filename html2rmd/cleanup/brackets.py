"""Collapse over-escaped brackets and drop class/attribute braces."""

from __future__ import annotations

import re

# ``{.class #id}``, ``{width="50%" .x}``; may span lines.
_ATTRIBUTE_BRACES_RE = re.compile(r"\{[^}]*\.[^}]+\}")

_OVERESCAPED_OPEN_RE = re.compile(r"\\{2,}([\[(])")
_OVERESCAPED_CLOSE_RE = re.compile(r"\\{2,}([\])])")

# ``[ \[`` -> ``\[`` and ``\) ]`` -> ``\)``; whitespace stays on one line.
_BRACKET_BEFORE_OPEN_RE = re.compile(r"\[[^\S\n]*(\\[\[(])")
_BRACKET_AFTER_CLOSE_RE = re.compile(r"(\\[\])])[^\S\n]*\]")

_ESCAPE_REWRITES: tuple[tuple[re.Pattern[str], str], ...] = (
    (_OVERESCAPED_OPEN_RE, r"\\\1"),
    (_OVERESCAPED_CLOSE_RE, r"\\\1"),
    (_BRACKET_BEFORE_OPEN_RE, r"\1"),
    (_BRACKET_AFTER_CLOSE_RE, r"\1"),
)


def strip_attribute_braces(text: str) -> str:
    return _ATTRIBUTE_BRACES_RE.sub("", text)


def collapse_escaped_brackets(text: str) -> str:
    """Reduce runs of backslashes before brackets/parens to a single one.

    Also folds a literal ``[`` sitting in front of ``\\[``/``\\(`` (and a
    literal ``]`` after ``\\]``/``\\)``) into the escaped delimiter.
    """
    for pattern, replacement in _ESCAPE_REWRITES:
        text = pattern.sub(replacement, text)
    return text


def normalize_brackets(text: str) -> str:
    return collapse_escaped_brackets(strip_attribute_braces(text))
