"""Remove converter residue (fenced div markers, rules, attribute spans).

Runs line by line; the trailing newline of the input, if any, is kept.
"""

from __future__ import annotations

import re

# Pandoc fenced div markers, e.g. ``::: {.cell}`` or a bare ``:::``.
_DIV_FENCE_RE = re.compile(r"^:::")

# Horizontal rules and table separators left as a row of dashes.
_DASH_RULE_RE = re.compile(r"^\s*-{2,}\s*$")

# ``[text]{.underline}`` -> ``text``
_ATTRIBUTE_SPAN_RE = re.compile(r"\[([^\]]*)\]\{[^}]*\}")


def _unwrap_attribute_spans(line: str) -> str:
    while True:
        unwrapped = _ATTRIBUTE_SPAN_RE.sub(r"\1", line)
        if unwrapped == line:
            return line
        line = unwrapped


def _is_noise_line(line: str) -> bool:
    return bool(_DIV_FENCE_RE.match(line) or _DASH_RULE_RE.match(line))


def strip_artifacts(text: str) -> str:
    """Drop fenced-div and dash-rule lines and unwrap ``[text]{attrs}`` spans.

    Nested wrappers are unwrapped until none remain, and the noise-line
    checks see the unwrapped line, so a second call never changes the result.
    """
    kept: list[str] = []
    for line in text.split("\n"):
        line = _unwrap_attribute_spans(line)
        if _is_noise_line(line):
            continue
        kept.append(line)
    return "\n".join(kept)
