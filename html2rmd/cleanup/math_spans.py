"""Unescape backslash sequences inside math spans only.

Converters escape characters such as ``_``, ``*`` and ``\\`` everywhere in
the output, which breaks TeX inside ``\\[ … \\]``, ``\\( … \\)`` and
``$$ … $$``.  Within those spans an escaped backslash (``\\\\X``) becomes
``\\X`` and any other escape (``\\X``) becomes ``X``.  Text outside the
spans, delimiters included, is returned untouched.

Spans are matched non-greedily, one delimiter kind at a time, in the order
``\\[``, ``\\(``, ``$$``.  An opening delimiter without a partner is left as
is; with ``strict=True`` it raises :class:`UnbalancedMathDelimiterError`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re

from ..errors import UnbalancedMathDelimiterError

logger = logging.getLogger(__name__)

_PRIVATE_USE_START = 0xE000
_PRIVATE_USE_END = 0xF8FF

_ESCAPED_BACKSLASH_RE = re.compile(r"\\\\")
_SINGLE_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


@dataclass(frozen=True)
class MathDelimiter:
    opening: str
    closing: str

    @property
    def span_pattern(self) -> re.Pattern[str]:
        return re.compile(f"{re.escape(self.opening)}(.*?){re.escape(self.closing)}", re.DOTALL)


DISPLAY_BRACKETS = MathDelimiter(opening="\\[", closing="\\]")
INLINE_PARENS = MathDelimiter(opening="\\(", closing="\\)")
DOUBLE_DOLLAR = MathDelimiter(opening="$$", closing="$$")

MATH_DELIMITERS: tuple[MathDelimiter, ...] = (DISPLAY_BRACKETS, INLINE_PARENS, DOUBLE_DOLLAR)


def _pick_sentinel(text: str) -> str:
    for code_point in range(_PRIVATE_USE_START, _PRIVATE_USE_END + 1):
        candidate = chr(code_point)
        if candidate not in text:
            return candidate
    raise ValueError("No private-use code point is free to use as a sentinel")


def unescape_math(content: str) -> str:
    """Resolve escapes in the interior of a single math span."""

    if "\\" not in content:
        return content

    sentinel = _pick_sentinel(content)
    # Escaped backslash pairs are hidden behind the sentinel until the end.
    hidden = _ESCAPED_BACKSLASH_RE.sub(sentinel, content)
    unescaped = _SINGLE_ESCAPE_RE.sub(r"\1", hidden)
    return unescaped.replace(sentinel, "\\")


def _find_unmatched(text: str, delimiter: MathDelimiter, spans: list[tuple[int, int]]) -> int | None:
    """Return the offset of a delimiter left outside every matched span."""

    cursor = 0
    for start, end in [*spans, (len(text), len(text))]:
        gap = text[cursor:start]
        offset = gap.find(delimiter.opening)
        if offset != -1:
            return cursor + offset
        cursor = end
    return None


def _unescape_spans(text: str, delimiter: MathDelimiter, *, strict: bool) -> str:
    pattern = delimiter.span_pattern
    spans = [match.span() for match in pattern.finditer(text)]

    unmatched_at = _find_unmatched(text, delimiter, spans)
    if unmatched_at is not None:
        if strict:
            raise UnbalancedMathDelimiterError(delimiter.opening, unmatched_at)
        logger.warning(
            "Unmatched math delimiter %r at offset %d left unprocessed",
            delimiter.opening,
            unmatched_at,
        )

    return pattern.sub(
        lambda match: delimiter.opening + unescape_math(match.group(1)) + delimiter.closing,
        text,
    )


def unescape_math_spans(text: str, *, strict: bool = False) -> str:
    for delimiter in MATH_DELIMITERS:
        text = _unescape_spans(text, delimiter, strict=strict)
    return text
