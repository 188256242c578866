"""Lightweight HTML-to-markdown converter using stdlib html.parser.

Used as the built-in converter when pandoc is not wanted.  Text is escaped
the way pandoc's markdown writer escapes it (backslashes, emphasis markers,
square brackets), so the cleanup passes see the same shape of input
whichever converter produced it.
"""

from __future__ import annotations

from html.parser import HTMLParser
import re

# Tags whose entire subtree (content included) is discarded.
_SKIP_TAGS: frozenset[str] = frozenset({
    "script", "style", "head", "nav", "noscript",
    "iframe", "form", "button", "select",
    "option", "textarea", "svg", "canvas",
})

# Block-level tags that force a paragraph break around them.
_BLOCK_TAGS: frozenset[str] = frozenset({
    "p", "div", "section", "article", "main", "header", "footer",
    "address", "blockquote", "table", "tbody", "thead", "tfoot",
    "tr", "td", "th", "dl", "dt", "dd", "figure", "figcaption", "aside",
})

# Void elements never get an end tag callback.
_VOID_TAGS: frozenset[str] = frozenset({"br", "hr", "img", "wbr"})

_MARKDOWN_SPECIAL_RE = re.compile(r"([\\`*_\[\]])")


def escape_markdown(text: str) -> str:
    return _MARKDOWN_SPECIAL_RE.sub(r"\\\1", text)


class _HTMLToMarkdownParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._tail: str = ""    # last two characters emitted
        self._skip_depth: int = 0
        self._list_stack: list[str] = []    # "ul" or "ol"
        self._list_counters: list[int] = []
        self._href_stack: list[str | None] = []
        self._code_depth: int = 0
        self._pre_depth: int = 0

    # ------------------------------------------------------------------
    # HTMLParser callbacks
    # ------------------------------------------------------------------

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._skip_depth:
            if tag not in _VOID_TAGS:
                self._skip_depth += 1
            return
        if tag in _SKIP_TAGS:
            self._skip_depth = 1
            return

        attributes = dict(attrs)
        if tag in ("h1", "h2", "h3", "h4", "h5", "h6"):
            self._block()
            self._emit("#" * int(tag[1]) + " ")
        elif tag == "br":
            self._emit("\\\n" if not self._pre_depth else "\n")
        elif tag in _BLOCK_TAGS:
            self._block()
        elif tag in ("ul", "ol"):
            self._list_stack.append(tag)
            self._list_counters.append(0)
        elif tag == "li":
            self._block()
            indent = "  " * (len(self._list_stack) - 1)
            if self._list_stack and self._list_stack[-1] == "ol":
                self._list_counters[-1] += 1
                self._emit(f"{indent}{self._list_counters[-1]}. ")
            else:
                self._emit(f"{indent}- ")
        elif tag in ("strong", "b"):
            self._emit("**")
        elif tag in ("em", "i"):
            self._emit("*")
        elif tag == "code":
            self._code_depth += 1
            if not self._pre_depth:
                self._emit("`")
        elif tag == "pre":
            self._block()
            self._pre_depth += 1
            self._emit("```\n")
        elif tag == "a":
            self._href_stack.append(attributes.get("href"))
            self._emit("[")
        elif tag == "img":
            alt = escape_markdown(attributes.get("alt") or "")
            src = attributes.get("src") or ""
            self._emit(f"![{alt}]({src})")
        elif tag == "hr":
            self._block()
            self._emit("* * *")
            self._block()

    def handle_endtag(self, tag: str) -> None:
        if tag in _VOID_TAGS:
            return
        if self._skip_depth:
            self._skip_depth -= 1
            return

        if tag in ("h1", "h2", "h3", "h4", "h5", "h6"):
            self._block()
        elif tag in _BLOCK_TAGS:
            self._block()
        elif tag in ("ul", "ol"):
            if self._list_stack:
                self._list_stack.pop()
                self._list_counters.pop()
        elif tag == "li":
            self._block()
        elif tag in ("strong", "b"):
            self._emit("**")
        elif tag in ("em", "i"):
            self._emit("*")
        elif tag == "code":
            if self._code_depth:
                self._code_depth -= 1
            if not self._pre_depth:
                self._emit("`")
        elif tag == "pre":
            if self._pre_depth:
                self._pre_depth -= 1
            self._emit("\n```")
            self._block()
        elif tag == "a":
            href = self._href_stack.pop() if self._href_stack else None
            self._emit(f"]({href})" if href else "]")

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        if self._pre_depth:
            self._emit(data)
            return
        # Collapse runs of whitespace; newlines only come from markup.
        normalized = re.sub(r"\s+", " ", data)
        if not normalized.strip():
            if normalized and self._tail and not self._tail.endswith((" ", "\n")):
                self._emit(" ")
            return
        text = normalized if self._code_depth else escape_markdown(normalized)
        if self._at_line_start():
            text = text.lstrip()
        self._emit(text)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, text: str) -> None:
        self._parts.append(text)
        self._tail = (self._tail + text)[-2:]

    def _at_line_start(self) -> bool:
        return self._tail == "" or self._tail.endswith("\n")

    def _block(self) -> None:
        """Ensure a blank-line separator before the next content block."""
        if self._tail.endswith("\n\n"):
            return
        if self._tail.endswith("\n"):
            self._emit("\n")
        elif self._tail:
            self._emit("\n\n")

    def result(self) -> str:
        text = "".join(self._parts)
        # Collapse runs of 3+ newlines to a single blank line.
        text = re.sub(r"\n{3,}", "\n\n", text)
        # Strip trailing whitespace from each line.
        lines = [line.rstrip() for line in text.splitlines()]
        return "\n".join(lines).strip()


def html_to_markdown(html: str) -> str:
    """Convert an HTML string to markdown text.

    Strips boilerplate tags (script, style, nav, etc.), converts structural
    elements (headings, lists, emphasis, links, images) to markdown
    equivalents, decodes HTML entities, escapes markdown metacharacters in
    text, and normalises whitespace.  The result ends with a newline, as
    pandoc's output does.
    """
    parser = _HTMLToMarkdownParser()
    parser.feed(html)
    parser.close()
    body = parser.result()
    return f"{body}\n" if body else ""
