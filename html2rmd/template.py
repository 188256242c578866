"""R Markdown header/footer templates and document assembly."""

from __future__ import annotations

from typing import Final

from .config import Settings

HEADER_TEMPLATE: Final[str] = (
    "---\n"
    "params:\n"
    '  homework: "{homework}"\n'
    '  group: "{group}"\n'
    "  git_url: {git_url}\n"
    '  author: "{author}"\n'
    'title: "`r params$homework`"\n'
    "subtitle: |\n"
    "  `r params$group`\n"
    "  [![GitHub](https://img.shields.io/badge/GitHub-Repo-blue?logo=github)](`r params$git_url`)\n"
    '  <span style="font-size:70%"><`r params$git_url`></span>\n'
    'author: "`r params$author`"\n'
    'date: "`r Sys.Date()`"\n'
    "output: html_document\n"
    "---"
)

REFERENCE_HEADING: Final[str] = "# References"


def _yaml_quoted(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_header(settings: Settings) -> str:
    return HEADER_TEMPLATE.format(
        homework=_yaml_quoted(settings.homework),
        group=_yaml_quoted(settings.group),
        git_url=settings.git_url,
        author=_yaml_quoted(settings.author),
    )


def render_footer(settings: Settings) -> str:
    lines = [REFERENCE_HEADING, *(f"- {reference}" for reference in settings.references)]
    return "\n".join(lines)


def assemble_document(body: str, *, header: str | None = None, footer: str | None = None) -> str:
    """Wrap ``body`` with the header block and reference section.

    With a header the layout is header, blank line, body, newline, footer,
    newline. Without one the body is returned as is.
    """
    if header is None:
        return body
    parts = [header, "\n\n", body]
    if footer is not None:
        parts.extend(["\n", footer, "\n"])
    return "".join(parts)
