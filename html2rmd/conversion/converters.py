"""HTML-to-markup converter strategies.

The pipeline only depends on :class:`HtmlConverter`; pick an implementation
with :func:`get_converter` or pass any object with ``name`` and
``convert(html)``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
import shutil
import subprocess
import tempfile
from typing import Protocol

from ..config import Settings
from ..errors import ConfigurationError, ConverterError, MissingDependencyError
from .markdown import html_to_markdown

logger = logging.getLogger(__name__)

_CLEAN_TAGS_RE = re.compile(r"^(script|style|nav)$", re.I)


class HtmlConverter(Protocol):
    """Converts an HTML document to lightweight markup text."""

    name: str

    def ensure_available(self) -> None:
        ...

    def convert(self, html: str) -> str:
        ...


@dataclass(frozen=True)
class PandocConverter:
    executable: str = "pandoc"
    name: str = "pandoc"

    def ensure_available(self) -> None:
        if shutil.which(self.executable) is None:
            raise MissingDependencyError(f"{self.executable} not found.")

    def convert(self, html: str) -> str:
        """Run pandoc on ``html`` written to a temporary ``.html`` file.

        Raises:
            ConverterError: If pandoc exits with a non-zero status.
            MissingDependencyError: If the pandoc executable cannot be started.
        """
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".html", encoding="utf-8", delete=False
        ) as html_file:
            html_file.write(html)
            html_path = Path(html_file.name)

        try:
            cmd = [self.executable, "-f", "html", "-t", "markdown", str(html_path)]
            logger.debug("Running %s", " ".join(cmd))
            try:
                completed = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8", check=False)
            except FileNotFoundError as exc:
                raise MissingDependencyError(f"{self.executable} not found.") from exc
            if completed.returncode != 0:
                raise ConverterError(
                    f"pandoc exited with status {completed.returncode}: {completed.stderr.strip()}"
                )
            return completed.stdout
        finally:
            html_path.unlink(missing_ok=True)


@dataclass(frozen=True)
class MarkdownifyConverter:
    """BeautifulSoup clean-up followed by markdownify."""

    parser: str = "lxml"
    name: str = "markdownify"

    def ensure_available(self) -> None:
        try:
            import bs4  # noqa: F401
            import markdownify  # noqa: F401
            if self.parser == "lxml":
                import lxml  # noqa: F401
        except ImportError as exc:
            raise MissingDependencyError(
                f"{exc.name} not found (pip install beautifulsoup4 markdownify lxml)."
            ) from exc

    def convert(self, html: str) -> str:
        from bs4 import BeautifulSoup
        from markdownify import markdownify as md

        soup = BeautifulSoup(html, self.parser)

        # Drop scripts, styles and nav bars.
        for tag in soup.find_all(_CLEAN_TAGS_RE):
            tag.decompose()

        # Unwrap span/div that only add styling.
        for tag in soup.find_all(["span", "div"]):
            if not tag.attrs or set(tag.attrs).issubset({"style"}):
                tag.unwrap()

        md_txt = md(str(soup.body or soup), heading_style="ATX", bullets="-")
        return re.sub(r"\n{3,}", "\n\n", md_txt).strip() + "\n"


@dataclass(frozen=True)
class BuiltinConverter:
    name: str = "builtin"

    def ensure_available(self) -> None:
        return None

    def convert(self, html: str) -> str:
        return html_to_markdown(html)


CONVERTER_NAMES: tuple[str, ...] = ("pandoc", "markdownify", "builtin")


def get_converter(name: str, settings: Settings) -> PandocConverter | MarkdownifyConverter | BuiltinConverter:
    """Return the converter registered under ``name``."""

    if name == "pandoc":
        return PandocConverter(executable=settings.pandoc_path)
    if name == "markdownify":
        return MarkdownifyConverter()
    if name == "builtin":
        return BuiltinConverter()
    raise ConfigurationError(f"Unknown converter {name!r}; expected one of: {', '.join(CONVERTER_NAMES)}")
