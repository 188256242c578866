"""Runtime configuration for the HTML-to-Rmd converter."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

from .errors import ConfigurationError

_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_REFERENCES: tuple[str, ...] = (
    "Answer 1: <https://chatgpt.com/share/690d6e2e-82a4-8005-9b67-2af0a1bc3581>",
    "Answer 2: <>",
    "Answer 3: <>",
)


@dataclass(frozen=True)
class Settings:
    """Environment-backed application settings."""

    # Conversion
    converter: str
    pandoc_path: str
    output_extension: str
    strict_math: bool
    log_level: str

    # Header template parameters
    homework: str
    group: str
    git_url: str
    author: str

    # Reference section entries
    references: tuple[str, ...]


def _get_env(name: str, *, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        return ""
    return value


def _get_bool(name: str, *, default: bool) -> bool:
    raw = _get_env(name, default="true" if default else "false").strip().lower()
    if raw not in ("true", "false"):
        raise ConfigurationError(f"{name} must be 'true' or 'false', got {raw!r}")
    return raw == "true"


def _get_references(name: str) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return DEFAULT_REFERENCES
    return tuple(item.strip() for item in raw.split("|") if item.strip())


def _get_log_level(name: str) -> str:
    level = _get_env(name, default="WARNING").strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(f"{name} must be one of {sorted(_LOG_LEVELS)}, got {level!r}")
    return level


def _normalize_extension(value: str) -> str:
    value = value.strip()
    if value == "":
        raise ConfigurationError("HTML2RMD_OUTPUT_EXTENSION must not be empty")
    return value if value.startswith(".") else f".{value}"


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache Settings from environment variables."""

    return Settings(
        converter=_get_env("HTML2RMD_CONVERTER", default="pandoc").strip().lower(),
        pandoc_path=_get_env("HTML2RMD_PANDOC_PATH", default="pandoc"),
        output_extension=_normalize_extension(_get_env("HTML2RMD_OUTPUT_EXTENSION", default=".Rmd")),
        strict_math=_get_bool("HTML2RMD_STRICT_MATH", default=False),
        log_level=_get_log_level("HTML2RMD_LOG_LEVEL"),
        homework=_get_env("HTML2RMD_HOMEWORK", default="HW3"),
        group=_get_env("HTML2RMD_GROUP", default="Group 12"),
        git_url=_get_env("HTML2RMD_GIT_URL", default="https://example.com"),
        author=_get_env("HTML2RMD_AUTHOR", default="Joe, Han, Jonathan"),
        references=_get_references("HTML2RMD_REFERENCES"),
    )
