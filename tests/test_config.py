"""Tests for html2rmd/config.load_settings."""

from __future__ import annotations

import pytest

from html2rmd.config import DEFAULT_REFERENCES, load_settings
from html2rmd.errors import ConfigurationError

_VARIABLES = (
    "HTML2RMD_CONVERTER",
    "HTML2RMD_PANDOC_PATH",
    "HTML2RMD_OUTPUT_EXTENSION",
    "HTML2RMD_STRICT_MATH",
    "HTML2RMD_LOG_LEVEL",
    "HTML2RMD_HOMEWORK",
    "HTML2RMD_GROUP",
    "HTML2RMD_GIT_URL",
    "HTML2RMD_AUTHOR",
    "HTML2RMD_REFERENCES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_defaults():
    settings = load_settings()
    assert settings.converter == "pandoc"
    assert settings.pandoc_path == "pandoc"
    assert settings.output_extension == ".Rmd"
    assert settings.strict_math is False
    assert settings.log_level == "WARNING"
    assert settings.homework == "HW3"
    assert settings.group == "Group 12"
    assert settings.git_url == "https://example.com"
    assert settings.author == "Joe, Han, Jonathan"
    assert settings.references == DEFAULT_REFERENCES


def test_settings_are_cached(monkeypatch):
    first = load_settings()
    monkeypatch.setenv("HTML2RMD_HOMEWORK", "HW9")
    assert load_settings() is first


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HTML2RMD_CONVERTER", " Builtin ")
    monkeypatch.setenv("HTML2RMD_OUTPUT_EXTENSION", "md")
    monkeypatch.setenv("HTML2RMD_STRICT_MATH", "TRUE")
    monkeypatch.setenv("HTML2RMD_LOG_LEVEL", "debug")
    monkeypatch.setenv("HTML2RMD_REFERENCES", "Answer 1: <a> | | Answer 2: <b>")

    settings = load_settings()

    assert settings.converter == "builtin"
    assert settings.output_extension == ".md"
    assert settings.strict_math is True
    assert settings.log_level == "DEBUG"
    assert settings.references == ("Answer 1: <a>", "Answer 2: <b>")


def test_invalid_boolean_rejected(monkeypatch):
    monkeypatch.setenv("HTML2RMD_STRICT_MATH", "yes")
    with pytest.raises(ConfigurationError, match="HTML2RMD_STRICT_MATH"):
        load_settings()


def test_invalid_log_level_rejected(monkeypatch):
    monkeypatch.setenv("HTML2RMD_LOG_LEVEL", "LOUD")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_empty_extension_rejected(monkeypatch):
    monkeypatch.setenv("HTML2RMD_OUTPUT_EXTENSION", "  ")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_configuration_error_is_documented_value_error():
    assert issubclass(ConfigurationError, ValueError)
    assert ConfigurationError.__doc__
