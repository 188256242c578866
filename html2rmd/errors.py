"""Exception types raised by the conversion pipeline."""

from __future__ import annotations


class Html2RmdError(Exception):
    """Base class for errors reported to the command line as exit status 1."""


class MissingDependencyError(Html2RmdError):
    """A required external tool or library is not available."""


class InvalidArgumentError(Html2RmdError, ValueError):
    """A required path argument is missing or does not exist."""


class ConfigurationError(Html2RmdError, ValueError):
    """An environment variable or command-line option has an invalid value."""


class ConverterError(Html2RmdError, RuntimeError):
    """The HTML-to-markup converter exited unsuccessfully."""


class OutputWriteError(Html2RmdError, OSError):
    """The converted document could not be written to its output path."""


class UnbalancedMathDelimiterError(Html2RmdError, ValueError):
    def __init__(self, delimiter: str, offset: int) -> None:
        super().__init__(f"Unbalanced math delimiter {delimiter!r} at offset {offset}")
        self.delimiter = delimiter
        self.offset = offset
