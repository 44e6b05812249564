"""
Exception types for pgtools.
"""


class PgToolsError(Exception):
    """Base class for all pgtools errors."""


class GfaParseError(PgToolsError):
    """A GFA record could not be parsed."""

    def __init__(self, line, message):
        self.line = line
        self.message = message
        super().__init__(f"GFA parse error at line {line}: {message}")


class IndexFormatError(PgToolsError):
    """An index file is not readable as a pgtools index."""


class InvalidInputError(PgToolsError, ValueError):
    """A value supplied by the caller is not valid."""


class InputFileNotFoundError(PgToolsError, FileNotFoundError):
    """An input file does not exist."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"File not found: {path}")


class ExternalToolError(PgToolsError):
    """An external program failed or could not be run."""
