"""
Exceptions raised by the to-ai package.
"""


class ToAIError(Exception):
    """Base exception for to-ai errors."""


class InvalidRootError(ToAIError):
    """Raised when the provided root directory is invalid."""


class ScanError(ToAIError):
    """Raised when a directory inside the tree cannot be read."""


class ConfigFileError(ToAIError):
    """Raised when there are issues with ignore files."""


class InvalidPatternError(ToAIError, ValueError):
    """Raised when an ignore pattern cannot be compiled."""


class FileReadError(ToAIError):
    """Raised when there are issues reading source files."""


class OutputError(ToAIError):
    """Raised when there are issues writing output."""


class ClipboardError(OutputError):
    """Raised when the system clipboard cannot be accessed."""
