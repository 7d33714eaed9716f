"""Exception types raised by jschunker."""

from typing import Optional


class JSChunkerError(Exception):
    """Base class for all jschunker errors."""

    pass


class ParseError(JSChunkerError):
    """Raised when JavaScript source cannot be parsed.

    Attributes:
        pos: Byte offset of the offending token in the UTF-8 encoded source
        line: 1-based line number
        column: 0-based byte column within the line
    """

    def __init__(self, message: str, pos: int, line: Optional[int] = None, column: Optional[int] = None):
        if line is not None:
            message = f"Parse error at position {pos} ({line}:{column}): {message}"
        else:
            message = f"Parse error at position {pos}: {message}"
        super().__init__(message)
        self.pos = pos
        self.line = line
        self.column = column


class GenerationError(JSChunkerError):
    """Raised when a tree node cannot be turned back into source text."""

    def __init__(self, message: str, node_type: Optional[str] = None):
        super().__init__(message)
        self.node_type = node_type


class ConfigError(JSChunkerError):
    """Raised when configuration values are invalid."""

    pass


class FileIOError(JSChunkerError):
    """Raised when reading or writing a file fails."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
