"""
BFFI Errors

Defines exception classes for scanning, compilation and execution errors.
"""

from typing import Optional


class BffiError(Exception):
    """Base exception for all BFFI errors."""

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location information."""
        parts = []

        if self.filename:
            parts.append(self.filename)

        if self.line is not None:
            if parts:
                parts.append(str(self.line))
            else:
                parts.append(f"line {self.line}")

            if self.column is not None:
                parts.append(str(self.column))

        if parts:
            return f"{':'.join(parts)}: {self.message}"
        return self.message

    def with_filename(self, filename: str) -> 'BffiError':
        """Attach a filename and refresh the formatted message."""
        self.filename = filename
        self.args = (self._format_message(),)
        return self


class SourceReadError(BffiError):
    """Raised when the byte source fails while scanning."""
    pass


class CompileError(BffiError):
    """Raised for errors during bytecode generation."""
    pass


class UnbalancedBracketsError(CompileError):
    """Raised when '[' and ']' do not pair up."""

    def __init__(self, message: str, unmatched: int = 1,
                 line: Optional[int] = None, column: Optional[int] = None,
                 filename: Optional[str] = None):
        self.unmatched = unmatched
        super().__init__(message, line, column, filename)


class ExecutionError(BffiError):
    """Raised for errors during bytecode execution."""

    def __init__(self, message: str, pc: Optional[int] = None,
                 line: Optional[int] = None, filename: Optional[str] = None):
        self.pc = pc
        if pc is not None:
            message = f"{message} (pc={pc})"
        super().__init__(message, line, filename=filename)
