"""
BFFI Token Definitions

Defines the operator token types and the Token class for scanning.
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    """All token types in the tape language."""

    # Pointer movement
    LEFT = auto()             # <
    RIGHT = auto()            # >

    # Cell arithmetic
    INC = auto()              # +
    DEC = auto()              # -

    # I/O
    OUTPUT = auto()           # .
    INPUT = auto()            # ,

    # Loops
    JUMP_IF_ZERO = auto()     # [
    JUMP_IF_NONZERO = auto()  # ]

    # Special
    EOF = auto()


# Operator byte mapping
OPERATORS = {
    ord('<'): TokenType.LEFT,
    ord('>'): TokenType.RIGHT,
    ord('+'): TokenType.INC,
    ord('-'): TokenType.DEC,
    ord('.'): TokenType.OUTPUT,
    ord(','): TokenType.INPUT,
    ord('['): TokenType.JUMP_IF_ZERO,
    ord(']'): TokenType.JUMP_IF_NONZERO,
}

COMMENT = ord('#')
NEWLINE = ord('\n')


@dataclass(frozen=True)
class Token:
    """A single operator read from the source."""

    type: TokenType
    lexeme: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"

    def is_eof(self) -> bool:
        return self.type == TokenType.EOF
