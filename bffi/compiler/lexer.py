"""
BFFI Scanner

Pulls bytes from a binary stream and turns them into operator tokens.
"""

import io
from typing import BinaryIO, Iterator, List, Optional, Union

from .tokens import Token, TokenType, OPERATORS, COMMENT, NEWLINE
from .errors import SourceReadError


class Scanner:
    """Byte-at-a-time scanner for tape-language source."""

    def __init__(self, stream: BinaryIO, filename: Optional[str] = None):
        """
        Initialize the scanner.

        Args:
            stream: Binary stream to read source bytes from
            filename: Optional filename for error messages
        """
        self.stream = stream
        self.filename = filename
        self.line = 1       # Current line number
        self.column = 0     # Column of the last byte read
        self.finished = False

    @classmethod
    def from_source(cls, source: Union[str, bytes],
                    filename: Optional[str] = None) -> 'Scanner':
        """Create a scanner over in-memory source."""
        if isinstance(source, str):
            source = source.encode('utf-8')
        return cls(io.BytesIO(source), filename)

    def tokenize(self) -> List[Token]:
        """
        Scan the entire stream.

        Returns:
            List of tokens ending with a single EOF token
        """
        tokens = list(self)
        tokens.append(self.next_token())
        return tokens

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token.is_eof():
                return
            yield token

    def next_token(self) -> Token:
        """Scan up to and including the next operator byte."""
        while True:
            byte = self.advance()
            if byte is None:
                return self.eof_token()

            if byte == COMMENT:
                if not self.skip_comment():
                    return self.eof_token()
                continue

            token_type = OPERATORS.get(byte)
            if token_type is not None:
                return Token(token_type, chr(byte), self.line, self.column)

    def advance(self) -> Optional[int]:
        """Consume one byte, returning None at end of stream."""
        if self.finished:
            return None

        try:
            data = self.stream.read(1)
        except OSError as e:
            raise SourceReadError(f"failed to read: {e.strerror or e}",
                                  self.line, self.column, self.filename) from e

        if not data:
            self.finished = True
            return None

        byte = data[0]
        if byte == NEWLINE:
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return byte

    def skip_comment(self) -> bool:
        """
        Skip a '#' comment through the end of its line.

        Returns:
            False if the stream ended inside the comment
        """
        while True:
            byte = self.advance()
            if byte is None:
                return False
            if byte == NEWLINE:
                return True

    def eof_token(self) -> Token:
        return Token(TokenType.EOF, "", self.line, self.column)
