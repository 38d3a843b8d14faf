"""
BFFI Compiler Package

Scans tape-language source and compiles it to flat bytecode for the
tape machine.
"""

from typing import BinaryIO, Optional, Union

from .tokens import Token, TokenType
from .lexer import Scanner
from .bytecode import Bytecode, Instruction, OpCode
from .codegen import CodeGenerator
from .errors import (BffiError, SourceReadError, CompileError,
                     UnbalancedBracketsError, ExecutionError)

__version__ = "0.1.0"
__all__ = [
    "Token",
    "TokenType",
    "Scanner",
    "Bytecode",
    "Instruction",
    "OpCode",
    "CodeGenerator",
    "BffiError",
    "SourceReadError",
    "CompileError",
    "UnbalancedBracketsError",
    "ExecutionError",
    "compile_source",
    "compile_stream",
    "compile_file",
]


def compile_stream(stream: BinaryIO, filename: Optional[str] = None) -> Bytecode:
    """
    Compile source read from a binary stream.

    Args:
        stream: Binary stream positioned at the start of the source
        filename: Optional filename for error messages

    Returns:
        Sealed Bytecode ready for execution

    Raises:
        SourceReadError: If the stream fails while reading
        UnbalancedBracketsError: If the brackets do not pair up
    """
    scanner = Scanner(stream, filename)
    codegen = CodeGenerator(filename)
    return codegen.generate(scanner)


def compile_source(source: Union[str, bytes], filename: Optional[str] = None) -> Bytecode:
    """
    Compile in-memory source to bytecode.

    Args:
        source: Source text (str is encoded as UTF-8)
        filename: Optional filename for error messages

    Returns:
        Sealed Bytecode ready for execution
    """
    scanner = Scanner.from_source(source, filename)
    return CodeGenerator(filename).generate(scanner)


def compile_file(filepath: str) -> Bytecode:
    """
    Compile a source file to bytecode.

    Args:
        filepath: Path to the source file

    Returns:
        Sealed Bytecode ready for execution
    """
    with open(filepath, 'rb') as f:
        return compile_stream(f, filename=filepath)
