"""
BFFI - Tape-Language Compiler and Interpreter

BFFI compiles the eight-operator tape language into compact bytecode,
coalescing runs of repeated operators, and executes it on a byte tape.

Example:
    import bffi

    ctx = bffi.Context()
    script = ctx.compile('++++++++[>++++++++<-]>+.')
    tape = ctx.execute(script)  # writes b'A'
    print(tape[1])  # 65
"""

from .api.context import Context, Script, create_context, run
from .api.tape import Tape
from .compiler import (compile_source, compile_stream, compile_file, Bytecode,
                       BffiError, UnbalancedBracketsError)

__version__ = "0.1.0"
__author__ = "BFFI Team"

__all__ = [
    # Main API
    'Context',
    'Script',
    'create_context',
    'run',
    'Tape',

    # Compiler
    'compile_source',
    'compile_stream',
    'compile_file',
    'Bytecode',

    # Errors
    'BffiError',
    'UnbalancedBracketsError',
]


def version() -> str:
    """Get BFFI version string."""
    return __version__
