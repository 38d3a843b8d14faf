"""
BFFI Python API

Provides the Python interface for running compiled programs on the tape machine.
"""

from .context import Context, Script, create_context, run
from .interpreter import Interpreter
from .tape import Tape, DEFAULT_TAPE_SIZE

__all__ = [
    'Context',
    'Script',
    'create_context',
    'run',
    'Interpreter',
    'Tape',
    'DEFAULT_TAPE_SIZE',
]
