"""
BFFI Context

The main interface for compiling and executing tape-language programs.
"""

import sys
from typing import BinaryIO, Optional, Union
from dataclasses import dataclass

from .tape import Tape, DEFAULT_TAPE_SIZE
from ..compiler import Scanner, CodeGenerator, Bytecode, BffiError


@dataclass
class Script:
    """
    A compiled program.

    Contains bytecode and metadata ready for execution.
    """

    source: Optional[bytes]
    bytecode: Bytecode
    filename: Optional[str] = None

    def save(self, path: str) -> None:
        """Save compiled bytecode to file."""
        data = self.bytecode.serialize()
        with open(path, 'wb') as f:
            f.write(data)

    @classmethod
    def load(cls, path: str) -> 'Script':
        """Load compiled bytecode from file."""
        with open(path, 'rb') as f:
            data = f.read()
        bytecode = Bytecode.deserialize(data)
        return cls(source=None, bytecode=bytecode, filename=path)


class Context:
    """
    BFFI execution context.

    Holds the machine configuration and the I/O streams programs talk to.
    Each execution gets a fresh tape.

    Example:
        ctx = Context()
        script = ctx.compile('++++++++[>++++++++<-]>+.')
        ctx.execute(script)  # writes b'A'
    """

    def __init__(self,
                 tape_size: int = DEFAULT_TAPE_SIZE,
                 stdin: Optional[BinaryIO] = None,
                 stdout: Optional[BinaryIO] = None,
                 debug: bool = False):
        """
        Create a new BFFI context.

        Args:
            tape_size: Number of cells on the tape
            stdin: Binary stream read by ',' (defaults to process stdin)
            stdout: Binary stream written by '.' (defaults to process stdout)
            debug: Print compile and run diagnostics to stderr
        """
        if tape_size < 1:
            raise ValueError(f"tape_size must be at least 1, got {tape_size}")
        self.tape_size = tape_size
        self._stdin = stdin
        self._stdout = stdout
        self.debug = debug

    @property
    def stdin(self) -> BinaryIO:
        return self._stdin if self._stdin is not None else sys.stdin.buffer

    @property
    def stdout(self) -> BinaryIO:
        return self._stdout if self._stdout is not None else sys.stdout.buffer

    def compile(self, source: Union[str, bytes], filename: Optional[str] = None) -> Script:
        """
        Compile program source.

        Args:
            source: Program source (str is encoded as UTF-8)
            filename: Optional filename for error messages

        Returns:
            Compiled Script object
        """
        if isinstance(source, str):
            source = source.encode('utf-8')

        bytecode = self._generate(Scanner.from_source(source, filename), filename)
        return Script(source=source, bytecode=bytecode, filename=filename)

    def compile_file(self, path: str) -> Script:
        """
        Compile a program source file.

        The file is scanned as a stream, so read failures surface as
        SourceReadError with the position reached.

        Args:
            path: Path to the source file

        Returns:
            Compiled Script object (without source text)
        """
        with open(path, 'rb') as f:
            bytecode = self._generate(Scanner(f, path), path)
        return Script(source=None, bytecode=bytecode, filename=path)

    def _generate(self, scanner: Scanner, filename: Optional[str]) -> Bytecode:
        bytecode = CodeGenerator(filename).generate(scanner)

        if self.debug:
            print(f"compiled {filename or '<source>'}: {len(bytecode)} instructions",
                  file=sys.stderr)

        return bytecode

    def execute(self, script: Script) -> Tape:
        """
        Execute a compiled script.

        Args:
            script: Compiled Script object

        Returns:
            The tape as left by the program
        """
        from .interpreter import Interpreter

        interp = Interpreter(self)
        try:
            return interp.run(script.bytecode)
        except BffiError as e:
            if script.filename and e.filename is None:
                e.with_filename(script.filename)
            raise

    def run_file(self, path: str) -> Tape:
        """Compile and execute a source file."""
        return self.execute(self.compile_file(path))


def create_context(**kwargs) -> Context:
    """Create a new BFFI context."""
    return Context(**kwargs)


def run(source: Union[str, bytes], **kwargs) -> Tape:
    """
    Compile and run a program.

    Args:
        source: Program source
        **kwargs: Context options

    Returns:
        The tape as left by the program
    """
    ctx = Context(**kwargs)
    script = ctx.compile(source)
    return ctx.execute(script)
