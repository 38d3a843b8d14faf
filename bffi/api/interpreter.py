"""
BFFI Interpreter

Executes tape-machine bytecode against a fresh byte tape.
"""

import sys
from typing import Optional, TYPE_CHECKING

from .tape import Tape
from ..compiler.bytecode import Bytecode, OpCode
from ..compiler.errors import ExecutionError

if TYPE_CHECKING:
    from .context import Context


class Interpreter:
    """
    Tape machine for compiled bytecode.

    Runs until the program counter walks off the end of the code. There is
    no step limit, so a program that loops forever never returns.
    """

    def __init__(self, context: 'Context'):
        """
        Initialize the interpreter.

        Args:
            context: BFFI Context supplying tape size and I/O streams
        """
        self.context = context
        self.tape: Optional[Tape] = None
        self.pc = 0
        self.steps = 0
        self.bytecode: Optional[Bytecode] = None

    def run(self, bytecode: Bytecode) -> Tape:
        """
        Execute bytecode.

        Args:
            bytecode: Compiled bytecode

        Returns:
            The tape as left by the program
        """
        self.bytecode = bytecode
        self.tape = Tape(self.context.tape_size)
        self.pc = 0
        self.steps = 0

        try:
            while self.pc < len(bytecode):
                self.step()
                self.steps += 1
            self._flush_output()
        except OSError as e:
            raise self._error(f"I/O error: {e.strerror or e}") from e

        if self.context.debug:
            print(f"executed {self.steps} steps, pc={self.pc}, head={self.tape.head}",
                  file=sys.stderr)

        return self.tape

    def step(self) -> None:
        """Execute one instruction."""
        opcode, operand = self.bytecode[self.pc]
        tape = self.tape

        # Cell arithmetic
        if opcode == OpCode.INC:
            tape.add(operand)
            self.pc += 1

        elif opcode == OpCode.DEC:
            tape.add(-operand)
            self.pc += 1

        # Pointer movement
        elif opcode == OpCode.LEFT:
            tape.move(-operand)
            self.pc += 1

        elif opcode == OpCode.RIGHT:
            tape.move(operand)
            self.pc += 1

        # I/O
        elif opcode == OpCode.OUTPUT:
            self.context.stdout.write(bytes([tape.read()]) * operand)
            self.pc += 1

        elif opcode == OpCode.INPUT:
            self._flush_output()
            for _ in range(operand):
                data = self.context.stdin.read(1)
                # End of input leaves the cell unchanged
                if data:
                    tape.write(data[0])
            self.pc += 1

        # Control flow
        elif opcode == OpCode.JUMP_IF_ZERO:
            if tape.read() == 0:
                self.pc = operand
            else:
                self.pc += 1

        elif opcode == OpCode.JUMP_IF_NONZERO:
            if tape.read() != 0:
                self.pc = operand
            else:
                self.pc += 1

        else:
            raise self._error(f"Unknown opcode: {opcode!r}")

    def _flush_output(self) -> None:
        flush = getattr(self.context.stdout, "flush", None)
        if flush is not None:
            flush()

    def _error(self, message: str) -> ExecutionError:
        """Build an error located at the current pc and its source line."""
        line = None
        if self.pc < len(self.bytecode.line_numbers):
            # Deserialized bytecode carries no line information
            line = self.bytecode.line_numbers[self.pc] or None
        return ExecutionError(message, self.pc, line)
