"""
BFFI Code Generator

Generates bytecode from a token stream in a single pass. Runs of identical
non-loop operators are coalesced into one instruction, and loop jumps are
back-patched through a stack of pending '[' offsets.
"""

from typing import Iterable, List, Optional
from dataclasses import dataclass
from .tokens import Token, TokenType
from .bytecode import Bytecode, OpCode
from .errors import UnbalancedBracketsError


@dataclass
class LoopContext:
    """An open '[' waiting for its ']'."""
    start: int
    token: Token


@dataclass
class PendingOp:
    """The instruction currently being coalesced."""
    opcode: OpCode
    operand: int
    line: int


TOKEN_OPCODES = {
    TokenType.LEFT: OpCode.LEFT,
    TokenType.RIGHT: OpCode.RIGHT,
    TokenType.INC: OpCode.INC,
    TokenType.DEC: OpCode.DEC,
    TokenType.OUTPUT: OpCode.OUTPUT,
    TokenType.INPUT: OpCode.INPUT,
    TokenType.JUMP_IF_ZERO: OpCode.JUMP_IF_ZERO,
    TokenType.JUMP_IF_NONZERO: OpCode.JUMP_IF_NONZERO,
}


class CodeGenerator:
    """Generates bytecode from operator tokens."""

    def __init__(self, filename: Optional[str] = None):
        self.filename = filename
        self.bytecode = Bytecode()
        self.loop_stack: List[LoopContext] = []
        self.pending: Optional[PendingOp] = None

    def generate(self, tokens: Iterable[Token]) -> Bytecode:
        """Generate sealed bytecode from a token stream."""
        self.bytecode = Bytecode()
        self.loop_stack = []
        self.pending = None

        for token in tokens:
            if token.is_eof():
                break

            opcode = TOKEN_OPCODES[token.type]

            if (self.pending is not None and self.pending.opcode == opcode
                    and not opcode.is_jump()):
                self.pending.operand += 1
                continue

            self.flush()

            if opcode == OpCode.JUMP_IF_ZERO:
                self.begin_loop(token)
            elif opcode == OpCode.JUMP_IF_NONZERO:
                self.end_loop(token)
            else:
                self.pending = PendingOp(opcode, 1, token.line)

        self.flush()

        if self.loop_stack:
            innermost = self.loop_stack[-1].token
            raise UnbalancedBracketsError(
                f"unbalanced []: {len(self.loop_stack)} unclosed '['",
                unmatched=len(self.loop_stack),
                line=innermost.line,
                column=innermost.column,
                filename=self.filename,
            )

        return self.bytecode.seal()

    # =========================================================================
    # Loop Management
    # =========================================================================

    def begin_loop(self, token: Token) -> None:
        """Open a loop at the offset the '[' will be flushed to."""
        self.loop_stack.append(LoopContext(self.bytecode.current_offset(), token))
        # Target is patched once the matching ']' is seen
        self.pending = PendingOp(OpCode.JUMP_IF_ZERO, 0, token.line)

    def end_loop(self, token: Token) -> None:
        """Close the innermost loop and cross-wire both jumps."""
        if not self.loop_stack:
            raise UnbalancedBracketsError(
                "unbalanced []: unexpected ']'",
                unmatched=1,
                line=token.line,
                column=token.column,
                filename=self.filename,
            )

        loop = self.loop_stack.pop()
        self.pending = PendingOp(OpCode.JUMP_IF_NONZERO, loop.start + 1, token.line)
        self.bytecode.patch_jump(loop.start, self.bytecode.current_offset() + 1)

    def flush(self) -> None:
        """Append the pending instruction, if any."""
        if self.pending is None:
            return
        self.bytecode.emit(self.pending.opcode, self.pending.operand, self.pending.line)
        self.pending = None
