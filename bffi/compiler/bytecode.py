"""
BFFI Bytecode Format

Defines bytecode instructions and the compiled bytecode container.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence, Tuple, Union
import struct

from .errors import CompileError


class OpCode(IntEnum):
    """Tape machine opcodes. Values are the operator characters."""

    # Cell arithmetic
    INC = 0x2B               # '+' operand: repeat count
    DEC = 0x2D               # '-' operand: repeat count

    # Pointer movement
    LEFT = 0x3C              # '<' operand: repeat count
    RIGHT = 0x3E             # '>' operand: repeat count

    # I/O
    OUTPUT = 0x2E            # '.' operand: repeat count
    INPUT = 0x2C             # ',' operand: repeat count

    # Control flow
    JUMP_IF_ZERO = 0x5B      # '[' operand: index after matching ']'
    JUMP_IF_NONZERO = 0x5D   # ']' operand: index after matching '['

    def is_jump(self) -> bool:
        return self in (OpCode.JUMP_IF_ZERO, OpCode.JUMP_IF_NONZERO)


MAX_OPERAND = 0xFFFFFFFF

INSTRUCTION_FORMAT = '<BI'
INSTRUCTION_SIZE = struct.calcsize(INSTRUCTION_FORMAT)


class Instruction(NamedTuple):
    """A single (opcode, operand) pair."""

    opcode: OpCode
    operand: int

    def __repr__(self) -> str:
        return f"{self.opcode.name}({self.operand})"


@dataclass
class Bytecode:
    """Container for compiled tape-machine bytecode."""

    # Magic number for file format
    MAGIC = b'BFC\x00'
    VERSION = 1

    code: Union[List[Instruction], Tuple[Instruction, ...]] = field(default_factory=list)

    # Debug information
    line_numbers: List[int] = field(default_factory=list)  # Line number per instruction

    def __len__(self) -> int:
        return len(self.code)

    def __getitem__(self, index: int) -> Instruction:
        return self.code[index]

    @property
    def sealed(self) -> bool:
        return isinstance(self.code, tuple)

    def emit(self, opcode: OpCode, operand: int, line: int = 0) -> int:
        """Append an instruction, returning its index."""
        if self.sealed:
            raise CompileError("Cannot emit into sealed bytecode")
        offset = len(self.code)
        self.code.append(Instruction(opcode, operand))
        self.line_numbers.append(line)
        return offset

    def patch_jump(self, offset: int, target: int) -> None:
        """Patch the jump at offset to land on target."""
        if self.sealed:
            raise CompileError("Cannot patch sealed bytecode")

        instr = self.code[offset]
        if not instr.opcode.is_jump():
            raise CompileError(f"Cannot patch non-jump instruction {instr!r} at {offset}")

        self.code[offset] = Instruction(instr.opcode, target)

    def current_offset(self) -> int:
        """Get the index the next emitted instruction will occupy."""
        return len(self.code)

    def seal(self) -> 'Bytecode':
        """Freeze the instruction sequence."""
        self.code = tuple(self.code)
        return self

    def serialize(self) -> bytes:
        """Serialize bytecode to binary format."""
        output = bytearray()

        # Header
        output.extend(self.MAGIC)
        output.extend(struct.pack('<H', self.VERSION))
        output.extend(struct.pack('<H', 0))  # Flags

        # Code
        output.extend(struct.pack('<I', len(self.code)))
        for instr in self.code:
            if instr.operand > MAX_OPERAND:
                raise ValueError(f"Operand too large to serialize: {instr.operand}")
            output.extend(struct.pack(INSTRUCTION_FORMAT, instr.opcode, instr.operand))

        return bytes(output)

    @classmethod
    def deserialize(cls, data: bytes) -> 'Bytecode':
        """Deserialize bytecode from binary format."""
        offset = 0

        # Header
        magic = data[offset:offset+4]
        if magic != cls.MAGIC:
            raise ValueError("Invalid bytecode magic number")
        offset += 4

        try:
            version, flags, count = struct.unpack_from('<HHI', data, offset)
        except struct.error:
            raise ValueError("Truncated bytecode header")
        if version != cls.VERSION:
            raise ValueError(f"Unsupported bytecode version: {version}")
        offset += 8

        if len(data) - offset < count * INSTRUCTION_SIZE:
            raise ValueError("Truncated bytecode")

        instructions = []
        for index in range(count):
            raw_op, operand = struct.unpack_from(INSTRUCTION_FORMAT, data, offset)
            offset += INSTRUCTION_SIZE
            try:
                opcode = OpCode(raw_op)
            except ValueError:
                raise ValueError(f"Invalid opcode 0x{raw_op:02x} at index {index}")
            instructions.append((opcode, operand))

        return cls.from_instructions(instructions)

    @classmethod
    def from_instructions(cls, instructions: Sequence[Tuple[OpCode, int]]) -> 'Bytecode':
        """Build sealed bytecode from (opcode, operand) pairs."""
        bc = cls()
        for opcode, operand in instructions:
            bc.emit(OpCode(opcode), operand)
        return bc.seal()
