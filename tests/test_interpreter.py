"""
BFFI Interpreter Tests

Tests for the tape machine.
"""

import errno
import io
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bffi.api.context import Context
from bffi.api.interpreter import Interpreter
from bffi.api.tape import Tape, DEFAULT_TAPE_SIZE
from bffi.compiler import Bytecode, Instruction, OpCode
from bffi.compiler.errors import ExecutionError


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def execute(source, stdin=b"", **kwargs):
    """Run source and return (output bytes, final tape)."""
    out = io.BytesIO()
    ctx = Context(stdin=io.BytesIO(stdin), stdout=out, **kwargs)
    tape = ctx.execute(ctx.compile(source))
    return out.getvalue(), tape


class BrokenOutput:
    def write(self, data):
        raise OSError(errno.EPIPE, "Broken pipe")

    def flush(self):
        pass


class TestBasicExecution:
    """Test basic program execution."""

    def test_empty_program(self):
        output, tape = execute("")
        assert output == b""
        assert tape.head == 0

    def test_increment_then_output(self):
        output, _ = execute("++.")
        assert output == b"\x02"

    @pytest.mark.parametrize("k", [0, 1, 65, 128, 255])
    def test_output_after_k_increments(self, k):
        output, _ = execute("+" * k + ".")
        assert output == bytes([k])

    def test_repeated_output(self):
        output, _ = execute("+++...")
        assert output == b"\x03\x03\x03"

    def test_hello_world(self):
        output, _ = execute(HELLO_WORLD)
        assert output == b"Hello World!\n"

    def test_fresh_tape_per_execution(self):
        out = io.BytesIO()
        ctx = Context(stdout=out)
        script = ctx.compile("+.")
        ctx.execute(script)
        ctx.execute(script)
        assert out.getvalue() == b"\x01\x01"


class TestControlFlow:
    """Test loop execution."""

    def test_clear_loop_terminates(self):
        output, tape = execute("+[-]")
        assert output == b""
        assert tape[0] == 0

    def test_loop_skipped_on_zero(self):
        output, _ = execute("[.]+.")
        assert output == b"\x01"

    def test_nested_multiply(self):
        output, tape = execute("++[>+++[>+<-]<-]>>.")
        assert output == b"\x06"
        assert tape[0] == 0
        assert tape[1] == 0
        assert tape[2] == 6

    def test_move_value(self):
        _, tape = execute("+++++[->>+<<]")
        assert tape[0] == 0
        assert tape[2] == 5


class TestWraparound:
    """Cell and head wraparound."""

    def test_cell_underflow(self):
        output, _ = execute("-.")
        assert output == b"\xff"

    def test_cell_overflow(self):
        output, _ = execute("+" * 256 + ".")
        assert output == b"\x00"

    def test_large_operand_wraps(self):
        bytecode = Bytecode.from_instructions([(OpCode.INC, 300), (OpCode.OUTPUT, 1)])
        out = io.BytesIO()
        Interpreter(Context(stdout=out)).run(bytecode)
        assert out.getvalue() == bytes([300 % 256])

    def test_head_wraps_left(self):
        _, tape = execute("<+", tape_size=8)
        assert tape.head == 7
        assert tape[7] == 1

    def test_head_wraps_right(self):
        _, tape = execute(">" * 8 + "+", tape_size=8)
        assert tape.head == 0
        assert tape[0] == 1

    def test_default_tape_size(self):
        _, tape = execute("<")
        assert len(tape) == DEFAULT_TAPE_SIZE
        assert tape.head == DEFAULT_TAPE_SIZE - 1


class TestInput:
    """Test ',' handling."""

    def test_echo_byte(self):
        output, _ = execute(",.", stdin=bytes([65]))
        assert output == b"A"

    def test_eof_leaves_cell_unchanged(self):
        output, _ = execute("+++,.", stdin=b"")
        assert output == b"\x03"

    def test_repeated_input_keeps_last_byte(self):
        output, _ = execute(",,.", stdin=b"AB")
        assert output == b"B"

    def test_partial_eof(self):
        output, _ = execute(",,,.", stdin=b"Z")
        assert output == b"Z"

    def test_echo_until_eof(self):
        # Loop ends once a NUL byte is read
        output, _ = execute(",[.,]", stdin=b"hi\x00")
        assert output == b"hi"


class TestErrors:
    """Runtime error handling."""

    def test_output_failure(self):
        ctx = Context(stdout=BrokenOutput())
        with pytest.raises(ExecutionError) as exc_info:
            ctx.execute(ctx.compile("+."))
        assert exc_info.value.pc == 1

    def test_error_carries_filename(self):
        ctx = Context(stdout=BrokenOutput())
        script = ctx.compile(".", filename="prog.b")
        with pytest.raises(ExecutionError) as exc_info:
            ctx.execute(script)
        assert str(exc_info.value).startswith("prog.b:1: ")

    def test_error_reports_source_line(self):
        ctx = Context(stdout=BrokenOutput())
        with pytest.raises(ExecutionError) as exc_info:
            ctx.execute(ctx.compile("+\n\n."))
        assert exc_info.value.pc == 1
        assert exc_info.value.line == 3

    def test_deserialized_bytecode_has_no_line(self):
        bytecode = Bytecode.deserialize(Context().compile("\n.").bytecode.serialize())
        with pytest.raises(ExecutionError) as exc_info:
            Interpreter(Context(stdout=BrokenOutput())).run(bytecode)
        assert exc_info.value.line is None
        assert exc_info.value.pc == 0

    def test_unknown_opcode(self):
        bytecode = Bytecode(code=(Instruction(0x41, 0),))
        with pytest.raises(ExecutionError, match="Unknown opcode"):
            Interpreter(Context(stdout=io.BytesIO())).run(bytecode)


class TestDebugOutput:
    """Diagnostics printed with debug=True."""

    def test_debug_goes_to_stderr(self, capsys):
        output, _ = execute("+[-]", debug=True)
        captured = capsys.readouterr()
        assert output == b""
        assert "compiled <source>: 4 instructions" in captured.err
        assert "executed 4 steps" in captured.err
        assert captured.out == ""


class TestTape:
    """Tape unit tests."""

    def test_zero_initialized(self):
        tape = Tape(16)
        assert tape.cells.tobytes() == bytes(16)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Tape(0)

    def test_add_and_write(self):
        tape = Tape(4)
        tape.add(-1)
        assert tape.read() == 255
        tape.write(258)
        assert tape.read() == 2

    def test_move_wraps(self):
        tape = Tape(4)
        tape.move(-5)
        assert tape.head == 3
        tape.move(6)
        assert tape.head == 1
