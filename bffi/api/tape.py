"""
BFFI Tape

The tape machine's memory: a fixed run of unsigned 8-bit cells backed by a
numpy array, with a head that wraps around both ends.
"""

import numpy as np

DEFAULT_TAPE_SIZE = 4096

# Cells are unsigned 8-bit
CELL_MASK = 0xFF


class Tape:
    """Zero-initialized byte tape with a wrapping head."""

    def __init__(self, size: int = DEFAULT_TAPE_SIZE):
        if size < 1:
            raise ValueError(f"Tape size must be at least 1, got {size}")
        self.size = size
        self.cells = np.zeros(size, dtype=np.uint8)
        self.head = 0

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: int) -> int:
        return int(self.cells[index % self.size])

    def read(self) -> int:
        """Value of the cell under the head."""
        return int(self.cells[self.head])

    def write(self, value: int) -> None:
        """Store value (mod 256) in the cell under the head."""
        self.cells[self.head] = value & CELL_MASK

    def add(self, amount: int) -> None:
        """Add amount to the current cell, wrapping modulo 256."""
        self.cells[self.head] = (int(self.cells[self.head]) + amount) & CELL_MASK

    def move(self, offset: int) -> None:
        """Move the head by offset cells, wrapping modulo the tape size."""
        self.head = (self.head + offset) % self.size
