"""Errors raised by the CHIP-8 interpreter."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for interpreter faults."""


class InvalidOpcodeError(Chip8Error):
    """Raised when two bytes do not decode to a known instruction."""

    def __init__(self, word: int, address: Optional[int] = None):
        self.word = word
        self.address = address
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unknown opcode 0x{word:04X}{location}")


class StackOverflowError(Chip8Error):
    """Raised when a call would push past the end of the stack."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Call stack overflow (capacity {capacity})")


class StackUnderflowError(Chip8Error):
    """Raised when a return is executed with an empty stack."""

    def __init__(self):
        super().__init__("Return with empty call stack")


class MemoryAccessError(Chip8Error):
    """Raised when an instruction reads or writes outside memory."""

    def __init__(self, address: int, length: int = 1):
        self.address = address
        self.length = length
        super().__init__(f"Memory access out of range: 0x{address:04X} (+{length})")


class InputClosedError(Chip8Error):
    """Raised when a blocking key wait is cancelled by shutdown."""
