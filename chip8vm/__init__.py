"""CHIP-8 interpreter package."""

from chip8vm.bits import BitFields, join, split, split_word
from chip8vm.constants import *
from chip8vm.decode import decode, decode_word
from chip8vm.emulator import Emulator, execute, fetch, load_program, load_rom, step
from chip8vm.errors import (
    Chip8Error, InvalidOpcodeError, StackOverflowError, StackUnderflowError,
    MemoryAccessError, InputClosedError
)
from chip8vm.io import (
    EmulatorInput, EmulatorOutput, DummyInput, ConstantInput, DummyOutput,
    ArrayOutput, Devices
)
from chip8vm.keys import KeyBuffer, KeyListener, BufferedInput, key_from_char
from chip8vm.rng import RandomSource, JaxRandomSource, SequenceRandomSource
from chip8vm.state import EmulatorState, create_state

__all__ = [
    "BitFields",
    "join",
    "split",
    "split_word",
    "decode",
    "decode_word",
    "Emulator",
    "execute",
    "fetch",
    "load_program",
    "load_rom",
    "step",
    "Chip8Error",
    "InvalidOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "InputClosedError",
    "EmulatorInput",
    "EmulatorOutput",
    "DummyInput",
    "ConstantInput",
    "DummyOutput",
    "ArrayOutput",
    "Devices",
    "KeyBuffer",
    "KeyListener",
    "BufferedInput",
    "key_from_char",
    "RandomSource",
    "JaxRandomSource",
    "SequenceRandomSource",
    "EmulatorState",
    "create_state",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
