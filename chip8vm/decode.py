"""CHIP-8 instruction decoding."""

from typing import Callable

from chip8vm.bits import BitFields, split, split_word
from chip8vm.errors import InvalidOpcodeError
from chip8vm.instruction import (
    Instruction, SysCall, ClearScreen, Return, Goto, Call, SkipEqConst, SkipNeqConst,
    SkipEqReg, SetConst, AddConst, SetReg, Or, And, Xor, AddReg, SubReg, ShiftRight,
    SubRegReversed, ShiftLeft, SkipNeqReg, SetI, JumpV0, Rand, Draw, SkipKeyPressed,
    SkipKeyNotPressed, SetRegFromDelay, WaitKey, SetDelay, SetSound, AddToI,
    SetIToFontAddr, StoreBCD, RegDump, RegLoad
)
from chip8vm.logging import get_logger

logger = get_logger("chip8vm.decode")

# 8XYN, keyed by N
_ALU_OPERATIONS: dict[int, Callable[[BitFields], Instruction]] = {
    0x0: lambda f: SetReg(f.x, f.y),
    0x1: lambda f: Or(f.x, f.y),
    0x2: lambda f: And(f.x, f.y),
    0x3: lambda f: Xor(f.x, f.y),
    0x4: lambda f: AddReg(f.x, f.y),
    0x5: lambda f: SubReg(f.x, f.y),
    0x6: lambda f: ShiftRight(f.x),
    0x7: lambda f: SubRegReversed(f.x, f.y),
    0xE: lambda f: ShiftLeft(f.x),
}

# EXNN, keyed by NN
_KEY_OPERATIONS: dict[int, Callable[[BitFields], Instruction]] = {
    0x9E: lambda f: SkipKeyPressed(f.x),
    0xA1: lambda f: SkipKeyNotPressed(f.x),
}

# FXNN, keyed by NN
_MISC_OPERATIONS: dict[int, Callable[[BitFields], Instruction]] = {
    0x07: lambda f: SetRegFromDelay(f.x),
    0x0A: lambda f: WaitKey(f.x),
    0x15: lambda f: SetDelay(f.x),
    0x18: lambda f: SetSound(f.x),
    0x1E: lambda f: AddToI(f.x),
    0x29: lambda f: SetIToFontAddr(f.x),
    0x33: lambda f: StoreBCD(f.x),
    0x55: lambda f: RegDump(f.x),
    0x65: lambda f: RegLoad(f.x),
}


def _invalid(fields: BitFields) -> Instruction:
    logger.error(f"Unknown opcode 0x{fields.raw:04X}")
    raise InvalidOpcodeError(fields.raw)


def _lookup(table: dict[int, Callable[[BitFields], Instruction]], key: int, fields: BitFields) -> Instruction:
    factory = table.get(key)
    if factory is None:
        return _invalid(fields)
    return factory(fields)


def decode_system(fields: BitFields) -> Instruction:
    """0NNN family: 00E0, 00EE, otherwise a machine code call."""
    if fields.raw == 0x00E0:
        return ClearScreen()
    if fields.raw == 0x00EE:
        return Return()
    return SysCall(fields.nnn)


def decode_skip_if_equal_register(fields: BitFields) -> Instruction:
    """5XY0."""
    if fields.n != 0:
        return _invalid(fields)
    return SkipEqReg(fields.x, fields.y)


def decode_skip_if_not_equal_register(fields: BitFields) -> Instruction:
    """9XY0."""
    if fields.n != 0:
        return _invalid(fields)
    return SkipNeqReg(fields.x, fields.y)


def decode_alu_operation(fields: BitFields) -> Instruction:
    return _lookup(_ALU_OPERATIONS, fields.n, fields)


def decode_key_operation(fields: BitFields) -> Instruction:
    return _lookup(_KEY_OPERATIONS, fields.nn, fields)


def decode_misc_operation(fields: BitFields) -> Instruction:
    return _lookup(_MISC_OPERATIONS, fields.nn, fields)


_FAMILIES: list[Callable[[BitFields], Instruction]] = [
    decode_system,
    lambda f: Goto(f.nnn),
    lambda f: Call(f.nnn),
    lambda f: SkipEqConst(f.x, f.nn),
    lambda f: SkipNeqConst(f.x, f.nn),
    decode_skip_if_equal_register,
    lambda f: SetConst(f.x, f.nn),
    lambda f: AddConst(f.x, f.nn),
    decode_alu_operation,
    decode_skip_if_not_equal_register,
    lambda f: SetI(f.nnn),
    lambda f: JumpV0(f.nnn),
    lambda f: Rand(f.x, f.nn),
    lambda f: Draw(f.x, f.y, f.n),
    decode_key_operation,
    decode_misc_operation,
]


def decode_fields(fields: BitFields) -> Instruction:
    """Decode already split fields, dispatching on the first nibble."""
    return _FAMILIES[fields.opcode](fields)


def decode(high: int, low: int) -> Instruction:
    """Decode the two bytes of an instruction.

    Raises:
        InvalidOpcodeError: if the bytes match no CHIP-8 opcode.
    """
    return decode_fields(split(high, low))


def decode_word(word: int) -> Instruction:
    """Decode a 16-bit instruction word."""
    return decode_fields(split_word(word))
