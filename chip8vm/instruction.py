"""The CHIP-8 instruction set.

Each opcode is a frozen dataclass carrying its operands:

- ``x``, ``y``: 4-bit register indices
- ``nn``: 8-bit constant
- ``n``: 4-bit constant (sprite height)
- ``nnn``: 12-bit address
"""

import dataclasses

from flax import struct

# Largest value each operand field can hold
OPERAND_LIMITS = {"x": 0xF, "y": 0xF, "n": 0xF, "nn": 0xFF, "nnn": 0xFFF}


class Instruction:
    """Base class of all decoded instructions."""

    def validate(self) -> "Instruction":
        """Check that every operand fits its bit field.

        Decoded instructions always do; hand-built ones may not.

        Raises:
            ValueError: if an operand is outside its range.
        """
        for field in dataclasses.fields(self):
            limit = OPERAND_LIMITS[field.name]
            value = getattr(self, field.name)
            if not 0 <= value <= limit:
                raise ValueError(
                    f"{type(self).__name__}.{field.name} = {value!r} is outside 0..0x{limit:X}"
                )
        return self


@struct.dataclass
class SysCall(Instruction):
    """0NNN - Call machine code routine at NNN (ignored)."""
    nnn: int


@struct.dataclass
class ClearScreen(Instruction):
    """00E0 - Clear the display."""


@struct.dataclass
class Return(Instruction):
    """00EE - Return from subroutine."""


@struct.dataclass
class Goto(Instruction):
    """1NNN - Jump to NNN."""
    nnn: int


@struct.dataclass
class Call(Instruction):
    """2NNN - Call subroutine at NNN."""
    nnn: int


@struct.dataclass
class SkipEqConst(Instruction):
    """3XNN - Skip next instruction if VX == NN."""
    x: int
    nn: int


@struct.dataclass
class SkipNeqConst(Instruction):
    """4XNN - Skip next instruction if VX != NN."""
    x: int
    nn: int


@struct.dataclass
class SkipEqReg(Instruction):
    """5XY0 - Skip next instruction if VX == VY."""
    x: int
    y: int


@struct.dataclass
class SetConst(Instruction):
    """6XNN - VX = NN."""
    x: int
    nn: int


@struct.dataclass
class AddConst(Instruction):
    """7XNN - VX += NN, no carry flag."""
    x: int
    nn: int


@struct.dataclass
class SetReg(Instruction):
    """8XY0 - VX = VY."""
    x: int
    y: int


@struct.dataclass
class Or(Instruction):
    """8XY1 - VX |= VY."""
    x: int
    y: int


@struct.dataclass
class And(Instruction):
    """8XY2 - VX &= VY."""
    x: int
    y: int


@struct.dataclass
class Xor(Instruction):
    """8XY3 - VX ^= VY."""
    x: int
    y: int


@struct.dataclass
class AddReg(Instruction):
    """8XY4 - VX += VY, VF = carry."""
    x: int
    y: int


@struct.dataclass
class SubReg(Instruction):
    """8XY5 - VX -= VY, VF = not borrow."""
    x: int
    y: int


@struct.dataclass
class ShiftRight(Instruction):
    """8XY6 - VF = VX & 1, VX >>= 1."""
    x: int


@struct.dataclass
class SubRegReversed(Instruction):
    """8XY7 - VX = VY - VX, VF = not borrow."""
    x: int
    y: int


@struct.dataclass
class ShiftLeft(Instruction):
    """8XYE - VF = VX >> 7, VX <<= 1."""
    x: int


@struct.dataclass
class SkipNeqReg(Instruction):
    """9XY0 - Skip next instruction if VX != VY."""
    x: int
    y: int


@struct.dataclass
class SetI(Instruction):
    """ANNN - I = NNN."""
    nnn: int


@struct.dataclass
class JumpV0(Instruction):
    """BNNN - Jump to V0 + NNN."""
    nnn: int


@struct.dataclass
class Rand(Instruction):
    """CXNN - VX = random byte & NN."""
    x: int
    nn: int


@struct.dataclass
class Draw(Instruction):
    """DXYN - Draw an N-row sprite from memory[I] at (VX, VY), VF = collision."""
    x: int
    y: int
    n: int


@struct.dataclass
class SkipKeyPressed(Instruction):
    """EX9E - Skip next instruction if the key in VX is pressed."""
    x: int


@struct.dataclass
class SkipKeyNotPressed(Instruction):
    """EXA1 - Skip next instruction if the key in VX is not pressed."""
    x: int


@struct.dataclass
class SetRegFromDelay(Instruction):
    """FX07 - VX = delay timer."""
    x: int


@struct.dataclass
class WaitKey(Instruction):
    """FX0A - Block until a key is pressed, store it in VX."""
    x: int


@struct.dataclass
class SetDelay(Instruction):
    """FX15 - Delay timer = VX."""
    x: int


@struct.dataclass
class SetSound(Instruction):
    """FX18 - Sound timer = VX."""
    x: int


@struct.dataclass
class AddToI(Instruction):
    """FX1E - I += VX."""
    x: int


@struct.dataclass
class SetIToFontAddr(Instruction):
    """FX29 - I = address of the font glyph for VX."""
    x: int


@struct.dataclass
class StoreBCD(Instruction):
    """FX33 - Store the decimal digits of VX at I, I+1, I+2."""
    x: int


@struct.dataclass
class RegDump(Instruction):
    """FX55 - Store V0..VX in memory starting at I."""
    x: int


@struct.dataclass
class RegLoad(Instruction):
    """FX65 - Load V0..VX from memory starting at I."""
    x: int
