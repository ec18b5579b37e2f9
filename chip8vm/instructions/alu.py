"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

import jax.numpy as jnp

from chip8vm.state import EmulatorState
from chip8vm.instruction import (
    Instruction, SetReg, Or, And, Xor, AddReg, SubReg, ShiftRight, SubRegReversed, ShiftLeft
)
from chip8vm.io import Devices
from chip8vm.constants import FLAG_REGISTER

# Each operation maps (VX, VY) to (new VX, new VF or None when VF is untouched)


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    carry = int(result > 0xFF)
    return result & 0xFF, carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = 0 on borrow."""
    borrow_flag = int(vx >= vy)
    result = (vx - vy) & 0xFF
    return result, borrow_flag


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = 0 on borrow."""
    borrow_flag = int(vy >= vx)
    result = (vy - vx) & 0xFF
    return result, borrow_flag


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    result = (vx << 1) & 0xFF
    return result, shifted_bit


# Shifts carry no Y operand
_UNARY_OPERATIONS = (ShiftRight, ShiftLeft)

ALU_OPERATIONS = {
    SetReg: alu_set,
    Or: alu_or,
    And: alu_and,
    Xor: alu_xor,
    AddReg: alu_add,
    SubReg: alu_sub_xy,
    ShiftRight: alu_shift_right,
    SubRegReversed: alu_sub_yx,
    ShiftLeft: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: Instruction, devices: Devices) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    vy = 0 if isinstance(instruction, _UNARY_OPERATIONS) else int(state.V[instruction.y])

    result, vf = ALU_OPERATIONS[type(instruction)](vx, vy)

    new_V = state.V.at[instruction.x].set(jnp.uint8(result))
    # VF is written last so it wins when X is F
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(jnp.uint8(vf))
    return state.replace(V=new_V)
