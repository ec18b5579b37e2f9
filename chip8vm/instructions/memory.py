"""CHIP-8 memory and register operations."""

import jax.numpy as jnp

from chip8vm.state import EmulatorState
from chip8vm.instruction import SetConst, AddConst, SetI, Rand
from chip8vm.io import Devices
from chip8vm.constants import BYTE_MASK


def execute_set(state: EmulatorState, instruction: SetConst, devices: Devices) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(jnp.uint8(instruction.nn)))


def execute_add(state: EmulatorState, instruction: AddConst, devices: Devices) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping, VF untouched."""
    result = (int(state.V[instruction.x]) + instruction.nn) & BYTE_MASK
    return state.replace(V=state.V.at[instruction.x].set(jnp.uint8(result)))


def execute_set_index(state: EmulatorState, instruction: SetI, devices: Devices) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: Rand, devices: Devices) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    random_value = devices.random.next_byte() & instruction.nn
    return state.replace(V=state.V.at[instruction.x].set(jnp.uint8(random_value)))
