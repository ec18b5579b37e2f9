"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chip8vm.state import EmulatorState, check_address_range
from chip8vm.instruction import (
    SetRegFromDelay, WaitKey, SetDelay, SetSound, AddToI, SetIToFontAddr, StoreBCD, RegDump, RegLoad
)
from chip8vm.io import Devices
from chip8vm.constants import FONT_START, FONT_GLYPH_SIZE, WORD_MASK


def execute_get_delay_timer(state: EmulatorState, instruction: SetRegFromDelay, devices: Devices) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: WaitKey, devices: Devices) -> EmulatorState:
    """FX0A - Wait for key press (blocking)."""
    pressed_key = devices.input.wait()
    return state.replace(V=state.V.at[instruction.x].set(jnp.uint8(pressed_key)))


def execute_set_delay_timer(state: EmulatorState, instruction: SetDelay, devices: Devices) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: SetSound, devices: Devices) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: AddToI, devices: Devices) -> EmulatorState:
    """FX1E - Add VX to I register. VF is not affected."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & WORD_MASK
    return state.replace(I=jnp.uint16(new_i))


def execute_font_character(state: EmulatorState, instruction: SetIToFontAddr, devices: Devices) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(state.V[instruction.x]) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.uint16(font_address))


def execute_bcd_conversion(state: EmulatorState, instruction: StoreBCD, devices: Devices) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    address = check_address_range(state.I, 3)

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[address:address + 3].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: RegDump, devices: Devices) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    count = instruction.x + 1
    address = check_address_range(state.I, count)
    new_memory = state.memory.at[address:address + count].set(state.V[:count])
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: RegLoad, devices: Devices) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    count = instruction.x + 1
    address = check_address_range(state.I, count)
    new_V = state.V.at[:count].set(state.memory[address:address + count])
    return state.replace(V=new_V)
