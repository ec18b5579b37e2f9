"""CHIP-8 display operations."""

import numpy as np
import jax.numpy as jnp

from chip8vm.state import EmulatorState, check_address_range
from chip8vm.instruction import Draw
from chip8vm.io import Devices
from chip8vm.constants import FLAG_REGISTER, SPRITE_WIDTH


def execute_display(state: EmulatorState, instruction: Draw, devices: Devices) -> EmulatorState:
    """DXYN - XOR an N-row sprite from memory[I] onto the output at (VX, VY).

    VF is set to 1 if any pixel that was on is turned off. Coordinates are
    passed to the output unmodified; clipping or wrapping is up to the device.
    """
    sprite_x = int(state.V[instruction.x])
    sprite_y = int(state.V[instruction.y])
    address = check_address_range(state.I, instruction.n)
    sprite_rows = np.asarray(state.memory[address:address + instruction.n])

    output = devices.output
    collision = 0
    for row_offset, row in enumerate(sprite_rows):
        for col_offset in range(SPRITE_WIDTH):
            new_pixel = (int(row) >> (7 - col_offset)) & 1
            x, y = sprite_x + col_offset, sprite_y + row_offset
            old_pixel = output.get(x, y)
            xored_pixel = old_pixel ^ new_pixel
            output.set(x, y, xored_pixel)
            if old_pixel == 1 and xored_pixel == 0:
                collision = 1

    return state.replace(V=state.V.at[FLAG_REGISTER].set(jnp.uint8(collision)))
