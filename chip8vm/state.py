"""CHIP-8 machine state structures."""

import jax.numpy as jnp
from flax.struct import dataclass, field, PyTreeNode

from chip8vm.errors import MemoryAccessError
from chip8vm.constants import (
    MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START, FONT_START, FONT_DATA, STACK_SIZE
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Registers, memory, stack and timers of the virtual machine.

    The framebuffer is not part of the state: it belongs to the output device.
    """
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))


def create_state() -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState()
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def check_address_range(address: int, length: int = 1) -> int:
    """Ensure ``length`` bytes starting at ``address`` lie inside memory."""
    address = int(address)
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryAccessError(address, length)
    return address
