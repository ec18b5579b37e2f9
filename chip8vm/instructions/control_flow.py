"""CHIP-8 control flow instructions."""

import jax.numpy as jnp

from chip8vm.state import EmulatorState
from chip8vm.instruction import Goto, Call, JumpV0
from chip8vm.io import Devices
from chip8vm.stack import push


def execute_jump(state: EmulatorState, instruction: Goto, devices: Devices) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: Call, devices: Devices) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction, devices: Devices) -> EmulatorState:
        if condition_fn(state, instruction, devices):
            return state.replace(pc=state.pc + 2)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst, devices: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst, devices: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst, devices: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst, devices: state.V[inst.x] != state.V[inst.y]
)

# No key pressed never equals a register value
execute_skip_if_key = make_skip_instruction(
    lambda state, inst, devices: devices.input.peek() == int(state.V[inst.x])
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst, devices: devices.input.peek() != int(state.V[inst.x])
)


def execute_jump_with_offset(state: EmulatorState, instruction: JumpV0, devices: Devices) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = instruction.nnn + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))
