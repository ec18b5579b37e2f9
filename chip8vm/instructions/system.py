"""CHIP-8 system instructions (0x0xxx)."""

from chip8vm.state import EmulatorState
from chip8vm.instruction import SysCall, ClearScreen, Return
from chip8vm.io import Devices
from chip8vm.stack import pop


def no_op(state: EmulatorState, instruction: SysCall, devices: Devices) -> EmulatorState:
    """0NNN - Machine code routines do not exist here; ignored."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: ClearScreen, devices: Devices) -> EmulatorState:
    """00E0 - Clear display."""
    devices.output.clear()
    return state


def execute_return(state: EmulatorState, instruction: Return, devices: Devices) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)
