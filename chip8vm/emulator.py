"""Main CHIP-8 emulator execution engine."""

from typing import Iterable, Optional, Union

import jax.numpy as jnp
import numpy as np

from chip8vm.state import EmulatorState, create_state, check_address_range
from chip8vm.decode import decode, decode_word
from chip8vm.errors import InvalidOpcodeError
from chip8vm.constants import PROGRAM_START, MAX_PROGRAM_SIZE
from chip8vm.instruction import (
    Instruction, SysCall, ClearScreen, Return, Goto, Call, SkipEqConst, SkipNeqConst,
    SkipEqReg, SetConst, AddConst, SetReg, Or, And, Xor, AddReg, SubReg, ShiftRight,
    SubRegReversed, ShiftLeft, SkipNeqReg, SetI, JumpV0, Rand, Draw, SkipKeyPressed,
    SkipKeyNotPressed, SetRegFromDelay, WaitKey, SetDelay, SetSound, AddToI,
    SetIToFontAddr, StoreBCD, RegDump, RegLoad
)
from chip8vm.io import Devices, DummyInput, DummyOutput, EmulatorInput, EmulatorOutput
from chip8vm.rng import RandomSource, JaxRandomSource
from chip8vm.logging import get_logger
from chip8vm.instructions.system import no_op, execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

logger = get_logger("chip8vm.emulator")

HANDLERS = {
    SysCall: no_op,
    ClearScreen: execute_clear_screen,
    Return: execute_return,
    Goto: execute_jump,
    Call: execute_call,
    SkipEqConst: execute_skip_if_equal_immediate,
    SkipNeqConst: execute_skip_if_not_equal_immediate,
    SkipEqReg: execute_skip_if_equal_register,
    SetConst: execute_set,
    AddConst: execute_add,
    SetReg: execute_alu_operation,
    Or: execute_alu_operation,
    And: execute_alu_operation,
    Xor: execute_alu_operation,
    AddReg: execute_alu_operation,
    SubReg: execute_alu_operation,
    ShiftRight: execute_alu_operation,
    SubRegReversed: execute_alu_operation,
    ShiftLeft: execute_alu_operation,
    SkipNeqReg: execute_skip_if_not_equal_register,
    SetI: execute_set_index,
    JumpV0: execute_jump_with_offset,
    Rand: execute_random,
    Draw: execute_display,
    SkipKeyPressed: execute_skip_if_key,
    SkipKeyNotPressed: execute_skip_if_not_key,
    SetRegFromDelay: execute_get_delay_timer,
    WaitKey: execute_wait_for_key,
    SetDelay: execute_set_delay_timer,
    SetSound: execute_set_sound_timer,
    AddToI: execute_add_to_index,
    SetIToFontAddr: execute_font_character,
    StoreBCD: execute_bcd_conversion,
    RegDump: execute_store_registers,
    RegLoad: execute_load_registers,
}


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers by one, stopping at zero."""
    if state.delay_timer > 0:
        state = state.replace(delay_timer=state.delay_timer - 1)
    if state.sound_timer > 0:
        state = state.replace(sound_timer=state.sound_timer - 1)
    return state


def fetch(state: EmulatorState) -> tuple[int, int]:
    """Fetch the two bytes of the next instruction."""
    address = check_address_range(state.pc, 2)
    return int(state.memory[address]), int(state.memory[address + 1])


def _apply(state: EmulatorState, instruction: Instruction, devices: Devices) -> EmulatorState:
    if logger.is_enabled_for("DEBUG"):
        logger.debug(f"0x{int(state.pc):03X} {instruction}")

    # PC moves past the instruction before its effect, so jumps are absolute
    state = state.replace(pc=state.pc + 2)
    return HANDLERS[type(instruction)](state, instruction, devices)


def execute(state: EmulatorState, instruction: Instruction, devices: Devices) -> EmulatorState:
    """Execute a single instruction, including the timer update.

    Raises:
        ValueError: if an operand does not fit its bit field.
    """
    return _apply(tick_timers(state), instruction.validate(), devices)


def step(state: EmulatorState, devices: Devices) -> EmulatorState:
    """Update timers, then fetch, decode and execute the instruction at PC."""
    state = tick_timers(state)
    high, low = fetch(state)
    try:
        instruction = decode(high, low)
    except InvalidOpcodeError as e:
        raise InvalidOpcodeError(e.word, int(state.pc)) from None
    return _apply(state, instruction, devices)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy a program into memory at 0x200, silently dropping what does not fit."""
    data = bytes(program)[:MAX_PROGRAM_SIZE]
    if len(data) < len(program):
        logger.info(f"Program truncated from {len(program)} to {len(data)} bytes")
    if not data:
        return state
    program_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    logger.info(f"Loaded {len(rom_data)} bytes from {filename}")
    return load_program(state, rom_data)


class Emulator:
    """A CHIP-8 machine wired to its input, output and random devices.

    Without arguments the emulator runs headless: no keys are ever pressed
    and pixels are kept in a sparse in-memory grid.
    """

    def __init__(
        self,
        input: Optional[EmulatorInput] = None,
        output: Optional[EmulatorOutput] = None,
        random_source: Optional[RandomSource] = None,
        seed: int = 0,
    ):
        self.devices = Devices(
            input=input if input is not None else DummyInput(),
            output=output if output is not None else DummyOutput(),
            random=random_source if random_source is not None else JaxRandomSource(seed),
        )
        self.state = create_state()
        self._program = b""

    @property
    def input(self) -> EmulatorInput:
        return self.devices.input

    @property
    def output(self) -> EmulatorOutput:
        return self.devices.output

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def I(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> np.ndarray:
        return np.asarray(self.state.V)

    @property
    def memory(self) -> np.ndarray:
        return np.asarray(self.state.memory)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def stack_pointer(self) -> int:
        return int(self.state.stack.pointer)

    def load(self, program: Union[bytes, bytearray, Iterable[int]]):
        """Copy a program into memory at 0x200."""
        self._program = bytes(program)
        self.state = load_program(self.state, self._program)

    def load_rom(self, filename: str):
        """Read a ROM file and load it."""
        with open(filename, 'rb') as f:
            self.load(f.read())
        logger.info(f"Loaded {len(self._program)} bytes from {filename}")

    def reset(self):
        """Restore the power-on state, reload the last program and clear the screen."""
        self.state = load_program(create_state(), self._program)
        self.devices.output.clear()

    def step(self):
        """Execute exactly one instruction from memory."""
        self.state = step(self.state, self.devices)

    def execute(self, instruction: Instruction):
        """Execute a single decoded instruction."""
        self.state = execute(self.state, instruction, self.devices)

    def execute_word(self, word: int):
        """Decode and execute a 16-bit instruction word."""
        self.execute(decode_word(word))

    def execute_many(self, instructions: Iterable[Instruction]):
        """Execute instructions in succession."""
        for instruction in instructions:
            self.execute(instruction)
