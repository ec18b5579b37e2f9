"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp

from chip8vm.logging import configure
from chip8vm import (
    create_state, decode_word, execute, Devices, DummyInput, ConstantInput, ArrayOutput,
    SequenceRandomSource, Emulator
)


@pytest.fixture(autouse=True)
def quiet_logging():
    """Undo log level changes made by a test."""
    yield
    configure(log_level="WARNING")


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def devices():
    """Headless devices: no keys, a 64x32 framebuffer and a fixed random byte."""
    return Devices(input=DummyInput(), output=ArrayOutput(), random=SequenceRandomSource([0xAB]))


@pytest.fixture
def keyed_devices():
    """Devices whose keypad always reports key 5."""
    return Devices(input=ConstantInput(0x5), output=ArrayOutput(), random=SequenceRandomSource([0xAB]))


@pytest.fixture
def emulator():
    """Provide an emulator drawing into an ArrayOutput."""
    return Emulator(output=ArrayOutput(), random_source=SequenceRandomSource([0xAB]))


def run_word(state, word, devices):
    """Decode and execute one instruction word."""
    return execute(state, decode_word(word), devices)


def run_words(state, words, devices):
    for word in words:
        state = run_word(state, word, devices)
    return state


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=3, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def setup_memory(state, address, data):
    """Helper to put bytes in memory."""
    return state.replace(
        memory=state.memory.at[address:address + len(data)].set(
            jnp.array(data, dtype=jnp.uint8)
        )
    )


def program_bytes(*words):
    """Assemble instruction words into a big-endian program."""
    return b"".join(word.to_bytes(2, "big") for word in words)
