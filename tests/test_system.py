"""Tests for system instructions (0xxx)."""

import numpy as np

from conftest import run_word


def test_execute_clear_screen(fresh_state, devices):
    """00E0 - Clear display."""
    devices.output.set(0, 0, 1)
    devices.output.set(63, 31, 1)

    state = run_word(fresh_state, 0x00E0, devices)

    assert not np.any(devices.output.pixels)
    assert state.pc == 0x202


def test_syscall_is_ignored(fresh_state, devices):
    """0NNN only advances the program counter."""
    state = run_word(fresh_state, 0x0123, devices)

    assert state.pc == 0x202
    assert np.array_equal(np.asarray(state.V), np.asarray(fresh_state.V))
    assert np.array_equal(np.asarray(state.memory), np.asarray(fresh_state.memory))
    assert state.stack.pointer == 0


def test_timers_tick_on_every_instruction(fresh_state, devices):
    """Timers count down once per executed instruction and stop at zero."""
    state = fresh_state.replace(delay_timer=fresh_state.delay_timer + 2, sound_timer=fresh_state.sound_timer + 1)

    state = run_word(state, 0x0000, devices)
    assert state.delay_timer == 1
    assert state.sound_timer == 0

    state = run_word(state, 0x0000, devices)
    assert state.delay_timer == 0
    assert state.sound_timer == 0

    state = run_word(state, 0x0000, devices)
    assert state.delay_timer == 0
    assert state.sound_timer == 0
