"""Drivers that repeatedly step an emulator."""

import time
from typing import Callable, Optional

from chip8vm.emulator import Emulator
from chip8vm.errors import Chip8Error, InputClosedError
from chip8vm.logging import RunLogger, build_progress_bar, get_logger

logger = get_logger("chip8vm.runner")

# The interactive frontends run at a fixed rate
STEPS_PER_SECOND = 120
REFRESH_INTERVAL = 1.0 / 60


def run(
    emulator: Emulator,
    should_stop: Callable[[], bool],
    steps_per_second: float = STEPS_PER_SECOND,
    refresh_interval: float = REFRESH_INTERVAL,
    on_frame: Optional[Callable[[], None]] = None,
    run_logger: Optional[RunLogger] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Step ``emulator`` until ``should_stop()`` is true, pacing to ``steps_per_second``.

    ``output.refresh()`` and ``on_frame`` are called every ``refresh_interval``
    seconds. Returns the number of executed steps. Interpreter faults are
    logged with the program counter and re-raised.
    """
    step_period = 1.0 / steps_per_second
    steps = 0
    next_step = time.monotonic()
    last_refresh = next_step

    while not should_stop():
        try:
            emulator.step()
        except InputClosedError:
            logger.info(f"Input closed after {steps} steps, stopping")
            break
        except Chip8Error as e:
            logger.error(f"Halted after {steps} steps at PC 0x{emulator.pc:03X}: {e}")
            raise
        steps += 1

        now = time.monotonic()
        if now - last_refresh >= refresh_interval:
            emulator.output.refresh()
            if on_frame is not None:
                on_frame()
            last_refresh = now

        if run_logger is not None:
            run_logger.log_status(steps, emulator.pc)

        next_step += step_period
        delay = next_step - time.monotonic()
        if delay > 0:
            sleep(delay)
        else:
            # Fell behind (e.g. after a blocking key wait); do not try to catch up
            next_step = time.monotonic()

    emulator.output.refresh()
    return steps


def run_headless(emulator: Emulator, steps: int, progress: bool = True) -> int:
    """Execute ``steps`` instructions as fast as possible.

    Returns the number of executed steps. Interpreter faults are logged and
    re-raised.
    """
    progress_bar = build_progress_bar(steps, disable=not progress)
    executed = 0
    try:
        for executed in range(1, steps + 1):
            try:
                emulator.step()
            except Chip8Error as e:
                logger.error(f"Halted after {executed - 1} steps at PC 0x{emulator.pc:03X}: {e}")
                raise
            progress_bar.update(1)
    finally:
        progress_bar.close()
    emulator.output.refresh()
    return executed
