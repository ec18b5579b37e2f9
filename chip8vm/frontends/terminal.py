"""Curses terminal frontend.

Each CHIP-8 pixel is drawn as two character cells inside a box. Keys are
read on a background :class:`~chip8vm.keys.KeyListener` thread.
"""

import curses
from typing import Optional

from chip8vm.constants import KEY_TIMEOUT, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.emulator import Emulator
from chip8vm.io import ArrayOutput
from chip8vm.keys import BufferedInput, KeyBuffer, KeyListener
from chip8vm.logging import RunLogger, get_logger
from chip8vm.runner import run

logger = get_logger("chip8vm.terminal")

QUIT_KEYS = {"q", "\x1b"}
PIXEL_ON = "██"
PIXEL_OFF = "  "


class CursesOutput(ArrayOutput):
    """Framebuffer mirrored to a curses window.

    Changed pixels are written to the window immediately; ``refresh`` pushes
    them to the terminal.
    """

    def __init__(self, window: "curses.window"):
        super().__init__(SCREEN_WIDTH, SCREEN_HEIGHT)
        self.window = window
        self.window.box()

    def _draw(self, x: int, y: int, bit: int):
        self.window.addstr(y + 1, 2 * x + 1, PIXEL_ON if bit else PIXEL_OFF)

    def set(self, x: int, y: int, bit: int) -> None:
        if self.get(x, y) != bit and self._in_bounds(x, y):
            self._draw(x, y, bit)
        super().set(x, y, bit)

    def clear(self) -> None:
        super().clear()
        self.window.erase()
        self.window.box()

    def refresh(self) -> None:
        self.window.refresh()


class CursesKeyReader:
    """Reads single keys from a one-cell window, returning None after ``timeout_ms``."""

    def __init__(self, window: "curses.window", timeout_ms: int = 100):
        self.window = window
        self.window.timeout(timeout_ms)
        self.window.keypad(True)

    def __call__(self) -> Optional[str]:
        code = self.window.getch()
        if code < 0 or code > 0xFF:
            return None
        return chr(code)


def _create_windows(stdscr: "curses.window") -> tuple["curses.window", "curses.window"]:
    rows, cols = stdscr.getmaxyx()
    needed_rows, needed_cols = SCREEN_HEIGHT + 3, 2 * SCREEN_WIDTH + 2
    if rows < needed_rows or cols < needed_cols:
        raise RuntimeError(
            f"Terminal is {cols}x{rows}, need at least {needed_cols}x{needed_rows}"
        )
    screen = curses.newwin(SCREEN_HEIGHT + 2, 2 * SCREEN_WIDTH + 2, 0, 0)
    keys = curses.newwin(1, 1, SCREEN_HEIGHT + 2, 0)
    return screen, keys


def run_terminal(
    program: bytes,
    key_timeout: float = KEY_TIMEOUT,
    seed: int = 0,
    run_logger: Optional[RunLogger] = None,
) -> int:
    """Run a program in the terminal until ``q`` or Escape is pressed. Returns executed steps."""

    def _main(stdscr: "curses.window") -> int:
        curses.curs_set(0)
        screen, key_window = _create_windows(stdscr)
        stdscr.refresh()

        buffer = KeyBuffer(key_timeout)
        listener = KeyListener(CursesKeyReader(key_window), buffer, quit_keys=QUIT_KEYS)
        with listener:
            keys = BufferedInput(buffer, listener.quit_requested)
            emulator = Emulator(keys, CursesOutput(screen), seed=seed)
            emulator.load(program)
            return run(emulator, should_stop=listener.quit_requested.is_set, run_logger=run_logger)

    return curses.wrapper(_main)
