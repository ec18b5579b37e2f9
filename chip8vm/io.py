"""Input and output devices the emulator talks to."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from flax import struct

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.rng import RandomSource


class EmulatorInput(ABC):
    """An input device providing keys in the range 0..0xF."""

    @abstractmethod
    def peek(self) -> Optional[int]:
        """Return the currently pressed key, or None. Never blocks."""

    @abstractmethod
    def wait(self) -> int:
        """Block until a fresh key is pressed and return it."""


class EmulatorOutput(ABC):
    """A grid of 1-bit pixels the emulator draws into."""

    @abstractmethod
    def set(self, x: int, y: int, bit: int) -> None:
        """Set the pixel at (x, y) to 0 or 1."""

    @abstractmethod
    def get(self, x: int, y: int) -> int:
        """Return the pixel at (x, y)."""

    @abstractmethod
    def clear(self) -> None:
        """Reset every pixel to 0."""

    def refresh(self) -> None:
        """Redraw the whole grid. No effect on pixel state."""


class DummyInput(EmulatorInput):
    """An input device that never provides any input."""

    def peek(self) -> Optional[int]:
        return None

    def wait(self) -> int:
        return 0


class ConstantInput(EmulatorInput):
    """An input device that always presses the same key."""

    def __init__(self, key: int):
        self.key = key

    def peek(self) -> Optional[int]:
        return self.key

    def wait(self) -> int:
        return self.key


class DummyOutput(EmulatorOutput):
    """A sparse output that only keeps track of set coordinates."""

    def __init__(self):
        self.screen: dict[tuple[int, int], int] = {}

    def set(self, x: int, y: int, bit: int) -> None:
        self.screen[(x, y)] = bit

    def get(self, x: int, y: int) -> int:
        return self.screen.get((x, y), 0)

    def clear(self) -> None:
        self.screen.clear()


class ArrayOutput(EmulatorOutput):
    """A fixed-size boolean framebuffer indexed ``[x, y]``.

    Pixels outside the grid are clipped: reads return 0 and writes are dropped.
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = np.zeros((width, height), dtype=np.bool_)

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(self, x: int, y: int, bit: int) -> None:
        if self._in_bounds(x, y):
            self.pixels[x, y] = bool(bit)

    def get(self, x: int, y: int) -> int:
        if not self._in_bounds(x, y):
            return 0
        return int(self.pixels[x, y])

    def clear(self) -> None:
        self.pixels[:] = False


@struct.dataclass
class Devices:
    """The capabilities available to instruction handlers."""
    input: EmulatorInput = struct.field(pytree_node=False)
    output: EmulatorOutput = struct.field(pytree_node=False)
    random: RandomSource = struct.field(pytree_node=False)
