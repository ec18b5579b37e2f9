"""Keyboard handling shared by the interactive frontends.

Keypresses are stored with a timestamp and expire after a short window, so a
key that was tapped a second ago does not count as held down. A background
:class:`KeyListener` thread reads raw keys from the frontend and feeds a
:class:`KeyBuffer`; the emulator only ever sees a :class:`BufferedInput`.
"""

import threading
import time
from collections import deque
from typing import Any, Callable, Container, Optional

from chip8vm.constants import KEY_TIMEOUT
from chip8vm.errors import InputClosedError
from chip8vm.io import EmulatorInput
from chip8vm.logging import get_logger

logger = get_logger("chip8vm.keys")


def key_from_char(char: Any) -> Optional[int]:
    """Map ``0-9``/``a-f`` (either case) to a key code, anything else to None."""
    if not isinstance(char, str) or len(char) != 1:
        return None
    try:
        value = int(char, 16)
    except ValueError:
        return None
    return value


class KeyBuffer:
    """A thread-safe, bounded FIFO of keypresses that expire after ``timeout`` seconds."""

    def __init__(self, timeout: float = KEY_TIMEOUT, maxsize: int = 16, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self.clock = clock
        self._buffer: deque[tuple[int, float]] = deque(maxlen=maxsize)
        self._condition = threading.Condition()

    def _is_fresh(self, timestamp: float) -> bool:
        return self.clock() - timestamp < self.timeout

    def _clean(self):
        while self._buffer and not self._is_fresh(self._buffer[0][1]):
            self._buffer.popleft()

    def __len__(self) -> int:
        with self._condition:
            self._clean()
            return len(self._buffer)

    def push(self, key: int):
        """Push a new keypress, dropping the oldest one if the buffer is full."""
        with self._condition:
            self._clean()
            self._buffer.append((key, self.clock()))
            self._condition.notify()

    def peek(self) -> Optional[int]:
        """Return the most recent fresh keypress without consuming it."""
        with self._condition:
            self._clean()
            if not self._buffer:
                return None
            return self._buffer[-1][0]

    def pop(self) -> Optional[int]:
        """Pop the oldest fresh keypress if one exists."""
        with self._condition:
            self._clean()
            if not self._buffer:
                return None
            return self._buffer.popleft()[0]

    def pop_blocking(self, timeout: Optional[float] = None) -> Optional[int]:
        """Pop the oldest fresh keypress, waiting for one if needed.

        Returns None only if ``timeout`` seconds pass without a fresh key.
        """
        deadline = None if timeout is None else self.clock() + timeout
        with self._condition:
            while True:
                self._clean()
                if self._buffer:
                    return self._buffer.popleft()[0]
                if deadline is None:
                    self._condition.wait()
                    continue
                remaining = deadline - self.clock()
                if remaining <= 0:
                    return None
                self._condition.wait(remaining)

    def clear(self):
        with self._condition:
            self._buffer.clear()


class BufferedInput(EmulatorInput):
    """Emulator input reading from a :class:`KeyBuffer`.

    ``wait`` gives up with :class:`InputClosedError` once ``stop_event`` is set,
    so a run can be shut down while a program waits for a key.
    """

    def __init__(self, buffer: KeyBuffer, stop_event: Optional[threading.Event] = None, poll_interval: float = 0.1):
        self.buffer = buffer
        self.stop_event = stop_event
        self.poll_interval = poll_interval

    def peek(self) -> Optional[int]:
        return self.buffer.peek()

    def wait(self) -> int:
        logger.info("Waiting for keypress")
        while True:
            if self.stop_event is not None and self.stop_event.is_set():
                raise InputClosedError("Input closed while waiting for a key")
            key = self.buffer.pop_blocking(timeout=self.poll_interval)
            if key is not None:
                return key


class KeyListener:
    """Background thread moving keys from ``read_key`` into a buffer.

    ``read_key`` must return within a short time (None when nothing was
    pressed) so the stop flag is observed between reads. Raw keys found in
    ``quit_keys`` set :attr:`quit_requested` instead of reaching the buffer.
    """

    def __init__(
        self,
        read_key: Callable[[], Any],
        buffer: KeyBuffer,
        translate: Callable[[Any], Optional[int]] = key_from_char,
        quit_keys: Container = (),
    ):
        self.read_key = read_key
        self.buffer = buffer
        self.translate = translate
        self.quit_keys = quit_keys
        self.stop_event = threading.Event()
        self.quit_requested = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _listen(self):
        while not self.stop_event.is_set():
            try:
                raw = self.read_key()
            except Exception as e:
                # Nobody can press a key any more; let waiters and the run loop stop
                logger.error(f"Key reader failed, stopping listener: {e!r}")
                self.quit_requested.set()
                return
            if raw is None:
                continue
            if raw in self.quit_keys:
                logger.info(f"Quit key {raw!r} pressed")
                self.quit_requested.set()
                continue
            key = self.translate(raw)
            if key is not None:
                self.buffer.push(key)

    def start(self) -> "KeyListener":
        if self._thread is not None:
            raise RuntimeError("KeyListener already started")
        self._thread = threading.Thread(target=self._listen, name="chip8vm-keys", daemon=True)
        self._thread.start()
        logger.info("Started key listener")
        return self

    def stop(self, timeout: Optional[float] = 1.0):
        """Signal the listener to stop and wait for the thread to finish."""
        self.stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Key listener did not stop in time")
            self._thread = None
        logger.info("Stopped key listener")

    def __enter__(self) -> "KeyListener":
        return self.start()

    def __exit__(self, *exc_info):
        self.stop()
