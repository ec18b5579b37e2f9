"""Pygame window frontend."""

import os
import threading
from typing import Optional

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from chip8vm.constants import KEY_TIMEOUT, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.emulator import Emulator
from chip8vm.errors import InputClosedError
from chip8vm.io import ArrayOutput
from chip8vm.keys import BufferedInput, KeyBuffer
from chip8vm.logging import RunLogger, get_logger
from chip8vm.rendering import display_to_rgb, create_color_scheme
from chip8vm.runner import run

logger = get_logger("chip8vm.pygame")

KEY_MAP = {
    pygame.K_0: 0x0, pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3,
    pygame.K_4: 0x4, pygame.K_5: 0x5, pygame.K_6: 0x6, pygame.K_7: 0x7,
    pygame.K_8: 0x8, pygame.K_9: 0x9, pygame.K_a: 0xA, pygame.K_b: 0xB,
    pygame.K_c: 0xC, pygame.K_d: 0xD, pygame.K_e: 0xE, pygame.K_f: 0xF,
}

QUIT_KEYS = {pygame.K_ESCAPE, pygame.K_q}


class PygameOutput(ArrayOutput):
    """Framebuffer drawn to a pygame surface on refresh."""

    def __init__(self, screen: pygame.Surface, scale: int = 8, color_scheme: str = "classic"):
        super().__init__(SCREEN_WIDTH, SCREEN_HEIGHT)
        self.screen = screen
        self.scale = scale
        self.on_color, self.off_color = create_color_scheme(color_scheme)

    def refresh(self) -> None:
        rgb = display_to_rgb(self.pixels, self.scale, self.on_color, self.off_color)
        # surfarray is indexed [x, y]
        surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()


class PygameInput(BufferedInput):
    """Keyboard input from the pygame event queue.

    Pygame events can only be read on the thread that owns the window, so events
    are pumped whenever the emulator asks for a key instead of on a listener
    thread.
    """

    def __init__(self, buffer: KeyBuffer, stop_event: Optional[threading.Event] = None, poll_interval: float = 0.02):
        super().__init__(buffer, stop_event or threading.Event(), poll_interval)

    def pump(self):
        """Move pending keyboard events into the buffer."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.stop_event.set()
            elif event.type == pygame.KEYDOWN:
                if event.key in QUIT_KEYS:
                    self.stop_event.set()
                elif event.key in KEY_MAP:
                    self.buffer.push(KEY_MAP[event.key])

    def should_stop(self) -> bool:
        self.pump()
        return self.stop_event.is_set()

    def peek(self) -> Optional[int]:
        self.pump()
        return super().peek()

    def wait(self) -> int:
        logger.info("Waiting for keypress")
        while True:
            if self.should_stop():
                raise InputClosedError("Window closed while waiting for a key")
            key = self.buffer.pop_blocking(timeout=self.poll_interval)
            if key is not None:
                return key


def run_pygame(
    program: bytes,
    scale: int = 8,
    color_scheme: str = "classic",
    key_timeout: float = KEY_TIMEOUT,
    seed: int = 0,
    run_logger: Optional[RunLogger] = None,
) -> int:
    """Run a program in a pygame window until it is closed. Returns executed steps."""
    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
        pygame.display.set_caption("chip8vm")
        # Held keys keep repeating so they stay fresh in the buffer
        pygame.key.set_repeat(100, 50)

        keys = PygameInput(KeyBuffer(key_timeout))
        output = PygameOutput(screen, scale, color_scheme)
        emulator = Emulator(keys, output, seed=seed)
        emulator.load(program)

        return run(emulator, should_stop=keys.should_stop, run_logger=run_logger)
    finally:
        pygame.quit()
