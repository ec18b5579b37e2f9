"""Command line entry point.

Examples::

    chip8vm rom=games/PONG
    chip8vm rom=games/PONG frontend=terminal
    chip8vm rom=tests/test_opcode.ch8 frontend=headless steps=2000 screenshot=out.png
"""

import sys
from dataclasses import dataclass
from typing import Optional

import hydra
from hydra.core.config_store import ConfigStore
from hydra.utils import to_absolute_path
from omegaconf import MISSING, OmegaConf

from chip8vm.constants import KEY_TIMEOUT
from chip8vm.emulator import Emulator
from chip8vm.io import ArrayOutput
from chip8vm.logging import RunLogger, configure
from chip8vm.rendering import save_frame, display_to_text
from chip8vm.runner import run_headless

FRONTENDS = ("pygame", "terminal", "headless")
DEFAULT_TERMINAL_LOG = "chip8vm.log"


@dataclass
class RunConfig:
    rom: str = MISSING
    frontend: str = "pygame"
    steps: int = 1000
    scale: int = 8
    color_scheme: str = "classic"
    key_timeout: float = KEY_TIMEOUT
    log_level: str = "INFO"
    log_file: Optional[str] = None
    seed: int = 0
    screenshot: Optional[str] = None


cs = ConfigStore.instance()
cs.store(name="config", node=RunConfig)


def run_from_config(cfg: RunConfig) -> int:
    """Run a ROM as described by ``cfg``. Returns the number of executed steps."""
    if cfg.frontend not in FRONTENDS:
        raise ValueError(f"Unknown frontend '{cfg.frontend}'. Available: {list(FRONTENDS)}")

    log_file = cfg.log_file
    # Console output would draw over the curses screen
    if log_file is None and cfg.frontend == "terminal":
        log_file = DEFAULT_TERMINAL_LOG

    log_stream = open(to_absolute_path(log_file), "a") if log_file else None
    try:
        configure(log_level=cfg.log_level, stream=log_stream)
        run_logger = RunLogger()
        run_logger.log_run_start(OmegaConf.to_container(cfg))

        with open(to_absolute_path(cfg.rom), "rb") as f:
            program = f.read()

        if cfg.frontend == "pygame":
            from chip8vm.frontends.pygame_frontend import run_pygame
            steps = run_pygame(program, cfg.scale, cfg.color_scheme, cfg.key_timeout, cfg.seed, run_logger)
        elif cfg.frontend == "terminal":
            from chip8vm.frontends.terminal import run_terminal
            steps = run_terminal(program, cfg.key_timeout, cfg.seed, run_logger)
        else:
            output = ArrayOutput()
            emulator = Emulator(output=output, seed=cfg.seed)
            emulator.load(program)
            steps = run_headless(emulator, cfg.steps)
            run_logger.debug("Final screen:\n" + display_to_text(output.pixels))
            if cfg.screenshot:
                save_frame(output, to_absolute_path(cfg.screenshot), cfg.scale, cfg.color_scheme)
                run_logger.info(f"Saved screenshot to {cfg.screenshot}")

        run_logger.log_run_end(steps)
        return steps
    finally:
        if log_stream is not None:
            configure(stream=sys.stdout)
            log_stream.close()


@hydra.main(version_base=None, config_name="config")
def main(cfg: RunConfig) -> None:
    run_from_config(cfg)


if __name__ == "__main__":
    main()
