"""Console logging utilities for the CHIP-8 interpreter.

This module provides a small logging system with named loggers, level
filtering and coloured output, plus a run logger that reports progress of
long emulator runs.
"""

import sys
import time
from typing import Any, Dict, Optional, TextIO

from tqdm import tqdm

LEVEL_ORDER = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}

LEVEL_COLORS = {
    "DEBUG": "\033[36m",     # cyan
    "INFO": "\033[32m",      # green
    "WARNING": "\033[33m",   # yellow
    "ERROR": "\033[31m",     # red
    "CRITICAL": "\033[35m",  # magenta
}
RESET = "\033[0m"


class ConsoleLogger:
    """Named logger writing ``[elapsed][LEVEL][name] message`` lines.

    Output goes to ``stream`` (stdout when None). Colours are only used when
    the stream is a terminal.
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "WARNING",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.start_time = time.time()
        self.stream = stream
        self.show_timestamps = show_timestamps
        self.set_level(log_level)
        self.set_colors(use_colors)

    @property
    def output(self) -> TextIO:
        return self.stream or sys.stdout

    def set_level(self, log_level: str):
        level = log_level.upper()
        if level not in LEVEL_ORDER:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER)}"
            )
        self.log_level = level

    def set_colors(self, use_colors: bool):
        isatty = getattr(self.output, "isatty", None)
        self.use_colors = bool(use_colors and isatty is not None and isatty())

    def is_enabled_for(self, level: str) -> bool:
        """Whether a message at ``level`` passes the current threshold."""
        return LEVEL_ORDER.get(level.upper(), 1) >= LEVEL_ORDER[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        parts = []
        if self.show_timestamps:
            parts.append(f"[{time.time() - self.start_time:8.2f}s]")

        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{LEVEL_COLORS.get(level, '')}{level_str}{RESET}"
        parts.append(level_str)
        parts.append(f"[{self.name}] {message}")
        return "".join(parts)

    def log(self, level: str, message: str):
        level = level.upper()
        if self.is_enabled_for(level):
            print(self._format_message(level, message), file=self.output, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


_loggers: Dict[str, ConsoleLogger] = {}
_settings: Dict[str, Any] = {
    "log_level": "WARNING",
    "use_colors": True,
    "show_timestamps": True,
    "stream": None,
}


def get_logger(name: str) -> ConsoleLogger:
    """Return the shared logger for ``name``, creating it on first use."""
    if name not in _loggers:
        _loggers[name] = ConsoleLogger(name, **_settings)
    return _loggers[name]


def configure(
    log_level: Optional[str] = None,
    stream: Optional[TextIO] = None,
    use_colors: Optional[bool] = None,
    show_timestamps: Optional[bool] = None,
):
    """Apply settings to every existing and future logger."""
    if log_level is not None:
        _settings["log_level"] = log_level.upper()
    if stream is not None:
        # Passing sys.stdout restores the default of following sys.stdout
        _settings["stream"] = None if stream is sys.stdout else stream
    if use_colors is not None:
        _settings["use_colors"] = use_colors
    if show_timestamps is not None:
        _settings["show_timestamps"] = show_timestamps

    for logger in _loggers.values():
        logger.stream = _settings["stream"]
        logger.set_level(_settings["log_level"])
        logger.set_colors(_settings["use_colors"])
        logger.show_timestamps = _settings["show_timestamps"]


class RunLogger(ConsoleLogger):
    """Logger for emulator runs with periodic status lines."""

    def __init__(self, name: str = "chip8vm.run", **kwargs):
        settings = dict(_settings)
        settings.update(kwargs)
        super().__init__(name, **settings)
        self.steps = 0
        self.last_log_time = time.time()

    def log_run_start(self, config: Dict[str, Any]):
        """Log run configuration."""
        self.info("=" * 60)
        self.info("Starting emulator with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_status(self, steps: int, pc: int, interval: float = 5.0):
        """Log steps per second and program counter every ``interval`` seconds."""
        current_time = time.time()
        if current_time - self.last_log_time < interval:
            return

        rate = (steps - self.steps) / (current_time - self.last_log_time)
        self.info(f"Step {steps:8d} | PC 0x{pc:03X} | {rate:7.1f} steps/s")
        self.steps = steps
        self.last_log_time = current_time

    def log_run_end(self, steps: int):
        """Log run completion."""
        elapsed = time.time() - self.start_time
        self.info("=" * 60)
        self.info(f"Run finished after {steps} steps in {elapsed:.1f}s")
        self.info("=" * 60)


def build_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar for a fixed number of emulator steps."""
    if desc is None:
        desc = f"Emulating ({n:,} steps)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="step", **kwargs)
