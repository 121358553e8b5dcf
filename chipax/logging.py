"""Console logging utilities for the CHIP-8 machine and its host.

Provides a levelled console logger, the diagnostic hook the engine calls for
unrecognized instructions (safe to call from jit-compiled code through
``jax.debug.callback``), and a tqdm progress bar for headless run loops.
"""

import time
import sys
from typing import Iterable

import jax

from tqdm import tqdm

LEVEL_ORDER = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Levelled console logger printing ``[elapsed][level][name] message`` lines.

    Colors are only used when stdout is a terminal.
    """

    def __init__(self, name: str = "chipax", log_level: str = "INFO", show_timestamps: bool = True):
        self.name = name
        self.show_timestamps = show_timestamps
        self.use_colors = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.start_time = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level '{log_level}'. Supported levels: {list(LEVEL_ORDER)}")
        self.log_level = level

    def log(self, level: str, message: str):
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.log_level]:
            return
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS[level]}{tag}{RESET_COLOR}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", flush=True)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


logger = ConsoleLogger()


def set_log_level(log_level: str):
    """Set the level of the shared ``chipax`` logger."""
    logger.set_level(log_level)


def _log_unrecognized(raw, address):
    logger.warning(f"Unrecognized instruction 0x{int(raw):04X} at pc 0x{int(address):03X}")


def report_unrecognized(raw, address):
    """Report an unrecognized instruction word and its address.

    Works from traced code: the report is emitted when the branch actually runs.
    """
    jax.debug.callback(_log_unrecognized, raw, address)


def progress(n: int, desc: str = None, enabled: bool = True, **tqdm_kwargs) -> Iterable[int]:
    """Iterate ``range(n)`` behind a tqdm progress bar."""
    if desc is None:
        desc = f"Running ({n:,} cycles)"
    return tqdm(range(n), total=n, desc=desc, unit="cycle", disable=not enabled, **tqdm_kwargs)
